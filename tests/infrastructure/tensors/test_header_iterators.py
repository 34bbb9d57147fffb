from unittest import TestCase
import unittest

import numpy as np

from tensorengine.domain._tensor import IHeader, IIterator
from tensorengine.infrastructure.tensor import (
    SPARSE_ZERO,
    FlatIterator,
    FlatSparseIterator,
    Header,
    copy_header,
    copy_header_iter,
)


class TestHeader(TestCase):
    def test_header_requires_flat_contiguous_array(self):
        with self.assertRaises(ValueError):
            Header(np.zeros((2, 2)))
        with self.assertRaises(ValueError):
            Header(np.zeros(6)[::2])
        with self.assertRaises(ValueError):
            Header([1.0, 2.0])  # type: ignore[arg-type]

    def test_header_shares_memory(self):
        buf = np.arange(4, dtype=np.int32)
        h = Header(buf)
        self.assertIsInstance(h, IHeader)
        self.assertEqual(h.length, 4)
        self.assertEqual(len(h), 4)
        self.assertEqual(h.ptr, buf.ctypes.data)
        h.data[1] = 9
        self.assertEqual(buf[1], 9)

    def test_from_scalar_casts(self):
        h = Header.from_scalar(2.7, np.int32)
        self.assertEqual(h.length, 1)
        self.assertEqual(h.data.dtype, np.int32)
        self.assertEqual(int(h.data[0]), 2)

    def test_copy_header_copies_min_length(self):
        dst = Header(np.zeros(3))
        n = copy_header(dst, Header(np.arange(5.0)))
        self.assertEqual(n, 3)
        np.testing.assert_array_equal(dst.data, [0.0, 1.0, 2.0])

    def test_copy_header_iter_follows_layouts(self):
        src = Header(np.arange(6.0))
        dst = Header(np.zeros(6))
        # transposed source read into a contiguous destination
        n = copy_header_iter(
            dst, src, FlatIterator((3, 2), (2, 1)), FlatIterator((3, 2), (1, 3))
        )
        self.assertEqual(n, 6)
        np.testing.assert_array_equal(dst.data, [0, 3, 1, 4, 2, 5])

    def test_copy_header_iter_length_mismatch(self):
        with self.assertRaises(ValueError):
            copy_header_iter(
                Header(np.zeros(4)),
                Header(np.zeros(6)),
                FlatIterator((4,), (1,)),
                FlatIterator((6,), (1,)),
            )


class TestFlatIterator(TestCase):
    def test_row_major(self):
        it = FlatIterator((2, 3), (3, 1))
        self.assertIsInstance(it, IIterator)
        self.assertEqual(list(it), [0, 1, 2, 3, 4, 5])
        self.assertTrue(it.done)

    def test_transposed_and_offset(self):
        self.assertEqual(list(FlatIterator((3, 2), (1, 3))), [0, 3, 1, 4, 2, 5])
        self.assertEqual(list(FlatIterator((2,), (1,), offset=4)), [4, 5])

    def test_broadcast_stride_zero(self):
        self.assertEqual(list(FlatIterator((2, 3), (0, 1))), [0, 1, 2, 0, 1, 2])

    def test_scalar_shape_yields_single_offset(self):
        self.assertEqual(list(FlatIterator((), ())), [0])

    def test_next_reset_and_offsets(self):
        it = FlatIterator((4,), (1,))
        self.assertEqual(next(it), 0)
        np.testing.assert_array_equal(it.offsets(), [1, 2, 3])
        self.assertTrue(it.done)
        with self.assertRaises(StopIteration):
            next(it)
        it.reset()
        self.assertFalse(it.done)
        self.assertEqual(len(it), 4)
        np.testing.assert_array_equal(it.offsets(), [0, 1, 2, 3])

    def test_rank_mismatch(self):
        with self.assertRaises(ValueError):
            FlatIterator((2, 3), (1,))


class TestFlatSparseIterator(TestCase):
    def test_implicit_zeros(self):
        it = FlatSparseIterator((2, 2), np.array([1]), np.array([0]))
        self.assertEqual(it.nnz, 1)
        self.assertEqual(list(it), [SPARSE_ZERO, SPARSE_ZERO, 0, SPARSE_ZERO])

    def test_requires_2d(self):
        with self.assertRaises(ValueError):
            FlatSparseIterator((4,), np.array([]), np.array([]))


if __name__ == "__main__":
    unittest.main()
