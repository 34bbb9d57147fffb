from unittest import TestCase
import unittest

import numpy as np

from tensorengine.domain._tensor import ISparseTensor, TensorKind
from tensorengine.infrastructure.tensor import SPARSE_ZERO, CSTensor, DenseTensor


class TestCSTensor(TestCase):
    def setUp(self):
        self.dense = np.array([[0.0, 5.0, 0.0], [7.0, 0.0, 8.0]])

    def test_from_numpy_csr(self):
        s = CSTensor.from_numpy(self.dense)
        self.assertIs(s.kind, TensorKind.SPARSE)
        self.assertTrue(s.is_csr)
        self.assertEqual(s.shape, (2, 3))
        self.assertEqual(s.nnz, 3)
        np.testing.assert_array_equal(s.indptr, [0, 1, 3])
        np.testing.assert_array_equal(s.indices, [1, 0, 2])
        np.testing.assert_array_equal(s.hdr().data, [5.0, 7.0, 8.0])
        np.testing.assert_array_equal(s.to_numpy(), self.dense)

    def test_from_numpy_csc(self):
        s = CSTensor.from_numpy(self.dense, is_csr=False)
        self.assertFalse(s.is_csr)
        np.testing.assert_array_equal(s.indptr, [0, 1, 2, 3])
        np.testing.assert_array_equal(s.indices, [1, 0, 1])
        np.testing.assert_array_equal(s.hdr().data, [7.0, 5.0, 8.0])
        np.testing.assert_array_equal(s.to_numpy(), self.dense)

    def test_iterator_walks_row_major_positions(self):
        s = CSTensor.from_numpy(self.dense)
        z = SPARSE_ZERO
        self.assertEqual(list(s.iterator()), [z, 0, z, 1, z, 2])

        c = CSTensor.from_numpy(self.dense, is_csr=False)
        # CSC stores 7 (row 1, col 0) first
        self.assertEqual(list(c.iterator()), [z, 1, z, 0, z, 2])

    def test_invalid_structure_rejected(self):
        with self.assertRaises(ValueError):
            CSTensor((2, 3), [0, 1], [0], [1.0])
        with self.assertRaises(ValueError):
            CSTensor((2, 3), [0, 2, 1], [0, 1], [1.0, 2.0])
        with self.assertRaises(ValueError):
            CSTensor((2, 3), [0, 1, 1], [3], [1.0])
        with self.assertRaises(ValueError):
            CSTensor((2, 3, 1), [0, 0, 0], [], [])

    def test_to_dense_and_clone(self):
        s = CSTensor.from_numpy(self.dense)
        d = s.to_dense()
        self.assertIsInstance(d, DenseTensor)
        np.testing.assert_array_equal(d.to_numpy(), self.dense)

        c = s.clone()
        c.hdr().data[0] = -1.0
        self.assertEqual(s.hdr().data[0], 5.0)

    def test_satisfies_protocol(self):
        self.assertIsInstance(CSTensor.from_numpy(self.dense), ISparseTensor)


if __name__ == "__main__":
    unittest.main()
