from unittest import TestCase
import unittest

import numpy as np

from tensorengine.domain._options import UnsafeInPlace, WithIncr, WithReuse
from tensorengine.infrastructure import EngineSettings
from tensorengine.infrastructure.engine import StdEngine
from tensorengine.infrastructure.ops import NumpyArithEngine
from tensorengine.infrastructure.tensor import DenseTensor


class _RecordingEngine(NumpyArithEngine):
    """NumPy engine that records which add entrypoints were invoked."""

    def __init__(self):
        super().__init__(EngineSettings())
        self.calls = []

    def add(self, *args):
        self.calls.append("add")
        return super().add(*args)

    def add_incr(self, *args):
        self.calls.append("add_incr")
        return super().add_incr(*args)

    def add_iter(self, *args):
        self.calls.append("add_iter")
        return super().add_iter(*args)

    def add_iter_incr(self, *args):
        self.calls.append("add_iter_incr")
        return super().add_iter_incr(*args)


class TestFlatPaths(TestCase):
    """Contiguous operands and destinations use the header-to-header kernels."""

    def setUp(self):
        self.rec = _RecordingEngine()
        self.eng = StdEngine(self.rec, settings=EngineSettings())
        self.np_a = np.arange(6, dtype=np.float32).reshape(2, 3)
        self.np_b = np.full((2, 3), 10, dtype=np.float32)
        self.a = DenseTensor.from_numpy(self.np_a)
        self.b = DenseTensor.from_numpy(self.np_b)

    def test_safe(self):
        out = self.eng.add(self.a, self.b).unwrap()
        self.assertEqual(self.rec.calls, ["add"])
        self.assertIsNot(out, self.a)
        self.assertNotEqual(out.hdr().ptr, self.a.hdr().ptr)
        np.testing.assert_array_equal(out.to_numpy(), self.np_a + self.np_b)
        np.testing.assert_array_equal(self.a.to_numpy(), self.np_a)
        np.testing.assert_array_equal(self.b.to_numpy(), self.np_b)

    def test_unsafe(self):
        ptr = self.a.hdr().ptr
        out = self.eng.add(self.a, self.b, UnsafeInPlace()).unwrap()
        self.assertEqual(self.rec.calls, ["add"])
        self.assertIs(out, self.a)
        self.assertEqual(out.hdr().ptr, ptr)
        np.testing.assert_array_equal(self.a.to_numpy(), self.np_a + self.np_b)

    def test_reuse(self):
        c = DenseTensor.full((2, 3), 99.0)
        out = self.eng.add(self.a, self.b, WithReuse(c)).unwrap()
        self.assertEqual(self.rec.calls, ["add"])
        self.assertIs(out, c)
        np.testing.assert_array_equal(c.to_numpy(), self.np_a + self.np_b)
        np.testing.assert_array_equal(self.a.to_numpy(), self.np_a)

    def test_reuse_with_flat_shape(self):
        c = DenseTensor((6,))
        out = self.eng.add(self.a, self.b, WithReuse(c)).unwrap()
        self.assertIs(out, c)
        self.assertEqual(out.shape, (6,))
        np.testing.assert_array_equal(c.to_numpy(), (self.np_a + self.np_b).reshape(-1))

    def test_incr(self):
        c = DenseTensor.full((2, 3), 1.0)
        out = self.eng.add(self.a, self.b, WithIncr(c)).unwrap()
        self.assertEqual(self.rec.calls, ["add_incr"])
        self.assertIs(out, c)
        np.testing.assert_array_equal(c.to_numpy(), 1.0 + self.np_a + self.np_b)
        np.testing.assert_array_equal(self.a.to_numpy(), self.np_a)

    def test_reuse_second_operand_reads_it_before_overwriting(self):
        a = DenseTensor.from_numpy(np.array([1.0, 2.0, 3.0], np.float32))
        b = DenseTensor.from_numpy(np.array([10.0, 20.0, 30.0], np.float32))
        out = self.eng.add(a, b, WithReuse(b)).unwrap()
        self.assertEqual(self.rec.calls, ["add"])
        self.assertIs(out, b)
        np.testing.assert_array_equal(b.to_numpy(), [11.0, 22.0, 33.0])
        np.testing.assert_array_equal(a.to_numpy(), [1.0, 2.0, 3.0])

    def test_reuse_second_operand_non_commutative(self):
        out = self.eng.sub(self.a, self.b, WithReuse(self.b)).unwrap()
        self.assertIs(out, self.b)
        np.testing.assert_array_equal(self.b.to_numpy(), self.np_a - self.np_b)

    def test_incr_takes_precedence_over_unsafe(self):
        c = DenseTensor((2, 3))
        out = self.eng.add(self.a, self.b, UnsafeInPlace(), WithIncr(c)).unwrap()
        self.assertIs(out, c)
        np.testing.assert_array_equal(self.a.to_numpy(), self.np_a)

    def test_reuse_takes_precedence_over_unsafe(self):
        c = DenseTensor((2, 3))
        out = self.eng.add(self.a, self.b, WithReuse(c), UnsafeInPlace()).unwrap()
        self.assertIs(out, c)
        np.testing.assert_array_equal(self.a.to_numpy(), self.np_a)


class TestIteratorPaths(TestCase):
    """A non-contiguous operand or destination forces the iterator kernels."""

    def setUp(self):
        self.rec = _RecordingEngine()
        self.eng = StdEngine(self.rec, settings=EngineSettings())
        self.np_base = np.arange(6, dtype=np.float32).reshape(2, 3)
        self.base = DenseTensor.from_numpy(self.np_base)
        self.a = self.base.T  # (3, 2), strided
        self.np_b = np.arange(6, dtype=np.float32).reshape(3, 2) * 100
        self.b = DenseTensor.from_numpy(self.np_b)
        self.expected = self.np_base.T + self.np_b

    def test_safe(self):
        out = self.eng.add(self.a, self.b).unwrap()
        self.assertEqual(self.rec.calls, ["add_iter"])
        self.assertTrue(out.is_contiguous())
        np.testing.assert_array_equal(out.to_numpy(), self.expected)
        np.testing.assert_array_equal(self.base.to_numpy(), self.np_base)

    def test_unsafe_writes_through_view(self):
        out = self.eng.add(self.a, self.b, UnsafeInPlace()).unwrap()
        self.assertEqual(self.rec.calls, ["add_iter"])
        self.assertIs(out, self.a)
        np.testing.assert_array_equal(self.a.to_numpy(), self.expected)
        np.testing.assert_array_equal(self.base.to_numpy(), self.expected.T)

    def test_reuse(self):
        c = DenseTensor((3, 2))
        out = self.eng.add(self.a, self.b, WithReuse(c)).unwrap()
        self.assertEqual(self.rec.calls, ["add_iter"])
        self.assertIs(out, c)
        np.testing.assert_array_equal(c.to_numpy(), self.expected)
        np.testing.assert_array_equal(self.base.to_numpy(), self.np_base)

    def test_incr(self):
        c = DenseTensor.full((3, 2), 0.5)
        out = self.eng.add(self.a, self.b, WithIncr(c)).unwrap()
        self.assertEqual(self.rec.calls, ["add_iter_incr"])
        self.assertIs(out, c)
        np.testing.assert_array_equal(c.to_numpy(), 0.5 + self.expected)

    def test_reuse_second_operand(self):
        out = self.eng.add(self.a, self.b, WithReuse(self.b)).unwrap()
        self.assertEqual(self.rec.calls, ["add_iter"])
        self.assertIs(out, self.b)
        np.testing.assert_array_equal(self.b.to_numpy(), self.expected)
        np.testing.assert_array_equal(self.base.to_numpy(), self.np_base)

    def test_reuse_strided_second_operand(self):
        a = DenseTensor.from_numpy(np.ones((3, 2), np.float32))
        backing = DenseTensor.from_numpy(np.arange(6, dtype=np.float32).reshape(2, 3))
        b = backing.T  # (3, 2), strided
        out = self.eng.add(a, b, WithReuse(b)).unwrap()
        self.assertEqual(self.rec.calls, ["add_iter"])
        self.assertIs(out, b)
        np.testing.assert_array_equal(b.to_numpy(), self.np_base.T + 1)

    def test_strided_reuse_with_contiguous_operands(self):
        a = DenseTensor.from_numpy(self.np_base)
        b = DenseTensor.from_numpy(np.ones((2, 3), np.float32))
        backing = DenseTensor((3, 2))
        c = backing.T  # (2, 3), strided
        out = self.eng.add(a, b, WithReuse(c)).unwrap()
        self.assertEqual(self.rec.calls, ["add_iter"])
        self.assertIs(out, c)
        np.testing.assert_array_equal(c.to_numpy(), self.np_base + 1)
        np.testing.assert_array_equal(backing.to_numpy(), (self.np_base + 1).T)

    def test_strided_incr_destination(self):
        a = DenseTensor.from_numpy(self.np_base)
        b = DenseTensor.from_numpy(np.ones((2, 3), np.float32))
        backing = DenseTensor.from_numpy(np.full((3, 2), 2.0, np.float32))
        c = backing.T
        self.eng.add(a, b, WithIncr(c)).unwrap()
        self.assertEqual(self.rec.calls, ["add_iter_incr"])
        np.testing.assert_array_equal(c.to_numpy(), self.np_base + 3)

    def test_broadcast_operands(self):
        row = DenseTensor.from_numpy(np.array([1.0, 2.0, 3.0], np.float32))
        a = row.broadcast_to((2, 3))
        b = DenseTensor.from_numpy(self.np_base)

        out = self.eng.add(a, b).unwrap()
        np.testing.assert_array_equal(out.to_numpy(), self.np_base + [1.0, 2.0, 3.0])

        out = self.eng.add(b, a).unwrap()
        np.testing.assert_array_equal(out.to_numpy(), self.np_base + [1.0, 2.0, 3.0])
        self.assertEqual(self.rec.calls, ["add_iter", "add_iter"])


if __name__ == "__main__":
    unittest.main()
