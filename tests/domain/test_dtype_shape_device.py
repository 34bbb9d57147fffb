from unittest import TestCase
import unittest

import numpy as np

from tensorengine.domain._device import Device, DeviceType
from tensorengine.domain._dtype import Dtype, DtypeKind, is_number, scalar_kind
from tensorengine.domain._shape import normalize_shape, row_major_strides, total_size


class TestDtype(TestCase):
    def test_kinds(self):
        self.assertIs(Dtype(np.dtype(np.float32)).kind, DtypeKind.FLOAT)
        self.assertIs(Dtype(np.dtype(np.float64)).kind, DtypeKind.FLOAT)
        self.assertIs(Dtype(np.dtype(np.int32)).kind, DtypeKind.INT)
        self.assertIs(Dtype(np.dtype(np.uint8)).kind, DtypeKind.UINT)
        self.assertIs(Dtype(np.dtype(np.complex64)).kind, DtypeKind.COMPLEX)
        self.assertIs(Dtype(np.dtype(np.bool_)).kind, DtypeKind.BOOL)
        self.assertIs(Dtype(np.dtype("U3")).kind, DtypeKind.OTHER)

    def test_is_number(self):
        self.assertTrue(is_number(Dtype(np.dtype(np.float32))))
        self.assertTrue(is_number(Dtype(np.dtype(np.int64))))
        self.assertFalse(is_number(Dtype(np.dtype(np.bool_))))
        self.assertFalse(is_number(Dtype(np.dtype("U3"))))

    def test_scalar_kind(self):
        self.assertIs(scalar_kind(True), DtypeKind.BOOL)
        self.assertIs(scalar_kind(3), DtypeKind.INT)
        self.assertIs(scalar_kind(2.5), DtypeKind.FLOAT)
        self.assertIs(scalar_kind(1j), DtypeKind.COMPLEX)
        self.assertIs(scalar_kind(np.uint8(3)), DtypeKind.UINT)
        self.assertIs(scalar_kind(np.float32(1.0)), DtypeKind.FLOAT)
        self.assertIs(scalar_kind(np.bool_(False)), DtypeKind.BOOL)
        self.assertIs(scalar_kind("3"), DtypeKind.OTHER)
        self.assertIs(scalar_kind(np.ones(3)), DtypeKind.OTHER)

    def test_equality_is_by_concrete_type(self):
        self.assertEqual(Dtype(np.dtype(np.float32)), Dtype(np.dtype(np.float32)))
        self.assertNotEqual(Dtype(np.dtype(np.float32)), Dtype(np.dtype(np.float64)))
        self.assertEqual(str(Dtype(np.dtype(np.int16))), "int16")

    def test_rejects_non_dtype(self):
        with self.assertRaises(TypeError):
            Dtype(3)


class TestShape(TestCase):
    def test_total_size(self):
        self.assertEqual(total_size((2, 3, 4)), 24)
        self.assertEqual(total_size(()), 1)
        self.assertEqual(total_size((0, 5)), 0)

    def test_row_major_strides(self):
        self.assertEqual(row_major_strides((2, 3, 4)), (12, 4, 1))
        self.assertEqual(row_major_strides(()), ())

    def test_normalize_shape(self):
        self.assertEqual(normalize_shape([2, np.int64(3)]), (2, 3))
        with self.assertRaises(ValueError):
            normalize_shape((2, -1))
        with self.assertRaises(TypeError):
            normalize_shape((2, 3.5))


class TestDevice(TestCase):
    def test_cpu_is_natively_accessible(self):
        d = Device("cpu")
        self.assertIs(d.type, DeviceType.CPU)
        self.assertTrue(d.is_natively_accessible())

    def test_cuda_is_not_natively_accessible(self):
        d = Device("cuda:1")
        self.assertTrue(d.is_cuda())
        self.assertEqual(d.index, 1)
        self.assertFalse(d.is_natively_accessible())
        self.assertEqual(str(d), "cuda:1")

    def test_equality_and_hash(self):
        self.assertEqual(Device("cpu"), Device("cpu"))
        self.assertNotEqual(Device("cuda:0"), Device("cuda:1"))
        self.assertEqual(len({Device("cpu"), Device("cpu")}), 1)

    def test_invalid_device_string(self):
        with self.assertRaises(ValueError):
            Device("gpu")


if __name__ == "__main__":
    unittest.main()
