from .arith_cpu import NumpyArithEngine

__all__ = [NumpyArithEngine.__name__]
