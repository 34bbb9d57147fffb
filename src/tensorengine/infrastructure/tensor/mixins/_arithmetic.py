"""
Arithmetic operator mixin for dense tensors.

Python operators route through the default dispatch engine:

- ``a + b``, ``a - b``, ``a * b``, ``a / b`` use the safe default mode and
  return a fresh tensor; neither operand is touched.
- ``a += b`` and friends use the unsafe in-place mode: the left operand's
  buffer is overwritten and the same object is returned.
- Python scalars on the right go through the tensor-scalar path; scalars on
  the left are lifted to a tensor shaped like the right operand. Either way
  a scalar whose kind ranks above the tensor's (``2.5 - int_tensor``) is a
  `TypeMismatchError` rather than a silent cast.

The functional API lives in :mod:`tensorengine.api`; it is imported lazily
here because the engine itself imports the tensor types.
"""

from __future__ import annotations

from typing import Any, Union

from ....domain._dtype import is_number

Number = Union[int, float, complex]


def _is_scalar(x: Any) -> bool:
    return isinstance(x, (int, float, complex)) and not isinstance(x, bool)


class TensorMixinArithmetic:
    """
    Elementwise arithmetic operators.

    Notes
    -----
    - No broadcasting: tensor operands must have equal shapes.
    - Failures raise the engine's error types; a NoOp (non-numeric operands)
      returns the left operand unchanged.
    """

    def _as_tensor_like(self, x: Number, op: str) -> Any:
        """
        Lift a Python scalar to a dense tensor shaped like `self`.

        Raises
        ------
        TypeMismatchError
            If `self` is numeric and `x` would lose its kind when cast to
            its dtype.
        """
        from ...engine import check_scalar

        if is_number(self.dtype):
            check_scalar(self.dtype, x, op)
        return type(self).full(self.shape, x, dtype=self.dtype.type)

    # ----------------------------
    # Addition
    # ----------------------------
    def __add__(self, other: Any) -> Any:
        from .... import api

        if _is_scalar(other):
            return api.add_scalar(self, other)
        return api.add(self, other)

    def __radd__(self, other: Number) -> Any:
        return self.__add__(other)

    def __iadd__(self, other: Any) -> Any:
        from .... import api

        if _is_scalar(other):
            return api.add_scalar_(self, other)
        return api.add_(self, other)

    # ----------------------------
    # Subtraction
    # ----------------------------
    def __sub__(self, other: Any) -> Any:
        from .... import api

        if _is_scalar(other):
            return api.sub_scalar(self, other)
        return api.sub(self, other)

    def __rsub__(self, other: Number) -> Any:
        return self._as_tensor_like(other, "sub").__sub__(self)

    def __isub__(self, other: Any) -> Any:
        from .... import api

        if _is_scalar(other):
            return api.sub_scalar_(self, other)
        return api.sub_(self, other)

    # ----------------------------
    # Multiplication
    # ----------------------------
    def __mul__(self, other: Any) -> Any:
        from .... import api

        if _is_scalar(other):
            return api.mul_scalar(self, other)
        return api.mul(self, other)

    def __rmul__(self, other: Number) -> Any:
        return self.__mul__(other)

    def __imul__(self, other: Any) -> Any:
        from .... import api

        if _is_scalar(other):
            return api.mul_scalar_(self, other)
        return api.mul_(self, other)

    # ----------------------------
    # True division
    # ----------------------------
    def __truediv__(self, other: Any) -> Any:
        from .... import api

        if _is_scalar(other):
            return api.div_scalar(self, other)
        return api.div(self, other)

    def __rtruediv__(self, other: Number) -> Any:
        return self._as_tensor_like(other, "div").__truediv__(self)

    def __itruediv__(self, other: Any) -> Any:
        from .... import api

        if _is_scalar(other):
            return api.div_scalar_(self, other)
        return api.div_(self, other)
