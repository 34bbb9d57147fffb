from ._arithmetic import TensorMixinArithmetic

__all__ = [
    TensorMixinArithmetic.__name__,
]
