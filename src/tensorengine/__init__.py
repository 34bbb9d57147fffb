"""
tensorengine: dispatch and memory-policy engine for elementwise tensor
arithmetic over dense and sparse operands.

Quick start
-----------
>>> import numpy as np
>>> from tensorengine import DenseTensor, StdEngine, WithReuse
>>> a = DenseTensor.from_numpy(np.arange(6.0).reshape(2, 3))
>>> b = DenseTensor.from_numpy(np.ones((2, 3)))
>>> StdEngine().add(a, b).unwrap().to_numpy()
array([[1., 2., 3.],
       [4., 5., 6.]])
"""

from .domain import (
    Device,
    Dtype,
    DtypeKind,
    TensorKind,
    TensorEngineError,
    InaccessibleDataError,
    TypeMismatchError,
    ShapeMismatchError,
    MethodNotImplementedError,
    TypeNotImplementedError,
    ConflictingOptionsError,
    Safe,
    UnsafeInPlace,
    WithReuse,
    WithIncr,
    OperationConfig,
    parse_func_opts,
    NOOP,
    OpResult,
    OpStatus,
)
from .infrastructure import EngineSettings
from .infrastructure.tensor import DenseTensor, CSTensor, Header
from .infrastructure.ops import NumpyArithEngine
from .infrastructure.engine import StdEngine, ADD, SUB, MUL, DIV
from . import api

__version__ = "0.1.0"
