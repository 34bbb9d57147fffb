from ._device import Device, DeviceType
from ._dtype import Dtype, DtypeKind, is_number, scalar_kind
from ._errors import (
    TensorEngineError,
    InaccessibleDataError,
    TypeMismatchError,
    ShapeMismatchError,
    MethodNotImplementedError,
    TypeNotImplementedError,
    ConflictingOptionsError,
)
from ._options import (
    FuncOpt,
    Safe,
    UnsafeInPlace,
    WithReuse,
    WithIncr,
    OperationConfig,
    parse_func_opts,
)
from ._result import NOOP, OpResult, OpStatus
from ._shape import Shape, total_size, row_major_strides
from ._tensor import TensorKind, ITensor, IDenseTensor, ISparseTensor, IHeader, IIterator
from ._engine import IArithEngine
