from ._header import Header, copy_header, copy_header_iter
from ._iterators import FlatIterator, FlatSparseIterator, SPARSE_ZERO
from ._dense import DenseTensor
from ._sparse import CSTensor

__all__ = [
    Header.__name__,
    copy_header.__name__,
    copy_header_iter.__name__,
    FlatIterator.__name__,
    FlatSparseIterator.__name__,
    "SPARSE_ZERO",
    DenseTensor.__name__,
    CSTensor.__name__,
]
