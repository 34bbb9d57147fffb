from ._families import ADD, SUB, MUL, DIV, FAMILIES, OpFamily
from ._memory import MemoryPlan, resolve_memory_plan
from ._validation import check_scalar, prep_binary, prep_scalar, prep_unary
from ._std_engine import StdEngine

__all__ = [
    "ADD",
    "SUB",
    "MUL",
    "DIV",
    "FAMILIES",
    OpFamily.__name__,
    MemoryPlan.__name__,
    resolve_memory_plan.__name__,
    prep_binary.__name__,
    prep_unary.__name__,
    prep_scalar.__name__,
    check_scalar.__name__,
    StdEngine.__name__,
]
