"""
State-based method dispatch (a.k.a. "control-path" templating) via decorators.

This module provides a small mechanism for routing a single method call to
one of several registered implementations based on the runtime value of a
state attribute on the receiving object.

Core idea
---------
- You define a *base* method on a class (its signature becomes the canonical
  one).
- You register multiple "control paths" for that method, each keyed by
  ``(ClassName, MethodName, StateVal)``.
- At runtime, the wrapper reads ``getattr(self, state_attr)`` and dispatches
  to the implementation registered for that value.

In tensorengine this is how the execution dispatcher routes an operand pair
to the implementation registered for its ``(TensorKind, TensorKind)`` pair.

Important notes
---------------
- Decorating a control path mutates the class: the base method is replaced
  with a dispatching wrapper on first registration.
- Registered implementations are stored in a closure-local mapping owned by
  each builder. Different builders do not share mappings.
- Implementations are called like instance methods, ``sub_method(self, ...)``.
"""

from typing import (
    Callable,
    Hashable,
    Optional,
    Union,
    Dict,
    Type,
    Any,
)
from typing_extensions import ParamSpec, TypeVar
from collections import namedtuple
from functools import wraps

P = ParamSpec("P")
R = TypeVar("R")

TrapException = Union[Type[BaseException], Callable[[Callable[..., Any], Any], BaseException]]


def create_path_builder(
    state_attr: str = "_state",
) -> Callable[
    [Type, Callable[P, R], Hashable, Optional[TrapException]],
    Callable[[Callable[P, R]], Callable[P, R]],
]:
    """
    Create a "path builder" used to register stateful control paths.

    Parameters
    ----------
    state_attr : str, optional
        Name of the attribute read on the receiving object to select a path.
        Defaults to ``"_state"``.

    Returns
    -------
    Callable
        ``templator(cls, method, state, trap_exception=None) -> decorator``.

    Examples
    --------
    ::

        path = create_path_builder("mode")

        class Machine:
            def run(self, x: int) -> int: ...

        @path(Machine, Machine.run, "fast")
        def run_fast(self, x: int) -> int:
            return x
    """

    MethodKey = namedtuple(
        "MethodKey",
        [
            "ClassName",
            "MethodName",
            "StateVal",
        ],
    )

    methods_map: Dict[MethodKey, Callable] = {}
    """Mapping from (class, method, state) keys to registered implementations."""

    def templator(
        cls: Type,
        method: Callable[P, R],
        state: Hashable,
        trap_exception: Optional[TrapException] = None,
    ) -> Callable[[Callable[P, R]], Callable[P, R]]:
        """
        Build a decorator that registers a control path implementation.

        Parameters
        ----------
        cls : Type
            Class whose method is replaced by the dispatching wrapper.
        method : Callable[P, R]
            The base method being templated.
        state : Hashable
            State value selecting the decorated implementation.
        trap_exception : Optional[TrapException]
            What to raise when no path matches the runtime state:

            - None: `NotImplementedError`
            - an exception class: ``raise trap_exception()``
            - any other callable: ``raise trap_exception(method, state)``

            The most recent registration for a method decides the trap.

        Raises
        ------
        TypeError
            If `state` is not hashable.
        """
        try:
            hash(state)
        except TypeError:
            raise TypeError(f"Control path state must be hashable. Got {state!r}")

        smk: MethodKey = MethodKey(cls.__name__, method.__name__, state)

        def _get_cur_smk(self: Any) -> MethodKey:
            return MethodKey(cls.__name__, method.__name__, getattr(self, state_attr))

        def _raise_missing(cur_state: Any) -> None:
            if trap_exception is None:
                raise NotImplementedError(
                    "Missing control path ({}={!r}) for {}".format(
                        state_attr, cur_state, method.__qualname__
                    )
                )
            if isinstance(trap_exception, type) and issubclass(
                trap_exception, BaseException
            ):
                raise trap_exception()
            raise trap_exception(method, cur_state)

        def decorator(sub_method: Callable[P, R]) -> Callable[P, R]:
            methods_map[smk] = sub_method

            @wraps(method)
            def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
                if not hasattr(self, state_attr):
                    raise NotImplementedError(
                        "{} is missing attribute {!r}".format(type(self), state_attr)
                    )
                try:
                    sm = methods_map.get(_get_cur_smk(self))
                except TypeError:
                    # unhashable runtime state never matches a registered path
                    sm = None
                if sm is not None:
                    return sm(self, *args, **kwargs)
                _raise_missing(getattr(self, state_attr))

            setattr(cls, method.__name__, wrapper)
            return sub_method

        return decorator

    return templator
