"""
Runtime settings for the dispatch and compute engines.

Settings are read from environment variables, opt-in and defaulting to the
quiet behaviour:

- ``TENSORENGINE_WARN_UNSAFE``: when truthy, every unsafe in-place operation
  emits a `RuntimeWarning` naming the overwritten operand.
- ``TENSORENGINE_FP_ERRORS``: NumPy floating-point error policy used by the
  NumPy compute engine (``ignore``, ``warn`` or ``raise``; default ``warn``).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

_FALSY = ("0", "", "false", "False", "FALSE", "no", "off")

FP_ERROR_POLICIES = ("ignore", "warn", "raise")


def _env_flag(env: Mapping[str, str], name: str, default: str = "0") -> bool:
    return env.get(name, default).strip() not in _FALSY


@dataclass(frozen=True)
class EngineSettings:
    """
    Engine settings.

    Attributes
    ----------
    warn_unsafe : bool
        Emit a `RuntimeWarning` when an operand is overwritten in place.
    fp_errors : str
        One of ``"ignore"``, ``"warn"``, ``"raise"``.

    Raises
    ------
    ValueError
        If `fp_errors` is not a supported policy.
    """

    warn_unsafe: bool = False
    fp_errors: str = "warn"

    def __post_init__(self) -> None:
        if self.fp_errors not in FP_ERROR_POLICIES:
            raise ValueError(
                f"Invalid floating-point error policy {self.fp_errors!r}; "
                f"expected one of {FP_ERROR_POLICIES}"
            )

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        """
        Build settings from environment variables.

        Parameters
        ----------
        env : Optional[Mapping[str, str]]
            Mapping to read from. Defaults to ``os.environ``.
        """
        env = os.environ if env is None else env
        return cls(
            warn_unsafe=_env_flag(env, "TENSORENGINE_WARN_UNSAFE"),
            fp_errors=env.get("TENSORENGINE_FP_ERRORS", "warn").strip().lower()
            or "warn",
        )
