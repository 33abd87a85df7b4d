# src/optregime/options/models/option_base.py
from __future__ import annotations

import math
from enum import Enum


class OptionType(str, Enum):
    """European option right."""

    CALL = "call"
    PUT = "put"

    @classmethod
    def from_flag(cls, is_call: bool) -> "OptionType":
        return cls.CALL if is_call else cls.PUT



class InvalidOptionInputError(ValueError):
    """Raised when a pricing input lies outside the model's numeric domain."""

    def __init__(self, name: str, value, constraint: str = "must be > 0"):
        self.name = name
        self.value = value
        super().__init__(f"{name}={value!r} {constraint}")


def require_positive(**values: float) -> None:
    """
    Fail fast on non-positive or non-finite inputs.

    Keyword names are used in the error message, e.g.
    require_positive(S=100.0, sigma=0.0) -> "sigma=0.0 must be > 0".
    """
    for name, value in values.items():
        try:
            v = float(value)
        except (TypeError, ValueError) as e:
            raise InvalidOptionInputError(name, value, "must be a number") from e
        if not math.isfinite(v):
            raise InvalidOptionInputError(name, value, "must be finite")
        if v <= 0.0:
            raise InvalidOptionInputError(name, value)


def require_finite(**values: float) -> None:
    for name, value in values.items():
        try:
            v = float(value)
        except (TypeError, ValueError) as e:
            raise InvalidOptionInputError(name, value, "must be a number") from e
        if not math.isfinite(v):
            raise InvalidOptionInputError(name, value, "must be finite")
