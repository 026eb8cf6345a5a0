"""Argument-validation errors raised by the so3jax entry points."""

from __future__ import annotations


class So3InputError(ValueError):
    """Invalid argument supplied to a transform entry point.

    Attributes
    ----------
    argument:
        Name of the offending argument (``"flmn"``, ``"L"``, ``"order"``...).
    constraint:
        Human-readable statement of what was expected.
    """

    def __init__(self, argument: str, constraint: str) -> None:
        self.argument = argument
        self.constraint = constraint
        super().__init__(f"{argument}: {constraint}")


class ShapeError(So3InputError, IndexError):
    """Buffer length or array shape does not match the band-limits."""


class RangeError(So3InputError):
    """Band-limit is non-positive, non-integral or out of order."""


class EnumError(So3InputError):
    """Unrecognised value for an enumerated option."""


__all__ = ["EnumError", "RangeError", "ShapeError", "So3InputError"]
