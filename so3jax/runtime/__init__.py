"""Transform engine, reference evaluation and dtype helpers."""

from . import dtypes, engine, reference

__all__ = ["dtypes", "engine", "reference"]
