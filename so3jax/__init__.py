"""so3jax: Wigner transforms of band-limited functions on SO(3) in JAX."""

from ._typecheck import enable_runtime_typecheck

enable_runtime_typecheck()

from .config import (
    DlMethod,
    NMode,
    Sampling,
    So3Parameters,
    Storage,
    StorageOrder,
)
from .errors import EnumError, RangeError, ShapeError, So3InputError
from .indexing import flmn_size, harmonic_index
from .solver import So3Transform, so3_forward, so3_inverse

__all__ = [
    "DlMethod",
    "EnumError",
    "NMode",
    "RangeError",
    "Sampling",
    "ShapeError",
    "So3InputError",
    "So3Parameters",
    "So3Transform",
    "Storage",
    "StorageOrder",
    "flmn_size",
    "harmonic_index",
    "so3_forward",
    "so3_inverse",
]
