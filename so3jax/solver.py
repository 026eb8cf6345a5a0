"""Validated entry points for the SO(3) Wigner transforms.

Every argument is checked before any numerical work starts; failures raise
one of the :mod:`so3jax.errors` classes naming the argument and the
constraint it broke.
"""

from __future__ import annotations

import math
import numbers
import warnings
from typing import Any, Union

import numpy as np
from jaxtyping import Array, ArrayLike

from .config import (
    DlMethod,
    NMode,
    Sampling,
    So3Parameters,
    Storage,
    StorageOrder,
    normalize_option,
)
from .errors import EnumError, RangeError, ShapeError
from .indexing import HarmonicIndex, harmonic_index
from .layout import from_external_array, to_external_array
from .runtime import engine
from .runtime.dtypes import x64_enabled


def _parse_band_limit(value: Any, argument: str, label: str) -> int:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
        raise RangeError(argument, f"{label} band-limit must be integer")
    if not math.isfinite(float(value)):
        raise RangeError(argument, f"{label} band-limit must be positive integer")
    as_int = int(value)
    if float(value) != float(as_int) or as_int <= 0:
        raise RangeError(argument, f"{label} band-limit must be positive integer")
    return as_int


def _parse_reality(value: Any) -> bool:
    if not isinstance(value, (bool, np.bool_)):
        raise EnumError("reality", f"reality flag must be a bool, got {value!r}")
    return bool(value)


def validate_parameters(
    L: Any,
    N: Any,
    order: Union[StorageOrder, str] = StorageOrder.ZERO_FIRST,
    storage: Union[Storage, str] = Storage.PADDED,
    n_mode: Union[NMode, str] = NMode.ALL,
    dl_method: Union[DlMethod, str] = DlMethod.RISBO,
    reality: Any = False,
    sampling: Union[Sampling, str] = Sampling.MW,
) -> So3Parameters:
    """Check band-limits and options and bundle them into :class:`So3Parameters`."""

    reality = _parse_reality(reality)
    L = _parse_band_limit(L, "L", "Harmonic")
    N = _parse_band_limit(N, "N", "Orientational")
    if N > L:
        raise RangeError("N", f"orientational band-limit N={N} must not exceed L={L}")
    return So3Parameters(
        L=L,
        N=N,
        order=normalize_option(order, StorageOrder, "order"),
        storage=normalize_option(storage, Storage, "storage"),
        n_mode=normalize_option(n_mode, NMode, "n_mode"),
        dl_method=normalize_option(dl_method, DlMethod, "dl_method"),
        sampling=normalize_option(sampling, Sampling, "sampling"),
        reality=reality,
    )


def validate_coefficients(flmn: ArrayLike, params: So3Parameters) -> ArrayLike:
    """Check that ``flmn`` is a vector of exactly ``params.flmn_size`` entries."""

    shape = np.shape(flmn)
    if len(shape) == 2 and 1 in shape:
        shape = (shape[0] * shape[1],)
    if len(shape) != 1:
        raise ShapeError("flmn", "harmonic coefficients must be contained in a vector")
    expected = params.flmn_size
    if shape[0] != expected:
        raise ShapeError(
            "flmn",
            f"expected {expected} harmonic coefficients for L={params.L}, "
            f"N={params.N}, storage={params.storage.value!r}, "
            f"reality={params.reality}, got {shape[0]}",
        )
    return np.reshape(flmn, (expected,)) if np.ndim(flmn) != 1 else flmn


def validate_samples(f: ArrayLike, params: So3Parameters) -> ArrayLike:
    """Check that ``f`` has the ``(ngamma, nbeta, nalpha)`` grid shape.

    Real-signal transforms also require real-valued samples.
    """

    expected = params.grid_shape
    if tuple(np.shape(f)) != expected:
        raise ShapeError(
            "f",
            f"expected samples of shape {expected} for L={params.L}, N={params.N}, "
            f"sampling={params.sampling.value!r}, got {tuple(np.shape(f))}",
        )
    if params.reality and np.iscomplexobj(f):
        raise EnumError("f", "samples must be real-valued when reality is set")
    return f


def _warn_if_single_precision() -> None:
    if not x64_enabled():
        warnings.warn(
            "jax_enable_x64 is off; SO(3) transforms run in single precision",
            RuntimeWarning,
            stacklevel=3,
        )


class So3Transform:
    """Inverse and forward Wigner transforms for one fixed configuration.

    Parameters are validated once at construction; each transform call only
    checks the shape of its input.
    """

    def __init__(
        self,
        L: Any,
        N: Any,
        *,
        order: Union[StorageOrder, str] = StorageOrder.ZERO_FIRST,
        storage: Union[Storage, str] = Storage.PADDED,
        n_mode: Union[NMode, str] = NMode.ALL,
        dl_method: Union[DlMethod, str] = DlMethod.RISBO,
        reality: Any = False,
        sampling: Union[Sampling, str] = Sampling.MW,
    ) -> None:
        self.params = validate_parameters(
            L, N, order, storage, n_mode, dl_method, reality, sampling
        )
        self.index: HarmonicIndex = harmonic_index(
            self.params.L,
            self.params.N,
            self.params.order,
            self.params.storage,
            self.params.reality,
        )

    @property
    def flmn_size(self: "So3Transform") -> int:
        return self.params.flmn_size

    @property
    def grid_shape(self: "So3Transform") -> tuple[int, int, int]:
        return self.params.grid_shape

    def offset(self: "So3Transform", el: int, m: int, n: int) -> int:
        return self.index.offset(el, m, n)

    def triple(self: "So3Transform", ind: int) -> tuple[int, int, int]:
        return self.index.triple(ind)

    def inverse(self: "So3Transform", flmn: ArrayLike) -> Array:
        """Samples ``f[g, b, a]`` of shape ``(ngamma, nbeta, nalpha)``."""

        flmn = validate_coefficients(flmn, self.params)
        _warn_if_single_precision()
        native = engine.inverse(flmn, self.params)
        return to_external_array(native, self.params.grid_shape)

    def forward(self: "So3Transform", f: ArrayLike) -> Array:
        """Harmonic coefficients of samples laid out as :meth:`inverse` returns them."""

        f = validate_samples(f, self.params)
        _warn_if_single_precision()
        native = from_external_array(f, self.params.grid_shape)
        return engine.forward(native, self.params)


def so3_inverse(
    flmn: ArrayLike,
    L: Any,
    N: Any,
    order: Union[StorageOrder, str] = StorageOrder.ZERO_FIRST,
    storage: Union[Storage, str] = Storage.PADDED,
    n_mode: Union[NMode, str] = NMode.ALL,
    dl_method: Union[DlMethod, str] = DlMethod.RISBO,
    reality: Any = False,
    sampling: Union[Sampling, str] = Sampling.MW,
) -> Array:
    """Inverse Wigner transform of ``flmn`` onto the SO(3) sample grid.

    Returns an array of shape ``(2N-1, nbeta, nalpha)``, real when
    ``reality`` is set and complex otherwise.
    """

    params = validate_parameters(
        L, N, order, storage, n_mode, dl_method, reality, sampling
    )
    flmn = validate_coefficients(flmn, params)
    _warn_if_single_precision()
    native = engine.inverse(flmn, params)
    return to_external_array(native, params.grid_shape)


def so3_forward(
    f: ArrayLike,
    L: Any,
    N: Any,
    order: Union[StorageOrder, str] = StorageOrder.ZERO_FIRST,
    storage: Union[Storage, str] = Storage.PADDED,
    n_mode: Union[NMode, str] = NMode.ALL,
    dl_method: Union[DlMethod, str] = DlMethod.RISBO,
    reality: Any = False,
    sampling: Union[Sampling, str] = Sampling.MW,
) -> Array:
    """Forward Wigner transform of samples ``f[g, b, a]`` into ``flmn``."""

    params = validate_parameters(
        L, N, order, storage, n_mode, dl_method, reality, sampling
    )
    f = validate_samples(f, params)
    _warn_if_single_precision()
    native = from_external_array(f, params.grid_shape)
    return engine.forward(native, params)


__all__ = [
    "So3Transform",
    "so3_forward",
    "so3_inverse",
    "validate_coefficients",
    "validate_parameters",
    "validate_samples",
]
