"""Centralized dtype helpers for the transform kernels.

Offsets into coefficient buffers are built host-side as ``np.int64`` and
converted with :func:`as_index` when they enter JAX code.
"""

import jax
import jax.numpy as jnp
import numpy as np
from jaxtyping import DTypeLike

INDEX_DTYPE = jnp.int64


def as_index(x: object) -> jnp.ndarray:
    """Convert a Python, NumPy or JAX scalar/array to the index dtype."""
    return jnp.asarray(x, dtype=jax.dtypes.canonicalize_dtype(INDEX_DTYPE))


def x64_enabled() -> bool:
    """Whether JAX keeps 64-bit floats (``jax_enable_x64``)."""

    return jax.dtypes.canonicalize_dtype(np.float64) == np.dtype(np.float64)


def real_dtype_for_complex(complex_dtype: DTypeLike) -> jnp.dtype:
    """Real dtype of the beta kernels and real-signal samples for ``complex_dtype``."""

    dtype = jnp.asarray(0, dtype=complex_dtype).dtype
    if dtype == jnp.complex128:
        return jnp.float64
    return jnp.float32


def working_complex_dtype() -> jnp.dtype:
    """Widest complex dtype JAX currently allows."""

    return jnp.complex128 if x64_enabled() else jnp.complex64


__all__ = [
    "INDEX_DTYPE",
    "as_index",
    "real_dtype_for_complex",
    "working_complex_dtype",
    "x64_enabled",
]
