"""Translation between the engine's sample ordering and the caller-facing one.

The engine produces a C-ordered buffer over ``(gamma, beta, alpha)``: alpha
varies fastest, flat index ``g*nalpha*nbeta + b*nalpha + a``. Callers receive
the column-major buffer over the same dimensions: gamma varies fastest, flat
index ``a*ngamma*nbeta + b*ngamma + g``. Both conversions are pure
permutations.
"""

from __future__ import annotations

import jax.numpy as jnp
from jaxtyping import Array, ArrayLike


def native_to_external(flat: ArrayLike, shape: tuple[int, int, int]) -> Array:
    """Permute a native flat buffer into the external flat ordering."""

    ngamma, nbeta, nalpha = shape
    cube = jnp.reshape(jnp.asarray(flat), (ngamma, nbeta, nalpha))
    return jnp.transpose(cube, (2, 1, 0)).reshape(-1)


def external_to_native(flat: ArrayLike, shape: tuple[int, int, int]) -> Array:
    """Inverse of :func:`native_to_external`."""

    ngamma, nbeta, nalpha = shape
    cube = jnp.reshape(jnp.asarray(flat), (nalpha, nbeta, ngamma))
    return jnp.transpose(cube, (2, 1, 0)).reshape(-1)


def to_external_array(native: ArrayLike, shape: tuple[int, int, int]) -> Array:
    """Caller-facing ``(ngamma, nbeta, nalpha)`` array from a native buffer.

    The external flat buffer is read back in column-major order, so
    ``result[g, b, a]`` is the sample at ``(gamma_g, beta_b, alpha_a)``.
    """

    external = native_to_external(jnp.reshape(jnp.asarray(native), (-1,)), shape)
    return jnp.reshape(external, shape, order="F")


def from_external_array(f: ArrayLike, shape: tuple[int, int, int]) -> Array:
    """Native flat buffer from a caller-facing ``(ngamma, nbeta, nalpha)`` array."""

    external = jnp.reshape(jnp.asarray(f), (-1,), order="F")
    return external_to_native(external, shape)


__all__ = [
    "external_to_native",
    "from_external_array",
    "native_to_external",
    "to_external_array",
]
