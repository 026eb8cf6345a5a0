"""Separated-variable Wigner transforms on MW / MWSS grids.

Synthesis convention::

    f(alpha, beta, gamma) = sum_{l,m,n} (2l+1)/(8 pi^2) flmn
                            exp(i m alpha) d^l_{mn}(beta) exp(i n gamma)

The inverse transform works one orientational order at a time:

1. gather the ``(l, m)`` slice of order ``n`` from the coefficient buffer;
2. contract it with the ``beta = pi/2`` kernel ``Delta`` to obtain the
   Fourier coefficients in ``beta`` and evaluate them on the beta samples,
   then synthesise over ``alpha`` with an inverse FFT;
3. stack the per-order layers and synthesise over ``gamma`` (Hermitian
   ``irfft`` for real signals).

Step 2 is independent across orders and is vectorised with ``jax.vmap``;
step 3 is the only reduction across orders.

The forward transform undoes the two FFTs and solves, for each ``(m, n)``, the
small least-squares problem linking the beta samples to the degrees
``max(|m|, |n|) <= l < L``. On band-limited input that solve is exact, so
``forward(inverse(flmn))`` returns ``flmn``.
"""

from __future__ import annotations

import logging
from functools import partial

import jax
import jax.numpy as jnp
import numpy as np
from jaxtyping import Array, ArrayLike

from ..config import So3Parameters
from ..indexing import harmonic_index
from ..nmode import active_orders
from ..operators.wigner import I_POWERS, halfpi_table
from ..sampling import betas
from .dtypes import as_index, real_dtype_for_complex, working_complex_dtype

logger = logging.getLogger(__name__)


def _degree_weights(L: int, dtype: jnp.dtype) -> Array:
    ell = jnp.arange(L, dtype=dtype)
    return (2.0 * ell + 1.0) / (8.0 * jnp.pi**2)


def _alpha_bins(L: int, nalpha: int) -> np.ndarray:
    return np.arange(-(L - 1), L) % nalpha


@partial(jax.jit, static_argnames=("nalpha", "ngamma", "nspectrum", "reality"))
def _inverse_kernel(
    coeffs: Array,
    orders: Array,
    delta: Array,
    beta: Array,
    *,
    nalpha: int,
    ngamma: int,
    nspectrum: int,
    reality: bool,
) -> Array:
    """Native ``(ngamma, nbeta, nalpha)`` samples from per-order slices.

    ``coeffs`` has shape ``(n_orders, L, 2L-1)`` with zeros at invalid
    ``(l, m)``; ``orders`` holds the matching values of ``n``.
    """

    L = delta.shape[0]
    nbeta = beta.shape[0]
    k = jnp.arange(-(L - 1), L)
    weights = _degree_weights(L, delta.dtype)
    exp_kb = jnp.exp(1j * k[:, None] * beta[None, :]).astype(coeffs.dtype)
    i_powers = jnp.asarray(I_POWERS, dtype=coeffs.dtype)
    m_bins = _alpha_bins(L, nalpha)

    def layer(c: Array, n: Array) -> Array:
        delta_n = jnp.take(delta, n + L - 1, axis=2)
        f_mk = jnp.einsum("lm,lkm,lk->mk", c * weights[:, None], delta, delta_n)
        phase = i_powers[(n - k) % 4]  # i^(n-m)
        g_mb = phase[:, None] * (f_mk @ exp_kb)
        spectrum = jnp.zeros((nbeta, nalpha), dtype=coeffs.dtype)
        spectrum = spectrum.at[:, m_bins].set(g_mb.T)
        return jnp.fft.ifft(spectrum, axis=-1, norm="forward")

    layers = jax.vmap(layer)(coeffs, orders)

    spectrum = jnp.zeros((nspectrum, nbeta, nalpha), dtype=coeffs.dtype)
    spectrum = spectrum.at[orders % nspectrum].set(layers)
    if reality:
        return jnp.fft.irfft(spectrum, n=ngamma, axis=0, norm="forward")
    return jnp.fft.ifft(spectrum, axis=0, norm="forward")


@partial(jax.jit, static_argnames=("reality",))
def _forward_kernel(
    f: Array,
    orders: Array,
    delta: Array,
    beta: Array,
    *,
    reality: bool,
) -> Array:
    """Per-order ``(L, 2L-1)`` coefficient slices from native samples."""

    L = delta.shape[0]
    nalpha = f.shape[2]
    if reality:
        spectrum = jnp.fft.rfft(f, axis=0, norm="forward")
    else:
        spectrum = jnp.fft.fft(f, axis=0, norm="forward")
    spectrum = jnp.fft.fft(spectrum, axis=-1, norm="forward")
    cdtype = spectrum.dtype

    k = jnp.arange(-(L - 1), L)
    weights = _degree_weights(L, delta.dtype)
    exp_kb = jnp.exp(1j * k[:, None] * beta[None, :]).astype(cdtype)
    i_powers = jnp.asarray(I_POWERS, dtype=cdtype)
    m_bins = _alpha_bins(L, nalpha)

    layers = spectrum[orders % spectrum.shape[0]]
    g_mb = jnp.transpose(layers[:, :, m_bins], (0, 2, 1))

    def solve(g: Array, n: Array) -> Array:
        delta_n = jnp.take(delta, n + L - 1, axis=2)
        phase = i_powers[(n - k) % 4]
        # kernel[m, b, l] = (2l+1)/(8 pi^2) d^l_{mn}(beta_b)
        t = jnp.einsum("lkm,lk,kb->mbl", delta.astype(cdtype), delta_n, exp_kb)
        kernel = jnp.real(phase[:, None, None] * t) * weights[None, None, :]
        pinv = jnp.linalg.pinv(kernel)
        return jnp.einsum("mlb,mb->lm", pinv.astype(cdtype), g)

    return jax.vmap(solve)(g_mb, orders)


def inverse(flmn: ArrayLike, params: So3Parameters) -> Array:
    """Inverse transform; returns the native flat sample buffer.

    ``params`` is assumed validated. The result is C-ordered over
    ``(gamma, beta, alpha)`` and real when ``params.reality`` is set.
    """

    L, N = params.L, params.N
    ngamma, nbeta, nalpha = params.grid_shape
    cdtype = working_complex_dtype()
    rdtype = real_dtype_for_complex(cdtype)
    orders = active_orders(N, params.n_mode, params.reality)
    logger.debug(
        "inverse: L=%d N=%d sampling=%s dl_method=%s reality=%s orders=%s",
        L,
        N,
        params.sampling.value,
        params.dl_method.value,
        params.reality,
        orders,
    )
    if not orders:
        out_dtype = rdtype if params.reality else cdtype
        return jnp.zeros(ngamma * nbeta * nalpha, dtype=out_dtype)

    index = harmonic_index(L, N, params.order, params.storage, params.reality)
    gather = index.gather_indices(orders)
    buffer = jnp.asarray(flmn).astype(cdtype)
    coeffs = jnp.where(
        jnp.asarray(gather >= 0),
        buffer[as_index(np.clip(gather, 0, None))],
        jnp.zeros((), dtype=cdtype),
    )

    delta = jnp.asarray(halfpi_table(L, params.dl_method), dtype=rdtype)
    beta = jnp.asarray(betas(L, params.sampling), dtype=rdtype)
    nspectrum = N if params.reality else ngamma
    f = _inverse_kernel(
        coeffs,
        as_index(orders),
        delta,
        beta,
        nalpha=nalpha,
        ngamma=ngamma,
        nspectrum=nspectrum,
        reality=params.reality,
    )
    return jnp.reshape(f, (-1,))


def forward(f: ArrayLike, params: So3Parameters) -> Array:
    """Forward transform of a native flat sample buffer into ``flmn``.

    Orders excluded by ``params.n_mode`` are left at zero.
    """

    L, N = params.L, params.N
    shape = params.grid_shape
    cdtype = working_complex_dtype()
    rdtype = real_dtype_for_complex(cdtype)
    orders = active_orders(N, params.n_mode, params.reality)
    index = harmonic_index(L, N, params.order, params.storage, params.reality)
    logger.debug(
        "forward: L=%d N=%d sampling=%s reality=%s orders=%s",
        L,
        N,
        params.sampling.value,
        params.reality,
        orders,
    )
    out = jnp.zeros(index.size, dtype=cdtype)
    if not orders:
        return out

    samples = jnp.reshape(jnp.asarray(f), shape)
    samples = samples.astype(rdtype if params.reality else cdtype)
    delta = jnp.asarray(halfpi_table(L, params.dl_method), dtype=rdtype)
    beta = jnp.asarray(betas(L, params.sampling), dtype=rdtype)
    slices = _forward_kernel(
        samples, as_index(orders), delta, beta, reality=params.reality
    )

    gather = index.gather_indices(orders).reshape(-1)
    valid = np.flatnonzero(gather >= 0)
    return out.at[as_index(gather[valid])].set(jnp.reshape(slices, (-1,))[valid])


__all__ = ["forward", "inverse"]
