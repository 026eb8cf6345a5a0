"""Wigner small-d kernels for the SO(3) transforms.

Convention: ``d^l_{mn}(beta) = <l m| exp(-i beta J_y) |l n>``, so for example
``d^1_{10}(beta) = -sin(beta)/sqrt(2)`` and ``d^l_{ml}(beta)`` is
``sqrt(C(2l, l+m)) cos(beta/2)^(l+m) sin(beta/2)^(l-m)``.

Tables for all degrees ``0 <= l < L`` are stored padded, shape
``(..., L, 2L-1, 2L-1)``; entry ``[l, m + L - 1, n + L - 1]`` holds
``d^l_{mn}`` and everything outside ``|m|, |n| <= l`` is zero.

Two recursions are provided for the ``beta = pi/2`` kernel
``Delta^l = d^l(pi/2)`` used by the separated-variable transforms:

- Risbo (1996): exact two half-steps ``l - 1 -> l - 1/2 -> l`` built from the
  spin-1/2 rotation; valid at any ``beta``.
- Trapani & Navaza (2006): seeds the ``n = l`` column from degree ``l - 1``
  and fills the remaining columns with a three-term recursion in ``n``, then
  uses ``Delta_{m,-n} = (-1)^(l+m) Delta_{mn}``.

Both return the same table; they differ only in cost and rounding.

Any ``d^l(beta)`` follows from ``Delta`` through

    d^l_{mn}(beta) = i^(n-m) sum_k Delta^l_{km} Delta^l_{kn} exp(i k beta).
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Union

import numpy as np
from jaxtyping import ArrayLike

from ..config import DlMethod

logger = logging.getLogger(__name__)

# i^k for k mod 4
I_POWERS = np.array([1.0, 1.0j, -1.0, -1.0j])


def _risbo_half_step(d: np.ndarray, p: np.ndarray, q: np.ndarray) -> np.ndarray:
    """Raise ``d^J`` (size ``2J+1``) to ``d^{J+1/2}`` (size ``2J+2``)."""

    size = d.shape[-1]
    idx = np.arange(size, dtype=np.float64)
    a = np.sqrt(size - idx) / size
    b = np.sqrt(idx + 1.0)
    p = p[..., None, None]
    q = q[..., None, None]

    out = np.zeros(d.shape[:-2] + (size + 1, size + 1), dtype=d.dtype)
    aa = a[:, None] * np.sqrt(size - idx)[None, :]
    ba = (b / size)[:, None] * np.sqrt(size - idx)[None, :]
    ab = a[:, None] * b[None, :]
    bb = (b / size)[:, None] * b[None, :]
    out[..., :-1, :-1] += q * aa * d
    out[..., 1:, :-1] -= p * ba * d
    out[..., :-1, 1:] += p * ab * d
    out[..., 1:, 1:] += q * bb * d
    return out


def risbo_table(beta: ArrayLike, L: int) -> np.ndarray:
    """Wigner-d table ``d^l(beta)`` for ``0 <= l < L`` by Risbo's recursion.

    Parameters
    ----------
    beta:
        Scalar angle or array of angles (radians).
    L:
        Band-limit; degrees ``0..L-1`` are returned.

    Returns
    -------
    np.ndarray
        Shape ``beta.shape + (L, 2L-1, 2L-1)``.
    """

    beta = np.asarray(beta, dtype=np.float64)
    p = np.sin(0.5 * beta)
    q = np.cos(0.5 * beta)
    width = 2 * L - 1
    table = np.zeros(beta.shape + (L, width, width), dtype=np.float64)

    d = np.ones(beta.shape + (1, 1), dtype=np.float64)
    table[..., 0, L - 1, L - 1] = 1.0
    for el in range(1, L):
        d = _risbo_half_step(_risbo_half_step(d, p, q), p, q)
        lo, hi = L - 1 - el, L + el
        table[..., el, lo:hi, lo:hi] = d
    return table


def trapani_halfpi_table(L: int) -> np.ndarray:
    """``Delta^l = d^l(pi/2)`` for ``0 <= l < L`` by the Trapani-Navaza recursion."""

    width = 2 * L - 1
    table = np.zeros((L, width, width), dtype=np.float64)
    table[0, L - 1, L - 1] = 1.0

    top_prev = np.ones(1)
    for el in range(1, L):
        size = 2 * el + 1
        m = np.arange(-el, el + 1, dtype=np.float64)

        # column n = l from column n = l-1 of degree l-1
        top = np.empty(size)
        top[el] = np.sqrt((2.0 * el - 1.0) / (2.0 * el)) * top_prev[el - 1]
        for mm in range(1, el + 1):
            ratio = el * (2.0 * el - 1.0) / (2.0 * (el + mm) * (el + mm - 1.0))
            top[el + mm] = np.sqrt(ratio) * top_prev[el - 1 + mm - 1]
        top[:el] = top[el + 1 :][::-1]

        delta = np.zeros((size, size))
        delta[:, size - 1] = top
        nxt = np.zeros(size)
        for n in range(el, 0, -1):
            cur = delta[:, el + n]
            c_up = np.sqrt((el - n) * (el + n + 1.0))
            c_dn = np.sqrt((el + n) * (el - n + 1.0))
            prev = -(2.0 * m * cur + c_up * nxt) / c_dn
            delta[:, el + n - 1] = prev
            nxt = cur

        parity = np.where((el + np.arange(-el, el + 1)) % 2 == 0, 1.0, -1.0)
        delta[:, :el] = (parity[:, None] * delta[:, el + 1 :])[:, ::-1]

        lo, hi = L - 1 - el, L + el
        table[el, lo:hi, lo:hi] = delta
        top_prev = top
    return table


@lru_cache(maxsize=None)
def _cached_halfpi_table(L: int, method: DlMethod) -> np.ndarray:
    logger.debug("building d(pi/2) table: L=%d method=%s", L, method.value)
    if method is DlMethod.RISBO:
        table = risbo_table(np.pi / 2.0, L)
    else:
        table = trapani_halfpi_table(L)
    table.setflags(write=False)
    return table


def halfpi_table(L: int, method: Union[DlMethod, str] = DlMethod.RISBO) -> np.ndarray:
    """Cached, read-only ``Delta`` table of shape ``(L, 2L-1, 2L-1)``."""

    return _cached_halfpi_table(int(L), DlMethod(method))


def dl_from_halfpi(delta: np.ndarray, beta: ArrayLike) -> np.ndarray:
    """Evaluate ``d^l(beta)`` from a padded ``Delta`` table.

    Returns shape ``beta.shape + (L, 2L-1, 2L-1)``.
    """

    L = delta.shape[0]
    k = np.arange(-(L - 1), L)
    beta = np.asarray(beta, dtype=np.float64)
    phase_k = np.exp(1j * beta[..., None] * k)
    d = np.einsum("...k,lkm,lkn->...lmn", phase_k, delta, delta)
    i_phase = I_POWERS[(k[None, :] - k[:, None]) % 4]  # i^(n-m)
    return np.real(d * i_phase)


__all__ = [
    "dl_from_halfpi",
    "halfpi_table",
    "risbo_table",
    "trapani_halfpi_table",
]
