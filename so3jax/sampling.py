"""Equiangular Euler-angle grids on SO(3).

Samples are indexed ``(g, b, a)`` for ``(gamma, beta, alpha)``. Both schemes
are equiangular in ``alpha`` and ``beta``; the ``gamma`` axis always holds
``2N - 1`` samples, enough to resolve orders ``|n| < N``.

- ``MW``: ``2L - 1`` alpha samples, ``L`` beta samples at
  ``pi (2b + 1) / (2L - 1)`` (the last one on the south pole).
- ``MW_SS``: ``2L`` alpha samples, ``L + 1`` beta samples at ``pi b / L``
  (both poles sampled).
"""

from __future__ import annotations

from typing import Union

import numpy as np

from .config import Sampling


def nalpha(L: int, sampling: Union[Sampling, str] = Sampling.MW) -> int:
    return 2 * L - 1 if Sampling(sampling) is Sampling.MW else 2 * L


def nbeta(L: int, sampling: Union[Sampling, str] = Sampling.MW) -> int:
    return L if Sampling(sampling) is Sampling.MW else L + 1


def ngamma(N: int) -> int:
    return 2 * N - 1


def grid_shape(
    L: int, N: int, sampling: Union[Sampling, str] = Sampling.MW
) -> tuple[int, int, int]:
    """Sample counts ``(ngamma, nbeta, nalpha)``."""

    return ngamma(N), nbeta(L, sampling), nalpha(L, sampling)


def f_size(L: int, N: int, sampling: Union[Sampling, str] = Sampling.MW) -> int:
    ng, nb, na = grid_shape(L, N, sampling)
    return ng * nb * na


def alphas(L: int, sampling: Union[Sampling, str] = Sampling.MW) -> np.ndarray:
    count = nalpha(L, sampling)
    return 2.0 * np.pi * np.arange(count) / count


def betas(L: int, sampling: Union[Sampling, str] = Sampling.MW) -> np.ndarray:
    if Sampling(sampling) is Sampling.MW:
        return np.pi * (2.0 * np.arange(L) + 1.0) / (2.0 * L - 1.0)
    return np.pi * np.arange(L + 1) / L


def gammas(N: int) -> np.ndarray:
    count = ngamma(N)
    return 2.0 * np.pi * np.arange(count) / count


__all__ = [
    "alphas",
    "betas",
    "f_size",
    "gammas",
    "grid_shape",
    "nalpha",
    "nbeta",
    "ngamma",
]
