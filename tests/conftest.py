from typing import Callable

import jax
import numpy as np
import pytest

from so3jax.indexing import harmonic_index

jax.config.update("jax_enable_x64", True)


def _random_flmn(
    L: int,
    N: int,
    *,
    order: str = "0first",
    storage: str = "pad",
    reality: bool = False,
    seed: int = 0,
) -> np.ndarray:
    """Random coefficients on valid triples, zero in padding slots.

    For real signals the stored n = 0 block also satisfies
    f(l, -m, 0) = (-1)^m conj f(l, m, 0).
    """

    rng = np.random.default_rng(seed)
    index = harmonic_index(L, N, order, storage, reality)
    flmn = np.zeros(index.size, dtype=np.complex128)
    for el, m, n in index.triples():
        flmn[index.offset(el, m, n)] = rng.normal() + 1j * rng.normal()
    if reality:
        for el in range(L):
            flmn[index.offset(el, 0, 0)] = flmn[index.offset(el, 0, 0)].real
            for m in range(1, el + 1):
                sign = -1.0 if m % 2 else 1.0
                flmn[index.offset(el, -m, 0)] = sign * np.conj(
                    flmn[index.offset(el, m, 0)]
                )
    return flmn


@pytest.fixture
def random_flmn() -> Callable[..., np.ndarray]:
    return _random_flmn
