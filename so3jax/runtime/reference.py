"""Brute-force reference transform used to check the fast engine."""

from __future__ import annotations

import numpy as np
from jaxtyping import ArrayLike

from ..config import So3Parameters
from ..indexing import harmonic_index
from ..nmode import active_orders
from ..operators.wigner import risbo_table
from ..sampling import alphas, betas, gammas


def inverse_direct(flmn: ArrayLike, params: So3Parameters) -> np.ndarray:
    """Evaluate the synthesis sum term by term on the sample grid.

    Wigner-d values come straight from Risbo's recursion at every beta
    sample, so this shares no kernel code with the separated-variable
    engine. Cost is ``O(N L^4)`` per grid; intended for small band-limits.

    Returns a ``(ngamma, nbeta, nalpha)`` array, real when
    ``params.reality`` is set. Negative orders of real signals are rebuilt
    from the conjugate relation.
    """

    L, N = params.L, params.N
    buffer = np.asarray(flmn).astype(np.complex128)
    index = harmonic_index(L, N, params.order, params.storage, params.reality)

    alpha = alphas(L, params.sampling)
    gamma = gammas(N)
    dl = risbo_table(betas(L, params.sampling), L)  # (nbeta, L, 2L-1, 2L-1)

    f = np.zeros((gamma.size, dl.shape[0], alpha.size), dtype=np.complex128)
    # every n-mode is symmetric in the sign of n, so the full range also
    # covers the implicit negative orders of real signals
    for n in active_orders(N, params.n_mode, reality=False):
        for el in range(abs(n), L):
            weight = (2.0 * el + 1.0) / (8.0 * np.pi**2)
            for m in range(-el, el + 1):
                if params.reality and n < 0:
                    sign = -1.0 if (m + n) % 2 else 1.0
                    value = sign * np.conj(buffer[index.offset(el, -m, -n)])
                else:
                    value = buffer[index.offset(el, m, n)]
                if value == 0:
                    continue
                d_b = dl[:, el, m + L - 1, n + L - 1]
                term = (
                    np.exp(1j * n * gamma)[:, None, None]
                    * d_b[None, :, None]
                    * np.exp(1j * m * alpha)[None, None, :]
                )
                f += weight * value * term
    if params.reality:
        return f.real
    return f


__all__ = ["inverse_direct"]
