"""Selection of the orientational orders ``n`` that take part in a transform.

Skipping orders is a work-saving device for signals with a known symmetry in
``gamma``; the skipped coefficients are never read and contribute zero.
"""

from __future__ import annotations

from typing import Union

from .config import NMode


def active_orders(
    N: int, n_mode: Union[NMode, str] = NMode.ALL, reality: bool = False
) -> tuple[int, ...]:
    """Orders ``n`` kept by ``n_mode``, in increasing order.

    The candidate range is ``[-(N-1), N-1]``, or ``[0, N-1]`` for real signals.
    """

    mode = NMode(n_mode)
    lo = 0 if reality else -(N - 1)
    candidates = range(lo, N)
    if mode is NMode.ALL:
        return tuple(candidates)
    if mode is NMode.EVEN:
        return tuple(n for n in candidates if n % 2 == 0)
    if mode is NMode.ODD:
        return tuple(n for n in candidates if n % 2 != 0)
    return tuple(n for n in candidates if abs(n) == N - 1)


__all__ = ["active_orders"]
