"""Flat storage of SO(3) harmonic coefficients ``flmn``.

A coefficient set is triply indexed by degree ``l`` and orders ``m`` and
``n`` with ``0 <= l < L``, ``|m| <= l`` and ``|n| <= min(l, N-1)``. The buffer
is split into one block per orientational order ``n``; inside a block the
``(l, m)`` pairs follow the usual packed spherical-harmonic layout
``l^2 + l + m``.

Layouts
-------
Two choices combine into four variants:

- *order*: ``ZERO_FIRST`` stores blocks as ``n = 0, 1, -1, 2, -2, ...``;
  ``NEG_FIRST`` stores them as ``n = -(N-1), ..., N-1``.
- *storage*: ``PADDED`` blocks always hold ``L^2`` entries (entries with
  ``l < |n|`` are wasted); ``COMPACT`` blocks drop them and hold ``L^2 - n^2``
  entries.

For real signals (``reality=True``) only ``n >= 0`` is stored, in increasing
order, and the remaining coefficients follow from

    f(l, -m, -n) = (-1)^(m+n) conj(f(l, m, n)).
"""

from __future__ import annotations

import bisect
import math
from dataclasses import dataclass
from functools import cached_property
from typing import Iterator, Union

import numpy as np
from jaxtyping import ArrayLike

from .config import Storage, StorageOrder


def flmn_size(L: int, N: int, storage: Union[Storage, str], reality: bool) -> int:
    """Closed-form number of coefficients stored for the given layout."""

    storage = Storage(storage)
    if storage is Storage.PADDED:
        return N * L * L if reality else (2 * N - 1) * L * L
    if reality:
        return N * (6 * L * L - (N - 1) * (2 * N - 1)) // 6
    return (2 * N - 1) * (3 * L * L - N * (N - 1)) // 3


def _sum_squares(k: int) -> int:
    # 0^2 + 1^2 + ... + k^2
    return k * (k + 1) * (2 * k + 1) // 6


@dataclass(frozen=True)
class HarmonicIndex:
    """Bidirectional map between ``(l, m, n)`` and a flat buffer offset.

    Subclasses fix the block order and the block packing; everything else
    (validation, decoding, gather tables) is shared.
    """

    L: int
    N: int
    reality: bool = False

    def orders(self: "HarmonicIndex") -> tuple[int, ...]:
        """Stored orientational orders in buffer order."""

        if self.reality:
            return tuple(range(self.N))
        return self._complex_orders()

    def _complex_orders(self) -> tuple[int, ...]:
        raise NotImplementedError

    def _block_offset(self, n: int) -> int:
        raise NotImplementedError

    def _inner_offset(self, el: int, m: int, n: int) -> int:
        raise NotImplementedError

    @property
    def size(self: "HarmonicIndex") -> int:
        raise NotImplementedError

    @cached_property
    def _block_starts(self) -> tuple[list[int], tuple[int, ...]]:
        orders = self.orders()
        return [self._block_offset(n) for n in orders], orders

    def is_valid(self: "HarmonicIndex", el: int, m: int, n: int) -> bool:
        """Whether ``(l, m, n)`` lies inside the band-limits."""

        if el < 0 or el >= self.L:
            return False
        if abs(m) > el:
            return False
        return abs(n) <= min(el, self.N - 1)

    def _check(self, el: int, m: int, n: int) -> None:
        if not self.is_valid(el, m, n):
            raise IndexError(
                f"(l, m, n) = ({el}, {m}, {n}) outside band-limits L={self.L}, N={self.N}"
            )
        if self.reality and n < 0:
            raise IndexError(
                f"n = {n} is not stored for real signals; "
                "use the conjugate relation on (l, -m, -n)"
            )

    def offset(self: "HarmonicIndex", el: int, m: int, n: int) -> int:
        """Flat buffer offset of coefficient ``(l, m, n)``."""

        el, m, n = int(el), int(m), int(n)
        self._check(el, m, n)
        return self._block_offset(n) + self._inner_offset(el, m, n)

    def triple(self: "HarmonicIndex", ind: int) -> tuple[int, int, int]:
        """Inverse of :meth:`offset`."""

        ind = int(ind)
        if ind < 0 or ind >= self.size:
            raise IndexError(f"offset {ind} outside buffer of size {self.size}")
        starts, orders = self._block_starts
        k = bisect.bisect_right(starts, ind) - 1
        n = orders[k]
        el, m = self._decode_inner(ind - starts[k], n)
        if el < abs(n):
            raise IndexError(f"offset {ind} is a padding slot (l={el} < |n|={abs(n)})")
        return el, m, n

    def _decode_inner(self, r: int, n: int) -> tuple[int, int]:
        el = math.isqrt(r)
        return el, r - el * el - el

    def triples(self: "HarmonicIndex") -> Iterator[tuple[int, int, int]]:
        """Valid triples in increasing buffer order."""

        for n in self.orders():
            for el in range(abs(n), self.L):
                for m in range(-el, el + 1):
                    yield el, m, n

    def gather_indices(self: "HarmonicIndex", orders: tuple[int, ...]) -> np.ndarray:
        """Buffer offsets of the ``(l, m)`` slice of each order.

        Returns an integer table of shape ``(len(orders), L, 2L-1)``; entry
        ``[k, l, m + L - 1]`` is the offset of ``(l, m, orders[k])`` or ``-1``
        where the triple is invalid.
        """

        L = self.L
        table = np.full((len(orders), L, 2 * L - 1), -1, dtype=np.int64)
        for k, n in enumerate(orders):
            for el in range(abs(n), L):
                start = self.offset(el, -el, n)
                table[k, el, L - 1 - el : L + el] = start + np.arange(2 * el + 1)
        return table


@dataclass(frozen=True)
class _Padded(HarmonicIndex):
    @property
    def size(self: "_Padded") -> int:
        return flmn_size(self.L, self.N, Storage.PADDED, self.reality)

    def _inner_offset(self, el: int, m: int, n: int) -> int:
        return el * el + el + m


@dataclass(frozen=True)
class _Compact(HarmonicIndex):
    @property
    def size(self: "_Compact") -> int:
        return flmn_size(self.L, self.N, Storage.COMPACT, self.reality)

    def _inner_offset(self, el: int, m: int, n: int) -> int:
        return el * el - n * n + el + m

    def _decode_inner(self, r: int, n: int) -> tuple[int, int]:
        t = r + n * n
        el = math.isqrt(t)
        return el, t - el * el - el

    def _real_block_offset(self, n: int) -> int:
        return n * self.L * self.L - _sum_squares(n - 1) if n > 0 else 0


@dataclass(frozen=True)
class ZeroFirstPadded(_Padded):
    """Padded blocks ordered ``n = 0, 1, -1, 2, -2, ...``."""

    def _complex_orders(self) -> tuple[int, ...]:
        out = [0]
        for a in range(1, self.N):
            out.extend((a, -a))
        return tuple(out)

    def _block_offset(self, n: int) -> int:
        if self.reality:
            return n * self.L * self.L
        pos = 2 * n - 1 if n > 0 else -2 * n
        return pos * self.L * self.L


@dataclass(frozen=True)
class NegFirstPadded(_Padded):
    """Padded blocks ordered ``n = -(N-1), ..., N-1``."""

    def _complex_orders(self) -> tuple[int, ...]:
        return tuple(range(-(self.N - 1), self.N))

    def _block_offset(self, n: int) -> int:
        if self.reality:
            return n * self.L * self.L
        return (n + self.N - 1) * self.L * self.L


@dataclass(frozen=True)
class ZeroFirstCompact(_Compact):
    """Compact blocks ordered ``n = 0, 1, -1, 2, -2, ...``."""

    def _complex_orders(self) -> tuple[int, ...]:
        out = [0]
        for a in range(1, self.N):
            out.extend((a, -a))
        return tuple(out)

    def _block_offset(self, n: int) -> int:
        if self.reality:
            return self._real_block_offset(n)
        a = abs(n)
        if a == 0:
            return 0
        # n = 0 block plus both signs of every order below |n|
        start = (2 * a - 1) * (3 * self.L * self.L - a * (a - 1)) // 3
        if n < 0:
            start += self.L * self.L - a * a
        return start


@dataclass(frozen=True)
class NegFirstCompact(_Compact):
    """Compact blocks ordered ``n = -(N-1), ..., N-1``."""

    def _complex_orders(self) -> tuple[int, ...]:
        return tuple(range(-(self.N - 1), self.N))

    def _block_offset(self, n: int) -> int:
        if self.reality:
            return self._real_block_offset(n)
        below = _sum_squares(self.N - 1)
        if n <= 0:
            below -= _sum_squares(-n)
        else:
            below += _sum_squares(n - 1)
        return (n + self.N - 1) * self.L * self.L - below


_LAYOUTS = {
    (StorageOrder.ZERO_FIRST, Storage.PADDED): ZeroFirstPadded,
    (StorageOrder.NEG_FIRST, Storage.PADDED): NegFirstPadded,
    (StorageOrder.ZERO_FIRST, Storage.COMPACT): ZeroFirstCompact,
    (StorageOrder.NEG_FIRST, Storage.COMPACT): NegFirstCompact,
}


def harmonic_index(
    L: int,
    N: int,
    order: Union[StorageOrder, str] = StorageOrder.ZERO_FIRST,
    storage: Union[Storage, str] = Storage.PADDED,
    reality: bool = False,
) -> HarmonicIndex:
    """Return the layout variant for ``order`` x ``storage``."""

    cls = _LAYOUTS[(StorageOrder(order), Storage(storage))]
    return cls(L=int(L), N=int(N), reality=bool(reality))


class ConjugateSymmetricView:
    """Full-range read access to a real-signal (``n >= 0``) coefficient buffer.

    Negative orders are computed on read from the conjugate relation instead of
    being materialised.
    """

    def __init__(self, flmn: ArrayLike, index: HarmonicIndex) -> None:
        if not index.reality:
            raise ValueError("ConjugateSymmetricView needs a reality layout")
        self._flmn = np.asarray(flmn)
        self._index = index

    def __getitem__(self, key: tuple[int, int, int]) -> complex:
        el, m, n = (int(k) for k in key)
        if n >= 0:
            return complex(self._flmn[self._index.offset(el, m, n)])
        value = self._flmn[self._index.offset(el, -m, -n)]
        sign = -1.0 if (m + n) % 2 else 1.0
        return sign * complex(np.conj(value))


def expand_real_coefficients(
    flmn: ArrayLike,
    L: int,
    N: int,
    order: Union[StorageOrder, str] = StorageOrder.ZERO_FIRST,
    storage: Union[Storage, str] = Storage.PADDED,
) -> np.ndarray:
    """Materialise the complex buffer equivalent to a real-signal buffer."""

    src = np.asarray(flmn).astype(np.complex128)
    src_index = harmonic_index(L, N, order, storage, reality=True)
    if src.shape != (src_index.size,):
        raise IndexError(
            f"expected {src_index.size} coefficients for a real signal, got {src.shape}"
        )
    dst_index = harmonic_index(L, N, order, storage, reality=False)

    stored = tuple(range(N))
    src_table = src_index.gather_indices(stored)
    values = np.where(src_table >= 0, src[np.clip(src_table, 0, None)], 0.0)

    m_vals = np.arange(-(L - 1), L)
    out = np.zeros(dst_index.size, dtype=np.complex128)
    for n in range(-(N - 1), N):
        if n >= 0:
            block = values[n]
        else:
            # m -> -m is a reversal of the m axis
            parity = np.where((m_vals + n) % 2 == 0, 1.0, -1.0)
            block = parity * np.conj(values[-n][:, ::-1])
        dst_table = dst_index.gather_indices((n,))[0]
        valid = dst_table >= 0
        out[dst_table[valid]] = block[valid]
    return out


__all__ = [
    "ConjugateSymmetricView",
    "HarmonicIndex",
    "NegFirstCompact",
    "NegFirstPadded",
    "ZeroFirstCompact",
    "ZeroFirstPadded",
    "expand_real_coefficients",
    "flmn_size",
    "harmonic_index",
]
