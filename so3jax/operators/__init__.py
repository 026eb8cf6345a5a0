"""Wigner-d kernels."""

from . import wigner

__all__ = ["wigner"]
