"""Opt-in runtime checks of so3jax call signatures.

Setting ``SO3JAX_RUNTIME_TYPECHECK`` to anything but ``0/false/no/off``
installs jaxtyping's import hook for the ``so3jax`` package, so every
annotated callable in submodules imported afterwards is wrapped by beartype.
"""

from __future__ import annotations

import os
from typing import Any

_ENV_VAR = "SO3JAX_RUNTIME_TYPECHECK"
_OFF_VALUES = frozenset({"0", "false", "no", "off"})

_TYPECHECK_HOOK: Any = None


def enable_runtime_typecheck() -> bool:
    """Install the import hook if requested; returns whether it is active."""
    global _TYPECHECK_HOOK

    if _TYPECHECK_HOOK is not None:
        return True
    if os.getenv(_ENV_VAR, "0").strip().lower() in _OFF_VALUES:
        return False

    from jaxtyping import install_import_hook

    # must run before so3jax/__init__ imports its submodules
    _TYPECHECK_HOOK = install_import_hook("so3jax", typechecker="beartype.beartype")
    return True


__all__ = ["enable_runtime_typecheck"]
