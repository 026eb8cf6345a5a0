"""Option enums and the validated parameter record for so3jax transforms."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Type, TypeVar, Union

from .errors import EnumError

_E = TypeVar("_E", bound=Enum)


class StorageOrder(str, Enum):
    """Order in which orientational blocks ``n`` are laid out."""

    ZERO_FIRST = "0first"
    NEG_FIRST = "negfirst"


class Storage(str, Enum):
    """Padded blocks of ``L^2`` entries, or compact blocks of valid ``(l, m)``."""

    PADDED = "pad"
    COMPACT = "compact"


class NMode(str, Enum):
    """Which orientational orders take part in a transform."""

    ALL = "all"
    EVEN = "even"
    ODD = "odd"
    MAXIMUM = "maximum"


class DlMethod(str, Enum):
    """Recursion used to build the Wigner-d kernel at ``beta = pi/2``."""

    RISBO = "risbo"
    TRAPANI = "trapani"


class Sampling(str, Enum):
    """Equiangular sampling scheme on SO(3)."""

    MW = "mw"
    MW_SS = "mwss"


def normalize_option(
    value: Union[Enum, str], enum_cls: Type[_E], argument: str
) -> _E:
    """Coerce an enum member or its string value into ``enum_cls``.

    Strings are matched case-insensitively after stripping whitespace.
    """

    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            pass
    allowed = ", ".join(repr(member.value) for member in enum_cls)
    raise EnumError(argument, f"expected one of {allowed}, got {value!r}")


@dataclass(frozen=True)
class So3Parameters:
    """Band-limits and layout options shared by the inverse and forward transforms.

    Instances are normally built through :func:`so3jax.solver.validate_parameters`,
    which performs every range and enum check up front.
    """

    L: int
    N: int
    order: StorageOrder = StorageOrder.ZERO_FIRST
    storage: Storage = Storage.PADDED
    n_mode: NMode = NMode.ALL
    dl_method: DlMethod = DlMethod.RISBO
    sampling: Sampling = Sampling.MW
    reality: bool = False

    @property
    def flmn_size(self: "So3Parameters") -> int:
        from .indexing import flmn_size

        return flmn_size(self.L, self.N, self.storage, self.reality)

    @property
    def grid_shape(self: "So3Parameters") -> tuple[int, int, int]:
        from .sampling import grid_shape

        return grid_shape(self.L, self.N, self.sampling)

    @property
    def f_size(self: "So3Parameters") -> int:
        ngamma, nbeta, nalpha = self.grid_shape
        return ngamma * nbeta * nalpha


__all__ = [
    "DlMethod",
    "NMode",
    "Sampling",
    "So3Parameters",
    "Storage",
    "StorageOrder",
    "normalize_option",
]
