import pytest

from so3jax.config import NMode
from so3jax.nmode import active_orders


def test_all_orders() -> None:
    assert active_orders(4, "all") == (-3, -2, -1, 0, 1, 2, 3)
    assert active_orders(4, NMode.ALL, reality=True) == (0, 1, 2, 3)


def test_even_and_odd_orders() -> None:
    assert active_orders(4, "even") == (-2, 0, 2)
    assert active_orders(4, "odd") == (-3, -1, 1, 3)
    assert active_orders(4, "even", reality=True) == (0, 2)
    assert active_orders(4, "odd", reality=True) == (1, 3)


def test_maximum_orders() -> None:
    assert active_orders(4, "maximum") == (-3, 3)
    assert active_orders(4, "maximum", reality=True) == (3,)
    assert active_orders(1, "maximum") == (0,)


def test_single_order_band_limit() -> None:
    assert active_orders(1, "all") == (0,)
    assert active_orders(1, "odd") == ()


def test_unknown_mode_rejected() -> None:
    with pytest.raises(ValueError):
        active_orders(3, "sometimes")
