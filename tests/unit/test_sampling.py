import numpy as np
import pytest

from so3jax.sampling import (
    alphas,
    betas,
    f_size,
    gammas,
    grid_shape,
    nalpha,
    nbeta,
    ngamma,
)


def test_mw_counts() -> None:
    assert nalpha(5, "mw") == 9
    assert nbeta(5, "mw") == 5
    assert ngamma(3) == 5
    assert grid_shape(5, 3, "mw") == (5, 5, 9)
    assert f_size(5, 3, "mw") == 5 * 5 * 9


def test_mwss_counts() -> None:
    assert nalpha(5, "mwss") == 10
    assert nbeta(5, "mwss") == 6
    assert grid_shape(5, 3, "mwss") == (5, 6, 10)


@pytest.mark.parametrize("sampling", ["mw", "mwss"])
def test_full_orientational_band_limit(sampling: str) -> None:
    L = 6
    shape = grid_shape(L, L, sampling)
    assert shape[0] == 2 * L - 1
    assert gammas(L).size == 2 * L - 1


def test_mw_betas_end_on_south_pole() -> None:
    b = betas(4, "mw")
    assert b.size == 4
    assert np.isclose(b[0], np.pi / 7)
    assert np.isclose(b[-1], np.pi)
    assert np.all(np.diff(b) > 0)


def test_mwss_betas_include_both_poles() -> None:
    b = betas(4, "mwss")
    assert b.size == 5
    assert b[0] == 0.0
    assert np.isclose(b[-1], np.pi)


def test_alphas_and_gammas_are_equiangular() -> None:
    a = alphas(3, "mw")
    assert np.allclose(a, 2 * np.pi * np.arange(5) / 5)
    g = gammas(2)
    assert np.allclose(g, 2 * np.pi * np.arange(3) / 3)


def test_single_sample_grid() -> None:
    assert grid_shape(1, 1, "mw") == (1, 1, 1)
    assert np.isclose(betas(1, "mw")[0], np.pi)
