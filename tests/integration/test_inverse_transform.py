import itertools

import jax.numpy as jnp
import numpy as np
import pytest

from so3jax import So3Transform, so3_inverse
from so3jax.indexing import expand_real_coefficients, harmonic_index
from so3jax.runtime.reference import inverse_direct
from so3jax.solver import validate_parameters

LAYOUTS = list(itertools.product(["0first", "negfirst"], ["pad", "compact"]))


def test_constant_function_from_zeroth_degree() -> None:
    flmn = np.zeros(4, dtype=np.complex128)
    flmn[0] = 1.0
    f = so3_inverse(flmn, 2, 1, "0first", "pad", "all", "risbo", False, "mw")

    assert f.shape == (1, 2, 3)
    assert jnp.iscomplexobj(f)
    np.testing.assert_allclose(f, 1.0 / (8.0 * np.pi**2), atol=1e-14)


def test_smallest_band_limit() -> None:
    f = so3_inverse(np.array([2.0 - 1.0j]), 1, 1)
    assert f.shape == (1, 1, 1)
    np.testing.assert_allclose(f[0, 0, 0], (2.0 - 1.0j) / (8.0 * np.pi**2))


@pytest.mark.parametrize("sampling", ["mw", "mwss"])
@pytest.mark.parametrize("order,storage", LAYOUTS)
def test_engine_matches_direct_sum(order, storage, sampling, random_flmn) -> None:
    L, N = 5, 3
    flmn = random_flmn(L, N, order=order, storage=storage, seed=11)
    params = validate_parameters(L, N, order, storage, sampling=sampling)

    f = so3_inverse(flmn, L, N, order, storage, sampling=sampling)
    expected = inverse_direct(flmn, params)

    assert f.shape == params.grid_shape
    np.testing.assert_allclose(np.asarray(f), expected, atol=1e-11)


@pytest.mark.parametrize("sampling", ["mw", "mwss"])
def test_recursion_choice_does_not_change_result(sampling, random_flmn) -> None:
    L, N = 8, 4
    flmn = random_flmn(L, N, seed=5)
    f_risbo = so3_inverse(flmn, L, N, dl_method="risbo", sampling=sampling)
    f_trapani = so3_inverse(flmn, L, N, dl_method="trapani", sampling=sampling)
    np.testing.assert_allclose(f_risbo, f_trapani, atol=1e-12)


@pytest.mark.parametrize("sampling", ["mw", "mwss"])
def test_full_orientational_band_limit(sampling, random_flmn) -> None:
    L = N = 4
    flmn = random_flmn(L, N, storage="compact", seed=2)
    params = validate_parameters(L, N, storage="compact", sampling=sampling)

    f = so3_inverse(flmn, L, N, storage="compact", sampling=sampling)

    assert f.shape[0] == 2 * N - 1
    np.testing.assert_allclose(np.asarray(f), inverse_direct(flmn, params), atol=1e-11)


def test_linearity(random_flmn) -> None:
    L, N = 6, 3
    x = random_flmn(L, N, storage="compact", seed=1)
    y = random_flmn(L, N, storage="compact", seed=2)
    a, b = 0.7 - 1.3j, -2.1 + 0.4j

    lhs = so3_inverse(a * x + b * y, L, N, storage="compact")
    rhs = a * so3_inverse(x, L, N, storage="compact") + b * so3_inverse(
        y, L, N, storage="compact"
    )
    np.testing.assert_allclose(lhs, rhs, atol=1e-12)


@pytest.mark.parametrize("sampling", ["mw", "mwss"])
@pytest.mark.parametrize("order,storage", LAYOUTS)
def test_real_path_matches_complex_path(order, storage, sampling, random_flmn) -> None:
    L, N = 5, 3
    flmn_real = random_flmn(L, N, order=order, storage=storage, reality=True, seed=7)
    flmn_full = expand_real_coefficients(flmn_real, L, N, order, storage)

    f_real = so3_inverse(
        flmn_real, L, N, order, storage, reality=True, sampling=sampling
    )
    f_complex = so3_inverse(flmn_full, L, N, order, storage, sampling=sampling)

    assert not jnp.iscomplexobj(f_real)
    np.testing.assert_allclose(np.imag(f_complex), 0.0, atol=1e-12)
    np.testing.assert_allclose(f_real, np.real(f_complex), atol=1e-12)


def test_real_path_matches_direct_sum(random_flmn) -> None:
    L, N = 4, 2
    flmn = random_flmn(L, N, reality=True, seed=9)
    params = validate_parameters(L, N, reality=True)
    f = So3Transform(L, N, reality=True).inverse(flmn)
    np.testing.assert_allclose(np.asarray(f), inverse_direct(flmn, params), atol=1e-11)


def _keep_orders(flmn, index, keep) -> np.ndarray:
    out = np.zeros_like(flmn)
    for el, m, n in index.triples():
        if keep(n):
            ind = index.offset(el, m, n)
            out[ind] = flmn[ind]
    return out


@pytest.mark.parametrize(
    "n_mode,keep",
    [
        ("even", lambda n: n % 2 == 0),
        ("odd", lambda n: n % 2 != 0),
        ("maximum", lambda n: abs(n) == 3),
    ],
)
@pytest.mark.parametrize("reality", [False, True])
def test_n_mode_filter_matches_unfiltered(n_mode, keep, reality, random_flmn) -> None:
    L, N = 6, 4
    index = harmonic_index(L, N, "negfirst", "pad", reality)
    flmn = random_flmn(L, N, order="negfirst", reality=reality, seed=4)
    filtered = _keep_orders(flmn, index, keep)

    f_all = so3_inverse(filtered, L, N, "negfirst", n_mode="all", reality=reality)
    f_mode = so3_inverse(filtered, L, N, "negfirst", n_mode=n_mode, reality=reality)
    np.testing.assert_allclose(f_mode, f_all, atol=1e-12)


def test_excluded_orders_are_never_read(random_flmn) -> None:
    L, N = 5, 3
    index = harmonic_index(L, N, "0first", "compact")
    flmn = _keep_orders(random_flmn(L, N, storage="compact"), index, lambda n: n % 2 == 0)
    poisoned = flmn.copy()
    for el, m, n in index.triples():
        if n % 2 != 0:
            poisoned[index.offset(el, m, n)] = np.nan

    f = so3_inverse(poisoned, L, N, storage="compact", n_mode="even")
    assert np.all(np.isfinite(np.asarray(f)))
    np.testing.assert_allclose(
        f, so3_inverse(flmn, L, N, storage="compact"), atol=1e-12
    )


def test_padding_slots_are_ignored(random_flmn) -> None:
    L, N = 4, 3
    flmn = random_flmn(L, N, seed=8)
    index = harmonic_index(L, N)
    valid = {index.offset(*t) for t in index.triples()}
    noisy = flmn.copy()
    for ind in range(index.size):
        if ind not in valid:
            noisy[ind] = 1e3
    np.testing.assert_allclose(so3_inverse(noisy, L, N), so3_inverse(flmn, L, N))
