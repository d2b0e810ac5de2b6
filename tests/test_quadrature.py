# tests/test_quadrature.py
import numpy as np
import pytest
from numpy.polynomial import legendre as npleg

from spectral_wave.config import RootFindingConfig
from spectral_wave.exceptions import (
    ConvergenceFailureError,
    DimensionMismatchError,
    InterpolationSingularityError,
    InvalidOrderError,
)
from spectral_wave.numerics.quadrature import (
    NodeFamily,
    build_domain_operators,
    clear_operator_cache,
    generate_barycentric_weights,
    generate_differentiation_matrix,
    generate_legendre_abscissas,
    generate_legendre_weights,
    generate_lobatto_abscissas,
    generate_lobatto_weights,
)


def _lobatto_reference(n: int) -> np.ndarray:
    interior = np.sort(npleg.Legendre.basis(n - 1).deriv(1).roots().real)
    return np.concatenate([[-1.0], interior, [1.0]])


# --- Abscissas --------------------------------------------------------------


@pytest.mark.parametrize("n", range(1, 21))
def test_legendre_nodes_and_weights_match_numpy(n: int) -> None:
    x_ref, w_ref = npleg.leggauss(n)
    x = generate_legendre_abscissas(n)
    np.testing.assert_allclose(x, x_ref, atol=1e-13)
    np.testing.assert_allclose(generate_legendre_weights(n, x), w_ref, atol=1e-13)


@pytest.mark.parametrize("n", range(2, 13))
def test_lobatto_nodes_match_derivative_roots(n: int) -> None:
    x = generate_lobatto_abscissas(n)
    assert x[0] == -1.0 and x[-1] == 1.0
    np.testing.assert_allclose(x, _lobatto_reference(n), atol=1e-12)


@pytest.mark.parametrize("family", list(NodeFamily))
@pytest.mark.parametrize("n", range(2, 13))
def test_node_properties(family: NodeFamily, n: int) -> None:
    ops = build_domain_operators(n, family)
    x = ops.abscissas

    assert np.all(np.diff(x) > 0.0)
    np.testing.assert_allclose(x, -x[::-1], atol=1e-15)
    assert np.all(ops.weights > 0.0)
    assert ops.weights.sum() == pytest.approx(2.0, abs=1e-13)
    if n % 2:
        assert x[n // 2] == 0.0
    if family == NodeFamily.GAUSS_LEGENDRE:
        assert np.all(np.abs(x) < 1.0)


def test_order_four_literal_values() -> None:
    x = generate_legendre_abscissas(4)
    w = generate_legendre_weights(4, x)
    np.testing.assert_allclose(
        x, [-0.8611363116, -0.3399810436, 0.3399810436, 0.8611363116], atol=1e-10
    )
    np.testing.assert_allclose(
        w, [0.3478548451, 0.6521451549, 0.6521451549, 0.3478548451], atol=1e-10
    )


def test_small_lobatto_rules() -> None:
    np.testing.assert_allclose(generate_lobatto_weights(2, np.array([-1.0, 1.0])), 1.0)

    x3 = generate_lobatto_abscissas(3)
    np.testing.assert_array_equal(x3, [-1.0, 0.0, 1.0])
    np.testing.assert_allclose(generate_lobatto_weights(3, x3), [1 / 3, 4 / 3, 1 / 3])

    x4 = generate_lobatto_abscissas(4)
    np.testing.assert_allclose(x4[1:3], [-1 / np.sqrt(5), 1 / np.sqrt(5)], atol=1e-14)
    np.testing.assert_allclose(
        generate_lobatto_weights(4, x4), [1 / 6, 5 / 6, 5 / 6, 1 / 6], atol=1e-14
    )


@pytest.mark.parametrize(
    "fn, bad",
    [
        (generate_legendre_abscissas, 0),
        (generate_lobatto_abscissas, 1),
        (generate_legendre_abscissas, 2.5),
    ],
)
def test_invalid_orders_rejected(fn, bad) -> None:
    with pytest.raises(InvalidOrderError):
        fn(bad)


def test_iteration_budget_exhaustion_is_reported() -> None:
    with pytest.raises(ConvergenceFailureError):
        generate_legendre_abscissas(20, roots=RootFindingConfig(max_iter=1))


# --- Quadrature exactness ---------------------------------------------------


@pytest.mark.parametrize("n", [3, 6, 10])
def test_quadrature_exactness(n: int) -> None:
    xg = generate_legendre_abscissas(n)
    wg = generate_legendre_weights(n, xg)
    xl = generate_lobatto_abscissas(n)
    wl = generate_lobatto_weights(n, xl)

    for k in range(2 * n):
        exact = 0.0 if k % 2 else 2.0 / (k + 1)
        assert np.dot(wg, xg**k) == pytest.approx(exact, abs=1e-13)
        if k <= 2 * n - 3:
            assert np.dot(wl, xl**k) == pytest.approx(exact, abs=1e-13)


# --- Barycentric weights and differentiation ---------------------------------


def test_barycentric_weights_definition() -> None:
    x = np.array([-1.0, 0.0, 0.5, 1.0])
    wb = generate_barycentric_weights(4, x)
    for i in range(4):
        others = np.delete(x, i)
        assert wb[i] == pytest.approx(1.0 / np.prod(x[i] - others))


def test_barycentric_weights_reject_repeated_nodes() -> None:
    with pytest.raises(InterpolationSingularityError):
        generate_barycentric_weights(3, np.array([0.0, 0.5, 0.5]))


@pytest.mark.parametrize("family", list(NodeFamily))
@pytest.mark.parametrize("n", [2, 5, 8, 12])
def test_differentiation_matrix_exact_on_monomials(family: NodeFamily, n: int) -> None:
    ops = build_domain_operators(n, family)
    D = ops.diff_matrix
    x = ops.abscissas

    np.testing.assert_allclose(D @ np.ones(n), 0.0, atol=1e-11)
    for k in range(1, n):
        np.testing.assert_allclose(D @ x**k, k * x ** (k - 1), atol=1e-9)


def test_differentiation_matrix_shape_check() -> None:
    with pytest.raises(DimensionMismatchError):
        generate_differentiation_matrix(3, np.zeros(3), np.ones(2))


# --- Cached per-domain operators --------------------------------------------


def test_operators_are_cached_and_read_only() -> None:
    a = build_domain_operators(7, "legendre")
    b = build_domain_operators(7, NodeFamily.GAUSS_LEGENDRE)
    assert a is b
    assert not a.abscissas.flags.writeable
    assert not a.weights.flags.writeable
    assert not a.bary_weights.flags.writeable
    with pytest.raises(ValueError):
        a.abscissas[0] = 0.0

    clear_operator_cache()
    c = build_domain_operators(7, "legendre")
    assert c is not a
    np.testing.assert_array_equal(c.abscissas, a.abscissas)


@pytest.mark.parametrize("family", list(NodeFamily))
def test_cached_operators_do_not_mask_bad_orders(family: NodeFamily) -> None:
    ops = build_domain_operators(2, family)
    assert build_domain_operators(2.0, family) is ops
    with pytest.raises(InvalidOrderError):
        build_domain_operators(2.5, family)
    with pytest.raises(InvalidOrderError):
        build_domain_operators(True, family)


def test_lobatto_operators_need_two_nodes() -> None:
    with pytest.raises(InvalidOrderError):
        build_domain_operators(1, NodeFamily.GAUSS_LOBATTO)


def test_unknown_family_rejected() -> None:
    with pytest.raises(ValueError):
        build_domain_operators(4, "chebyshev")
