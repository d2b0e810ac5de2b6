# tests/test_solver.py
import math

import numpy as np
import pytest

from spectral_wave import WaveConfig, solve_wave
from spectral_wave.evolution.boundary import BoundaryDriver
from spectral_wave.evolution.schemes import CollocationScheme, DGFluxScheme
from spectral_wave.evolution.state import Field
from spectral_wave.exceptions import ConfigurationError, DimensionMismatchError
from spectral_wave.numerics.quadrature import NodeFamily


@pytest.fixture(scope="module")
def dg_order10():
    """Single DG domain of order 10 driven by cos(2t) up to t = 2."""
    cfg = WaveConfig(orders=(10,), scheme="dg", step=0.001, duration=2.0)
    return solve_wave(cfg)


def test_dg_right_travelling_wave_end_to_end(dg_order10) -> None:
    sol = dg_order10
    T = sol.t_final
    assert T == 2.0
    assert sol.steps == 2000

    g = math.cos(2.0 * (T - 1.0))
    assert sol.evaluate(1.0, Field.PI) == pytest.approx(g, abs=1e-4)
    assert sol.evaluate(1.0, Field.PSI) == pytest.approx(-g, abs=1e-4)


def test_solution_history_layout(dg_order10) -> None:
    sol = dg_order10
    assert isinstance(sol.scheme, DGFluxScheme)
    assert len(sol.history) == sol.steps + 1
    assert sol.times[0] == 0.0
    assert np.all(np.diff(sol.times) > 0.0)
    assert sol.final_state.shape == (20,)
    assert sol.operators[0].family == NodeFamily.GAUSS_LEGENDRE

    np.testing.assert_array_equal(
        sol.final_state[10:], sol.field(0, Field.PSI).nodal_values
    )
    np.testing.assert_allclose(
        sol.field(0, Field.PI, step=0).nodal_values,
        np.cos(2.0 * sol.operators[0].abscissas),
        atol=1e-15,
    )


def test_evaluate_rejects_points_outside_the_domains(dg_order10) -> None:
    with pytest.raises(ValueError):
        dg_order10.evaluate(1.5, Field.PI)


@pytest.mark.slow
def test_dg_spectral_convergence() -> None:
    errs = {}
    for n in (4, 8, 12, 16):
        cfg = WaveConfig(orders=(n,), step=0.001, duration=2.0, store="final")
        sol = solve_wave(cfg)
        g = math.cos(2.0 * (sol.t_final - 1.0))
        errs[n] = abs(sol.evaluate(1.0, Field.PI) - g)

    assert errs[4] / errs[8] > 10.0
    assert errs[8] / errs[12] > 10.0
    assert errs[16] < 1e-7


def test_multi_domain_dg_matches_exact_wave() -> None:
    cfg = WaveConfig.uniform(3, 12, step=0.002, duration=1.5, store="final")
    sol = solve_wave(cfg)
    T = sol.t_final
    for d, xg in enumerate(sol.global_nodes()):
        np.testing.assert_allclose(
            sol.field(d, Field.PI).nodal_values, np.cos(2.0 * (T - xg)), atol=1e-5
        )
    assert sol.evaluate(5.0, Field.PSI) == pytest.approx(
        -math.cos(2.0 * (T - 5.0)), abs=1e-5
    )


@pytest.mark.slow
def test_dg_reflecting_wall_matches_image_solution() -> None:
    """A pulse reflected at x = 3 with pi = 0 at the wall."""
    a = 5.0 * math.log(2.0)
    g = BoundaryDriver(value=lambda t: math.exp(-a * (t - 3.0) ** 2), name="late")
    cfg = WaveConfig.uniform(
        2, 16, step=0.002, duration=8.0, reflecting=True, driver=g, store="final"
    )
    sol = solve_wave(cfg)
    T = sol.t_final

    for d, xg in enumerate(sol.global_nodes()):
        incident = np.exp(-a * (T - xg - 3.0) ** 2)
        reflected = np.exp(-a * (T + xg - 6.0 - 3.0) ** 2)
        np.testing.assert_allclose(
            sol.field(d, Field.PI).nodal_values, incident - reflected, atol=1e-3
        )
        np.testing.assert_allclose(
            sol.field(d, Field.PSI).nodal_values, -incident - reflected, atol=1e-3
        )


def test_collocation_short_run_tracks_exact_wave() -> None:
    cfg = WaveConfig.uniform(
        2, 12, scheme="collocation", step=0.001, duration=0.05, store="final"
    )
    sol = solve_wave(cfg)
    assert isinstance(sol.scheme, CollocationScheme)
    assert sol.operators[0].family == NodeFamily.GAUSS_LOBATTO
    assert np.all(np.isfinite(sol.final_state))

    T = sol.t_final
    for d, xg in enumerate(sol.global_nodes()):
        np.testing.assert_allclose(
            sol.field(d, Field.PI).nodal_values, np.cos(2.0 * (T - xg)), atol=1e-5
        )
    # shared interface node carries the same value on both sides
    assert sol.field(0, Field.PI).value_at_node(11) == pytest.approx(
        sol.field(1, Field.PI).value_at_node(0), abs=1e-12
    )


@pytest.mark.slow
def test_collocation_spectral_convergence() -> None:
    errs = {}
    for n in (4, 8, 12):
        cfg = WaveConfig(
            orders=(n,), scheme="collocation", step=0.001, duration=2.0, store="final"
        )
        sol = solve_wave(cfg)
        assert np.all(np.isfinite(sol.final_state))
        xg = sol.global_nodes()[0]
        exact = np.cos(2.0 * (sol.t_final - xg))
        errs[n] = np.max(np.abs(sol.field(0, Field.PI).nodal_values - exact))

    assert errs[4] / errs[8] > 10.0
    assert errs[8] / errs[12] > 10.0


def test_collocation_reflecting_run_keeps_wall_and_interfaces() -> None:
    cfg = WaveConfig.uniform(
        2, 8, scheme="collocation", step=0.002, duration=4.0, reflecting=True
    )
    sol = solve_wave(cfg)
    assert sol.steps == 2000
    assert np.all(np.isfinite(sol.final_state))

    left, right = sol.field(0, Field.PI), sol.field(1, Field.PI)
    assert left.value_at_node(7) == right.value_at_node(0)
    left, right = sol.field(0, Field.PSI), sol.field(1, Field.PSI)
    assert left.value_at_node(7) == right.value_at_node(0)

    # both fields are held at their initial values on the wall node
    for f in Field:
        wall = sol.field(1, f).value_at_node(7)
        assert wall == sol.field(1, f, step=0).value_at_node(7)


def test_store_final_keeps_one_snapshot() -> None:
    sol = solve_wave(WaveConfig(orders=(4,), step=0.1, duration=0.5, store="final"))
    assert len(sol.history) == 1
    assert sol.history.n_recorded == 6
    assert sol.t_final == 0.5


@pytest.mark.parametrize(
    "kwargs",
    [
        {"scheme": "spectral-volume"},
        {"driver": "square"},
        {"node_family": "chebyshev"},
        {"scheme": "collocation", "node_family": "legendre"},
        {"scheme": "collocation", "driver": BoundaryDriver(value=math.cos)},
    ],
)
def test_bad_setups_fail_before_stepping(kwargs) -> None:
    with pytest.raises(ConfigurationError):
        solve_wave(WaveConfig(orders=(4,), duration=0.1, **kwargs))


def test_custom_initial_state_size_checked() -> None:
    with pytest.raises(DimensionMismatchError):
        solve_wave(WaveConfig(orders=(4,), duration=0.1), x0=np.zeros(7))


def test_setup_is_logged(caplog) -> None:
    with caplog.at_level("INFO", logger="spectral_wave"):
        solve_wave(WaveConfig(orders=(3,), step=0.05, duration=0.1))
    text = caplog.text
    assert "Setting up dg scheme" in text
    assert "Completed 2 steps" in text
