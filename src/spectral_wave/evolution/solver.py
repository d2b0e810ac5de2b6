from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import cast

import numpy as np
from numpy.typing import NDArray

from ..config import WaveConfig
from ..exceptions import ConfigurationError
from ..numerics.quadrature import DomainOperators, NodeFamily, build_domain_operators
from ..spectral.function import SpectralFunction
from .boundary import BoundaryDriver, resolve_driver
from .history import HistoryRecorder, Snapshot
from .schemes import EvolutionScheme, resolve_scheme
from .state import Field, StateLayout, initial_state
from .time_steppers import integrate_const, n_steps

__all__ = ["WaveSolution", "build_scheme", "right_travelling_state", "solve_wave"]

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WaveSolution:
    config: WaveConfig
    scheme: EvolutionScheme
    operators: tuple[DomainOperators, ...]
    history: HistoryRecorder
    steps: int

    @property
    def layout(self) -> StateLayout:
        return self.history.layout

    @property
    def times(self) -> NDArray[np.floating]:
        return self.history.times

    @property
    def t_final(self) -> float:
        return self.history.latest.time

    def snapshot(self, step: int = -1) -> Snapshot:
        return self.history[step]

    def field(
        self, domain: int, field: Field | int, step: int = -1
    ) -> SpectralFunction:
        return self.history[step].field(domain, field)

    @property
    def final_state(self) -> NDArray[np.floating]:
        snap = self.history.latest
        return self.layout.join(
            [(pi.nodal_values, psi.nodal_values) for pi, psi in snap.functions]
        )

    def global_nodes(self) -> list[NDArray[np.floating]]:
        """Node positions of every domain in global coordinates."""
        return [op.abscissas + 2.0 * d for d, op in enumerate(self.operators)]

    def locate(self, x_global: float) -> tuple[int, float]:
        """Map a global coordinate to ``(domain, local x in [-1, 1])``."""
        D = len(self.operators)
        xg = float(x_global)
        if not -1.0 <= xg <= 2.0 * D - 1.0:
            raise ValueError(f"x={xg} outside [-1, {2 * D - 1}]")
        d = min(max(int(np.floor((xg + 1.0) / 2.0)), 0), D - 1)
        return d, xg - 2.0 * d

    def evaluate(self, x_global: float, field: Field | int, step: int = -1) -> float:
        """Barycentric value of ``field`` at a global coordinate."""
        d, x_loc = self.locate(x_global)
        fn = self.field(d, field, step)
        return fn.value_at(x_loc, self.operators[d].bary_weights)


def build_scheme(
    config: WaveConfig,
) -> tuple[EvolutionScheme, tuple[DomainOperators, ...], BoundaryDriver]:
    """Resolve the scheme, build per-domain operators and the driver."""
    scheme_cls = resolve_scheme(config.scheme)

    if config.node_family is None:
        family = scheme_cls.node_family
    else:
        try:
            family = NodeFamily(str(config.node_family).lower().strip())
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown node family '{config.node_family}'. "
                f"Expected one of: {[f.value for f in NodeFamily]}"
            ) from e

    operators = tuple(
        build_domain_operators(n, family, roots=config.roots) for n in config.orders
    )
    driver = resolve_driver(config.driver)
    scheme = scheme_cls(operators, driver, bool(config.reflecting))
    return cast(EvolutionScheme, scheme), operators, driver


def right_travelling_state(
    layout: StateLayout,
    operators: tuple[DomainOperators, ...],
    driver: BoundaryDriver,
    t: float = 0.0,
) -> NDArray[np.floating]:
    """Global state of the wave ``pi = g(t - x)``, ``psi = -g(t - x)``."""

    def pi0(x: NDArray[np.floating]) -> NDArray[np.floating]:
        return np.array([driver(float(t) - xi) for xi in x], dtype=float)

    def psi0(x: NDArray[np.floating]) -> NDArray[np.floating]:
        return -pi0(x)

    return initial_state(layout, [op.abscissas for op in operators], pi0, psi0)


def solve_wave(
    config: WaveConfig, *, x0: NDArray[np.floating] | None = None
) -> WaveSolution:
    """Run one simulation described by ``config``.

    The initial state defaults to the right-travelling wave generated by the
    boundary driver, so the exact solution is ``pi(x, t) = g(t - x)``.
    """
    scheme, operators, driver = build_scheme(config)
    layout = StateLayout(orders=config.orders)

    log.info(
        "Setting up %s scheme: %d domain(s), orders=%s, nodes=%s, driver=%s, %s",
        scheme.name,
        config.n_domains,
        list(config.orders),
        operators[0].family.value,
        driver.name or "custom",
        "reflecting" if config.reflecting else "transmitting",
    )

    if x0 is None:
        x_init = right_travelling_state(layout, operators, driver)
    else:
        x_init = layout.check(x0, "x0").copy()

    history = HistoryRecorder(layout, operators, x_init, t0=0.0, store=config.store)

    log.info(
        "Integrating %d RK4 steps of h=%g up to t=%g",
        n_steps(config.duration, config.step),
        config.step,
        config.duration,
    )
    _, steps = integrate_const(
        scheme.rhs,
        x_init,
        t0=0.0,
        duration=config.duration,
        h=config.step,
        observer=history,
    )
    log.info("Completed %d steps, t_final=%g", steps, history.latest.time)

    return WaveSolution(
        config=config,
        scheme=scheme,
        operators=operators,
        history=history,
        steps=steps,
    )
