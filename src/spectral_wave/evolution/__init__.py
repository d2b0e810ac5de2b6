"""Time evolution of the first-order wave system on adjoining domains.

The semi-discrete system

    d(pi)/dt = d(psi)/dx,    d(psi)/dt = d(pi)/dx

is advanced with fixed-step RK4. Domain ``d`` covers ``[2d - 1, 2d + 1]`` in
global coordinates and is driven from the left boundary by a
:class:`BoundaryDriver`.
"""

from .boundary import (
    BoundaryDriver,
    available_drivers,
    cosine_driver,
    exact_right_travelling,
    gaussian_pulse_driver,
    resolve_driver,
)
from .history import HistoryRecorder, Snapshot
from .schemes import (
    CollocationScheme,
    DGFluxScheme,
    EvolutionScheme,
    available_schemes,
    register_scheme,
    resolve_scheme,
)
from .solver import WaveSolution, build_scheme, right_travelling_state, solve_wave
from .state import Field, StateLayout, initial_state
from .time_steppers import integrate_const, n_steps, rk4_step

__all__ = [
    # State
    "Field",
    "StateLayout",
    "initial_state",
    # Boundary drivers
    "BoundaryDriver",
    "cosine_driver",
    "gaussian_pulse_driver",
    "available_drivers",
    "resolve_driver",
    "exact_right_travelling",
    # Schemes / registry
    "EvolutionScheme",
    "CollocationScheme",
    "DGFluxScheme",
    "register_scheme",
    "available_schemes",
    "resolve_scheme",
    # Time stepping
    "rk4_step",
    "n_steps",
    "integrate_const",
    # History
    "Snapshot",
    "HistoryRecorder",
    # Solver
    "WaveSolution",
    "build_scheme",
    "right_travelling_state",
    "solve_wave",
]
