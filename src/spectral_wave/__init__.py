"""
spectral_wave

Multi-domain spectral solver for the 1D first-order wave system.

This package exposes the main user-facing entry points at the top level, so
you can write, for example:

    from spectral_wave import WaveConfig, solve_wave

    sol = solve_wave(WaveConfig.uniform(2, 12, scheme="dg", duration=2.0))
"""

from .config import RootFindingConfig, WaveConfig
from .evolution import (
    BoundaryDriver,
    CollocationScheme,
    DGFluxScheme,
    Field,
    WaveSolution,
    available_drivers,
    available_schemes,
    cosine_driver,
    exact_right_travelling,
    gaussian_pulse_driver,
    register_scheme,
    solve_wave,
)
from .exceptions import (
    ConfigurationError,
    ConvergenceFailureError,
    DimensionMismatchError,
    IndexOutOfRangeError,
    InterpolationSingularityError,
    InvalidOrderError,
    NonFiniteStateError,
    SpectralWaveError,
)
from .numerics import DomainOperators, NodeFamily, build_domain_operators
from .spectral import SpectralFunction

__version__ = "0.1.0"

__all__ = [
    # Config
    "WaveConfig",
    "RootFindingConfig",
    # Spectral building blocks
    "NodeFamily",
    "DomainOperators",
    "build_domain_operators",
    "SpectralFunction",
    # Evolution
    "Field",
    "BoundaryDriver",
    "cosine_driver",
    "gaussian_pulse_driver",
    "available_drivers",
    "CollocationScheme",
    "DGFluxScheme",
    "register_scheme",
    "available_schemes",
    "WaveSolution",
    "solve_wave",
    "exact_right_travelling",
    # Errors
    "SpectralWaveError",
    "ConfigurationError",
    "InvalidOrderError",
    "DimensionMismatchError",
    "IndexOutOfRangeError",
    "ConvergenceFailureError",
    "InterpolationSingularityError",
    "NonFiniteStateError",
]
