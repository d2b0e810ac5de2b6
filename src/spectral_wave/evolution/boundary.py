"""Left-boundary driving signals.

A driver ``g`` defines the incoming right-travelling wave

    pi(x, t) = g(t - x),    psi(x, t) = -g(t - x)

in global coordinates where domain ``d`` covers ``[2d - 1, 2d + 1]``. The left
boundary sits at ``x = -1``, so the schemes sample the driver at ``t + 1``.

The DG scheme consumes ``g`` itself (as an upwind flux) while the collocation
scheme consumes its time derivative ``g'`` (it evolves the boundary node
directly), so collocation runs need a driver with ``derivative`` set.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from ..exceptions import ConfigurationError
from ..typing import ScalarFn

__all__ = [
    "BoundaryDriver",
    "cosine_driver",
    "gaussian_pulse_driver",
    "available_drivers",
    "resolve_driver",
    "exact_right_travelling",
]


@dataclass(frozen=True, slots=True)
class BoundaryDriver:
    value: ScalarFn
    derivative: ScalarFn | None = None
    name: str = ""

    def __call__(self, t: float) -> float:
        return float(self.value(t))

    def dt(self, t: float) -> float:
        if self.derivative is None:
            raise ConfigurationError(
                f"Boundary driver '{self.name or self.value!r}' has no time derivative"
            )
        return float(self.derivative(t))

    @property
    def has_derivative(self) -> bool:
        return self.derivative is not None


def cosine_driver(omega: float) -> BoundaryDriver:
    """``g(t) = cos(omega t)``."""
    w = float(omega)
    return BoundaryDriver(
        value=lambda t: math.cos(w * t),
        derivative=lambda t: -w * math.sin(w * t),
        name=f"cos({w:g}t)",
    )


def gaussian_pulse_driver(width: float = 5.0) -> BoundaryDriver:
    """``g(t) = 2^(-width t^2)``."""
    a = float(width) * math.log(2.0)
    return BoundaryDriver(
        value=lambda t: math.exp(-a * t * t),
        derivative=lambda t: -2.0 * a * t * math.exp(-a * t * t),
        name=f"2^(-{width:g}t^2)",
    )


_PRESETS: dict[str, Callable[[], BoundaryDriver]] = {
    "sin": lambda: cosine_driver(2.0),
    "fastsin": lambda: cosine_driver(10.0),
    "pulse": lambda: gaussian_pulse_driver(5.0),
}


def available_drivers() -> list[str]:
    return sorted(_PRESETS.keys())


def resolve_driver(driver: BoundaryDriver | str) -> BoundaryDriver:
    if isinstance(driver, BoundaryDriver):
        return driver
    key = str(driver).lower().strip()
    try:
        return _PRESETS[key]()
    except KeyError as e:
        raise ConfigurationError(
            f"Unknown driver '{driver}'. Available: {', '.join(available_drivers())}"
        ) from e


def exact_right_travelling(
    driver: BoundaryDriver, x, t: float
) -> tuple[np.ndarray, np.ndarray]:
    """Reference ``(pi, psi)`` of the right-travelling wave at global ``x``."""
    xx = np.atleast_1d(np.asarray(x, dtype=float))
    g = np.array([driver(float(t) - xi) for xi in xx], dtype=float)
    return g, -g
