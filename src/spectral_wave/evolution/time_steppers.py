# src/spectral_wave/evolution/time_steppers.py
from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from ..exceptions import DimensionMismatchError, NonFiniteStateError
from ..typing import Observer, RhsFn

__all__ = ["rk4_step", "n_steps", "integrate_const"]


def rk4_step(
    f: RhsFn,
    x_n: NDArray[np.floating],
    t_n: float,
    h: float,
) -> NDArray[np.floating]:
    """One classical 4th-order Runge-Kutta step; returns a new state."""
    if not h > 0:
        raise ValueError("Require h > 0")

    x_n = np.asarray(x_n, dtype=float)
    k1 = np.asarray(f(x_n, t_n), dtype=float)
    if k1.shape != x_n.shape:
        raise DimensionMismatchError(
            f"rhs must return shape {x_n.shape} got {k1.shape}"
        )
    k2 = np.asarray(f(x_n + 0.5 * h * k1, t_n + 0.5 * h), dtype=float)
    k3 = np.asarray(f(x_n + 0.5 * h * k2, t_n + 0.5 * h), dtype=float)
    k4 = np.asarray(f(x_n + h * k3, t_n + h), dtype=float)

    return x_n + (h / 6.0) * (k1 + 2.0 * k2 + 2.0 * k3 + k4)


def n_steps(duration: float, h: float) -> int:
    """Number of fixed steps needed to cover ``duration``: ``ceil(duration / h)``.

    A relative slack of 1e-12 keeps ``duration = k * h`` (up to rounding) at
    exactly ``k`` steps.
    """
    if not h > 0:
        raise ValueError("Require h > 0")
    if not duration > 0:
        raise ValueError("Require duration > 0")
    ratio = duration / h
    return max(1, math.ceil(ratio - 1e-12 * max(1.0, ratio)))


def integrate_const(
    f: RhsFn,
    x0: NDArray[np.floating],
    *,
    t0: float = 0.0,
    duration: float,
    h: float,
    observer: Observer | None = None,
) -> tuple[NDArray[np.floating], int]:
    """Advance ``x0`` from ``t0`` to ``t0 + duration`` with fixed-step RK4.

    Takes :func:`n_steps` steps; the last one is shortened if needed so the
    final time is exactly ``t0 + duration``. ``observer(x, t)`` is called after
    every accepted step (not for the initial state).

    Returns the final state and the number of steps taken.
    """
    steps = n_steps(duration, h)
    t_end = float(t0) + float(duration)

    x = np.array(x0, dtype=float, copy=True)
    t = float(t0)
    for k in range(1, steps + 1):
        t_next = t_end if k == steps else float(t0) + k * h
        x = rk4_step(f, x, t, t_next - t)
        if not np.all(np.isfinite(x)):
            raise NonFiniteStateError(f"State became non-finite at t={t_next!r}")
        t = t_next
        if observer is not None:
            observer(x, t)

    return x, steps
