"""Convergence sweeps, tables and plots for wave simulations.

Plotting needs matplotlib (``pip install 'spectral-wave[plot]'``); it is
imported lazily so the tables work without it.
"""

from .compute import convergence_sweep, solution_errors
from .plots import plot_convergence, plot_modes, plot_snapshot
from .tables import convergence_rates, history_to_frame, modes_to_frame

__all__ = [
    "solution_errors",
    "convergence_sweep",
    "history_to_frame",
    "modes_to_frame",
    "convergence_rates",
    "plot_snapshot",
    "plot_modes",
    "plot_convergence",
]
