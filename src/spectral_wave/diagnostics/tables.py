from __future__ import annotations

import numpy as np
import pandas as pd

from ..evolution.solver import WaveSolution
from ..evolution.state import Field

__all__ = ["history_to_frame", "modes_to_frame", "convergence_rates"]


def history_to_frame(solution: WaveSolution) -> pd.DataFrame:
    """Long-format table of every recorded nodal value.

    Columns: ``time``, ``domain``, ``field`` (``"pi"``/``"psi"``), ``node``,
    ``x`` (global position) and ``value``.
    """
    xg = solution.global_nodes()
    cols: dict[str, list[np.ndarray]] = {
        k: [] for k in ("time", "domain", "field", "node", "x", "value")
    }

    for snap in solution.history:
        for d, pair in enumerate(snap.functions):
            n = xg[d].size
            for f, fn in zip(Field, pair):
                cols["time"].append(np.full(n, snap.time))
                cols["domain"].append(np.full(n, d))
                cols["field"].append(np.full(n, f.name.lower(), dtype=object))
                cols["node"].append(np.arange(n))
                cols["x"].append(xg[d])
                cols["value"].append(fn.nodal_values)

    return pd.DataFrame({k: np.concatenate(v) for k, v in cols.items()})


def modes_to_frame(solution: WaveSolution, *, every: int = 1) -> pd.DataFrame:
    """Long-format table of the Legendre coefficients of every recorded step.

    Columns: ``time``, ``domain``, ``field``, ``mode`` (polynomial degree) and
    ``coeff``. Only every ``every``-th snapshot is kept.
    """
    every = int(every)
    if every < 1:
        raise ValueError("every must be >= 1")

    cols: dict[str, list[np.ndarray]] = {
        k: [] for k in ("time", "domain", "field", "mode", "coeff")
    }
    for snap in solution.history.snapshots[::every]:
        for d, pair in enumerate(snap.functions):
            for f, fn in zip(Field, pair):
                coeffs = fn.modal_coefficients()
                n = coeffs.size
                cols["time"].append(np.full(n, snap.time))
                cols["domain"].append(np.full(n, d))
                cols["field"].append(np.full(n, f.name.lower(), dtype=object))
                cols["mode"].append(np.arange(n))
                cols["coeff"].append(np.asarray(coeffs, dtype=float))

    return pd.DataFrame({k: np.concatenate(v) for k, v in cols.items()})


def convergence_rates(
    df: pd.DataFrame, *, x_col: str = "order", y_col: str = "abs_err"
) -> pd.DataFrame:
    """Add the error reduction factor between consecutive rows."""

    d = df.sort_values(x_col).reset_index(drop=True).copy()
    err = d[y_col].astype(float).to_numpy()
    ratio = np.full(err.shape, np.nan)
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio[1:] = err[:-1] / err[1:]
    d["reduction"] = ratio
    return d
