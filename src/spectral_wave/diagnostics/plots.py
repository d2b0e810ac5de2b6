from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pandas as pd

from ..evolution.boundary import exact_right_travelling, resolve_driver
from ..evolution.solver import WaveSolution
from ..evolution.state import Field
from ._mpl import get_plt, pretty_ax, require_columns
from .tables import modes_to_frame

__all__ = ["plot_snapshot", "plot_modes", "plot_convergence"]


def plot_snapshot(
    solution: WaveSolution,
    step: int = -1,
    *,
    fields: Sequence[Field] = (Field.PI, Field.PSI),
    n_fine: int = 64,
    exact: bool = True,
    figsize=(10, 4),
):
    """Plot nodal values and their interpolants for one recorded step.

    Each domain is drawn separately, so jumps at DG interfaces stay visible.
    With ``exact=True`` the right-travelling reference wave is overlaid.
    """
    snap = solution.snapshot(step)
    D = snap.n_domains

    plt = get_plt()
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)

    colors = {Field.PI: "C0", Field.PSI: "C1"}
    for f in fields:
        f = Field(f)
        label = f.name.lower()
        for d in range(D):
            fn = snap.field(d, f)
            ops = solution.operators[d]
            xs = np.linspace(-1.0, 1.0, int(n_fine))
            ys = [fn.value_at(float(x), ops.bary_weights) for x in xs]
            ax.plot(
                xs + 2.0 * d,
                ys,
                color=colors[f],
                lw=1.2,
                label=label if d == 0 else None,
            )
            ax.plot(
                ops.abscissas + 2.0 * d,
                fn.nodal_values,
                "o",
                ms=3,
                color=colors[f],
            )

    if exact:
        driver = resolve_driver(solution.config.driver)
        xg = np.linspace(-1.0, 2.0 * D - 1.0, 400)
        pi_ex, psi_ex = exact_right_travelling(driver, xg, snap.time)
        if Field.PI in fields:
            ax.plot(xg, pi_ex, "k--", lw=0.8, label="exact pi")
        if Field.PSI in fields:
            ax.plot(xg, psi_ex, "k:", lw=0.8, label="exact psi")

    for k in range(1, D):
        ax.axvline(2.0 * k - 1.0, color="0.7", lw=0.6)

    ax.set_xlabel("x")
    ax.set_ylabel("value")
    ax.set_title(f"{solution.scheme.name} at t={snap.time:.4g}")
    ax.legend()
    pretty_ax(ax)
    return fig, ax


def plot_modes(
    solution: WaveSolution,
    n: int,
    *,
    which: str = "bottom",
    field: Field = Field.PI,
    every: int = 1,
    figsize=(8, 4),
):
    """Time series of the lowest (``"bottom"``) or highest (``"top"``) ``n``
    Legendre coefficients of ``field``, one line per domain and mode.
    """
    if which not in ("top", "bottom"):
        raise ValueError("which must be 'top' or 'bottom'")
    n = int(n)
    if n < 1:
        raise ValueError("n must be >= 1")
    field = Field(field)

    df = modes_to_frame(solution, every=every)
    df = df[df["field"] == field.name.lower()]

    plt = get_plt()
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)

    for d, g in df.groupby("domain", sort=True):
        order = solution.operators[int(d)].order
        k = min(n, order)
        modes = range(k) if which == "bottom" else range(order - k, order)
        for m in modes:
            s = g[g["mode"] == m]
            ax.plot(
                s["time"].to_numpy(),
                s["coeff"].to_numpy(),
                lw=1.0,
                label=f"domain {d}, mode {m}",
            )

    ax.set_xlabel("t")
    ax.set_ylabel("coefficient")
    ax.set_title(f"{which} {n} modes of {field.name.lower()}")
    ax.legend(fontsize="small")
    pretty_ax(ax)
    return fig, ax


def plot_convergence(
    df: pd.DataFrame,
    *,
    x_col: str = "order",
    y_col: str = "abs_err",
    group_col: str | None = "scheme",
    figsize=(6, 4),
):
    """Semilog plot of error vs order, one line per ``group_col`` value."""
    require_columns(df, [x_col, y_col])

    plt = get_plt()
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)

    if group_col is not None and group_col in df.columns:
        groups = list(df.groupby(group_col, sort=True))
    else:
        groups = [(y_col, df)]

    for key, g in groups:
        g = g.sort_values(x_col)
        ax.semilogy(
            g[x_col].to_numpy(),
            g[y_col].astype(float).to_numpy(),
            marker="o",
            label=str(key),
        )

    ax.set_xlabel(x_col)
    ax.set_ylabel(y_col)
    ax.set_title("Spectral convergence")
    ax.legend()
    pretty_ax(ax)
    return fig, ax
