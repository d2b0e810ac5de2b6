"""Legendre polynomial values and closed-form derivatives.

Derivatives use the classical identities

    P_n'(x)  = n (x P_n(x) - P_{n-1}(x)) / (x^2 - 1)
    P_n''(x) = n (((n - 1) x^2 - n - 1) P_n(x) + 2 x P_{n-1}(x)) / (x^2 - 1)^2

which are exact in exact arithmetic but lose accuracy as ``x`` approaches
``+-1`` (cancellation in the numerator over a vanishing denominator). At
``x = +-1`` exactly, the known endpoint values are returned instead:

    P_n'(+-1)  = (+-1)^(n-1) n (n + 1) / 2
    P_n''(+-1) = (+-1)^n (n - 1) n (n + 1) (n + 2) / 8
"""

from __future__ import annotations

import numpy as np
from scipy.special import eval_legendre

from ..typing import ArrayLike

__all__ = [
    "legendre_p",
    "legendre_dp",
    "legendre_ddp",
    "lobatto_q",
    "lobatto_dq",
]


def _as_output(x_in: np.ndarray, out: np.ndarray):
    if x_in.ndim == 0:
        return float(out)
    return out


def legendre_p(n: int, x: ArrayLike):
    """Value of the Legendre polynomial ``P_n`` at ``x``."""
    if n < 0:
        raise ValueError("Legendre order must be >= 0")
    xx = np.asarray(x, dtype=float)
    return _as_output(xx, np.asarray(eval_legendre(n, xx), dtype=float))


def legendre_dp(n: int, x: ArrayLike):
    """First derivative ``P_n'`` at ``x`` (closed form, see module notes)."""
    if n < 0:
        raise ValueError("Legendre order must be >= 0")
    xx = np.asarray(x, dtype=float)
    if n == 0:
        return _as_output(xx, np.zeros_like(xx))

    at_end = np.abs(xx) == 1.0
    denom = np.where(at_end, 1.0, xx * xx - 1.0)
    inner = n * (xx * eval_legendre(n, xx) - eval_legendre(n - 1, xx)) / denom

    end_val = np.sign(xx) ** (n - 1) * n * (n + 1) / 2.0
    return _as_output(xx, np.where(at_end, end_val, inner))


def legendre_ddp(n: int, x: ArrayLike):
    """Second derivative ``P_n''`` at ``x`` (closed form, see module notes)."""
    if n < 0:
        raise ValueError("Legendre order must be >= 0")
    xx = np.asarray(x, dtype=float)
    if n < 2:
        return _as_output(xx, np.zeros_like(xx))

    at_end = np.abs(xx) == 1.0
    denom = np.where(at_end, 1.0, (xx * xx - 1.0) ** 2)
    inner = (
        n
        * (
            ((n - 1) * xx * xx - n - 1) * eval_legendre(n, xx)
            + 2.0 * xx * eval_legendre(n - 1, xx)
        )
        / denom
    )

    end_val = np.sign(xx) ** n * (n - 1) * n * (n + 1) * (n + 2) / 8.0
    return _as_output(xx, np.where(at_end, end_val, inner))


# --- Lobatto polynomial q_n = P_n - P_{n-2} (roots are the Gauss-Lobatto nodes) ---


def lobatto_q(n: int, x: ArrayLike):
    if n < 2:
        raise ValueError("q_n needs n >= 2")
    return legendre_p(n, x) - legendre_p(n - 2, x)


def lobatto_dq(n: int, x: ArrayLike):
    if n < 2:
        raise ValueError("q_n needs n >= 2")
    return legendre_dp(n, x) - legendre_dp(n - 2, x)
