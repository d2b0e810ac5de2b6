from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from ..exceptions import ConvergenceFailureError

__all__ = [
    "RootResult",
    "RootFindingError",
    "NoConvergenceError",
    "DerivativeTooSmallError",
    "newton_method",
]

# ---------------------------
# Results + Exceptions
# ---------------------------


@dataclass(frozen=True, slots=True)
class RootResult:
    root: float
    converged: bool
    iterations: int
    method: str
    f_at_root: float
    bracket: tuple[float, float] | None = None


class RootFindingError(ConvergenceFailureError):
    """Base class for root-finding failures."""


class NoConvergenceError(RootFindingError):
    """Raised when the method fails to converge within max_iter."""


class DerivativeTooSmallError(RootFindingError):
    """Raised when Newton's method cannot proceed due to tiny derivative."""


def _clamp(x: float, domain: tuple[float, float] | None) -> float:
    if domain is None:
        return x
    lo, hi = domain
    if x < lo:
        return lo
    if x > hi:
        return hi
    return x


def newton_method(
    Fn: Callable[[float], float],
    x0: float,
    *,
    dFn: Callable[[float], float],
    tol_f: float = 0.0,
    tol_x: float = 2.0**-50,
    max_iter: int = 100,
    domain: tuple[float, float] | None = None,
) -> RootResult:
    """Newton-Raphson iteration started at ``x0``.

    Iterates are clamped to ``domain`` (when given), which keeps the search
    inside the bracket between neighbouring root estimates. Convergence is
    declared when ``|Fn(x)| <= tol_f`` or when the relative Newton step drops
    below ``tol_x``.

    Raises
    ------
    DerivativeTooSmallError
        If the derivative vanishes at an iterate.
    NoConvergenceError
        If neither tolerance is met within ``max_iter`` iterations.
    """
    if max_iter <= 0:
        raise ValueError("max_iter must be > 0")

    x = _clamp(float(x0), domain)

    for it in range(1, max_iter + 1):
        fx = Fn(x)
        if abs(fx) <= tol_f:
            return RootResult(
                root=x,
                converged=True,
                iterations=it - 1,
                method="newton",
                f_at_root=fx,
                bracket=domain,
            )

        dfx = dFn(x)

        if dfx == 0.0 or abs(dfx) < 1e-14:
            raise DerivativeTooSmallError("Newton failed: derivative too small.")

        x_new = x - fx / dfx
        x_new = _clamp(x_new, domain)

        # Step tolerance (relative)
        if abs(x_new - x) <= tol_x * max(1.0, abs(x_new)):
            if domain is not None and x_new == x and x_new in domain:
                raise NoConvergenceError(
                    f"Newton iterate pinned at bracket bound {x_new!r}."
                )
            f_new = Fn(x_new)
            return RootResult(
                root=x_new,
                converged=True,
                iterations=it,
                method="newton",
                f_at_root=f_new,
                bracket=domain,
            )

        x = x_new

    raise NoConvergenceError(
        f"Newton did not converge within max_iter={max_iter} (last iterate {x!r})."
    )
