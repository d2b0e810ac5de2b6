"""Spectral operators on the reference interval [-1, 1].

Two node families are supported:

* Gauss-Legendre: the ``n`` roots of ``P_n``, strictly inside (-1, 1).
  Used by the discontinuous-Galerkin scheme.
* Gauss-Lobatto: the ``n`` roots of ``q_n = P_n - P_{n-2}``, i.e. ``+-1`` plus
  the ``n - 2`` roots of ``P_{n-1}'``. Used by the collocation scheme.

For each family this module generates abscissas, quadrature weights,
barycentric weights and the nodal differentiation matrix (Kopriva,
*Implementing Spectral Methods for Partial Differential Equations*, ch. 1-3).
:func:`build_domain_operators` bundles them into an immutable
:class:`DomainOperators` that is cached per ``(order, family)`` and shared by
reference.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from ..config import RootFindingConfig
from ..exceptions import (
    ConvergenceFailureError,
    DimensionMismatchError,
    InterpolationSingularityError,
    InvalidOrderError,
)
from .legendre import legendre_dp, legendre_p, lobatto_dq, lobatto_q
from .matrix import SquareMatrix
from .root_finding import newton_method

__all__ = [
    "NodeFamily",
    "DomainOperators",
    "generate_legendre_abscissas",
    "generate_lobatto_abscissas",
    "generate_legendre_weights",
    "generate_lobatto_weights",
    "generate_barycentric_weights",
    "generate_differentiation_matrix",
    "build_domain_operators",
    "clear_operator_cache",
]

log = logging.getLogger(__name__)

_DEFAULT_ROOTS = RootFindingConfig()


class NodeFamily(str, Enum):
    GAUSS_LEGENDRE = "legendre"
    GAUSS_LOBATTO = "lobatto"


def _check_order(order: int, minimum: int, what: str) -> int:
    if isinstance(order, bool) or int(order) != order:
        raise InvalidOrderError(f"{what} order must be an integer, got {order!r}")
    order = int(order)
    if order < minimum:
        raise InvalidOrderError(f"{what} order must be >= {minimum}, got {order}")
    return order


def _readonly(a: NDArray[np.floating]) -> NDArray[np.floating]:
    a = np.array(a, dtype=float, copy=True)
    a.setflags(write=False)
    return a


def _check_nodes(x: NDArray[np.floating], order: int, what: str) -> None:
    if x.shape != (order,):
        raise ConvergenceFailureError(
            f"{what}: expected {order} abscissas, got shape {x.shape}"
        )
    if order > 1 and not np.all(np.diff(x) > 0.0):
        raise ConvergenceFailureError(
            f"{what}: root finding produced repeated or unordered abscissas"
        )


# ---------------------------
# Abscissas
# ---------------------------


def generate_legendre_abscissas(
    order: int, *, roots: RootFindingConfig = _DEFAULT_ROOTS
) -> NDArray[np.floating]:
    """Gauss-Legendre nodes: the ``order`` roots of ``P_order``, increasing.

    The upper half is found by Newton-Raphson from the asymptotic seeds
    ``(1 - 1/n^2 + 1/n^3) cos(pi (4i - 1) / (4n + 2))``, each iteration clamped
    between the neighbouring seeds. The lower half is mirrored and ``0`` is
    inserted for odd orders.
    """
    n = _check_order(order, 1, "Gauss-Legendre")

    scale = 1.0 - 1.0 / n**2 + 1.0 / n**3

    def seed(i: int) -> float:
        return scale * math.cos(math.pi * (4 * i - 1) / (4 * n + 2))

    upper: list[float] = []  # descending
    prev = 1.0
    guess = seed(1)
    for i in range(1, n // 2 + 1):
        nxt = seed(i + 1)
        res = newton_method(
            lambda x: legendre_p(n, x),
            guess,
            dFn=lambda x: legendre_dp(n, x),
            tol_f=roots.tol_f,
            tol_x=roots.tol_x,
            max_iter=roots.max_iter,
            domain=(nxt, prev),
        )
        upper.append(res.root)
        prev, guess = guess, nxt

    up = np.asarray(upper, dtype=float)
    middle = [0.0] if n % 2 else []
    x = np.concatenate([-up, middle, up[::-1]])

    _check_nodes(x, n, "Gauss-Legendre")
    if np.any(np.abs(x) >= 1.0):
        raise ConvergenceFailureError("Gauss-Legendre roots must lie inside (-1, 1)")
    return x


def generate_lobatto_abscissas(
    order: int, *, roots: RootFindingConfig = _DEFAULT_ROOTS
) -> NDArray[np.floating]:
    """Gauss-Lobatto nodes: the ``order`` roots of ``P_n - P_{n-2}``, increasing.

    The first node is fixed at -1; the interior nodes of the lower half are
    found by Newton-Raphson from the seeds
    ``-cos((j + 1/4) pi / N - 3 / (8 N pi (j + 1/4)))`` with ``N = order - 1``.
    The second half is mirrored (so the last node is +1) and ``0`` is inserted
    for odd orders.
    """
    n = _check_order(order, 2, "Gauss-Lobatto")
    N = n - 1

    def seed(j: int) -> float:
        a = j + 0.25
        return -math.cos(a * math.pi / N - 3.0 / (8.0 * N * math.pi * a))

    lower: list[float] = [-1.0]
    prev = -1.0
    guess = seed(1)
    for j in range(1, n // 2):
        nxt = seed(j + 1)
        res = newton_method(
            lambda x: lobatto_q(n, x),
            guess,
            dFn=lambda x: lobatto_dq(n, x),
            tol_f=roots.tol_f,
            tol_x=roots.tol_x,
            max_iter=roots.max_iter,
            domain=(prev, nxt),
        )
        lower.append(res.root)
        prev, guess = guess, nxt

    lo = np.asarray(lower, dtype=float)
    middle = [0.0] if n % 2 else []
    x = np.concatenate([lo, middle, -lo[::-1]])

    _check_nodes(x, n, "Gauss-Lobatto")
    return x


# ---------------------------
# Weights
# ---------------------------


def generate_legendre_weights(
    order: int, abscissas: NDArray[np.floating]
) -> NDArray[np.floating]:
    """``w_i = 2 / ((1 - x_i^2) P_n'(x_i)^2)``."""
    n = _check_order(order, 1, "Gauss-Legendre")
    x = np.asarray(abscissas, dtype=float)
    if x.shape != (n,):
        raise DimensionMismatchError(f"abscissas must have shape {(n,)} got {x.shape}")
    dp = np.asarray(legendre_dp(n, x), dtype=float)
    return 2.0 / ((1.0 - x * x) * dp * dp)


def generate_lobatto_weights(
    order: int, abscissas: NDArray[np.floating]
) -> NDArray[np.floating]:
    """Endpoints ``2 / (n (n-1))``, interior ``2 / (n (n-1) P_{n-1}(x_i)^2)``."""
    n = _check_order(order, 2, "Gauss-Lobatto")
    x = np.asarray(abscissas, dtype=float)
    if x.shape != (n,):
        raise DimensionMismatchError(f"abscissas must have shape {(n,)} got {x.shape}")

    base = 2.0 / (n * (n - 1.0))
    w = np.full(n, base, dtype=float)
    if n > 2:
        p = np.asarray(legendre_p(n - 1, x[1:-1]), dtype=float)
        w[1:-1] = base / (p * p)
    return w


def generate_barycentric_weights(
    order: int, abscissas: NDArray[np.floating]
) -> NDArray[np.floating]:
    """``w_i^B = 1 / prod_{j != i} (x_i - x_j)``."""
    x = np.asarray(abscissas, dtype=float)
    if x.shape != (order,):
        raise DimensionMismatchError(
            f"abscissas must have shape {(order,)} got {x.shape}"
        )

    diff = x[:, None] - x[None, :]
    np.fill_diagonal(diff, 1.0)
    prod = np.prod(diff, axis=1)
    if np.any(prod == 0.0):
        raise InterpolationSingularityError("abscissas must be distinct")
    return 1.0 / prod


def generate_differentiation_matrix(
    order: int,
    abscissas: NDArray[np.floating],
    bary_weights: NDArray[np.floating],
) -> SquareMatrix:
    """Nodal differentiation matrix.

    Off-diagonal ``D_ij = (w_j / w_i) / (x_i - x_j)``; the diagonal is the
    negative row sum, so constants are differentiated to exactly zero.
    """
    x = np.asarray(abscissas, dtype=float)
    wb = np.asarray(bary_weights, dtype=float)
    if x.shape != (order,) or wb.shape != (order,):
        raise DimensionMismatchError(
            f"abscissas and weights must have shape {(order,)}, "
            f"got {x.shape} and {wb.shape}"
        )

    diff = x[:, None] - x[None, :]
    np.fill_diagonal(diff, 1.0)
    D = (wb[None, :] / wb[:, None]) / diff
    np.fill_diagonal(D, 0.0)
    np.fill_diagonal(D, -D.sum(axis=1))
    return SquareMatrix(D)


# ---------------------------
# Per-domain bundle
# ---------------------------


@dataclass(frozen=True, slots=True, eq=False)
class DomainOperators:
    """Immutable spectral operators for one (order, node family) pair.

    Every array is read-only; instances are shared by reference between all
    spectral functions and schemes of the same order and family.
    """

    order: int
    family: NodeFamily
    abscissas: NDArray[np.floating]
    weights: NDArray[np.floating]
    bary_weights: NDArray[np.floating]
    diff_matrix: SquareMatrix

    def __post_init__(self) -> None:
        n = self.order
        for name in ("abscissas", "weights", "bary_weights"):
            arr = _readonly(getattr(self, name))
            if arr.shape != (n,):
                raise DimensionMismatchError(
                    f"{name} must have shape {(n,)} got {arr.shape}"
                )
            object.__setattr__(self, name, arr)
        self.diff_matrix.check(n, "diff_matrix")


_OPERATOR_CACHE: dict[tuple[int, NodeFamily, RootFindingConfig], DomainOperators] = {}


def build_domain_operators(
    order: int,
    family: NodeFamily | str = NodeFamily.GAUSS_LEGENDRE,
    *,
    roots: RootFindingConfig = _DEFAULT_ROOTS,
) -> DomainOperators:
    """Return the (cached) operators for ``order`` nodes of ``family``."""
    fam = NodeFamily(family)
    if fam == NodeFamily.GAUSS_LEGENDRE:
        n = _check_order(order, 1, "Gauss-Legendre")
    else:
        n = _check_order(order, 2, "Gauss-Lobatto")
    key = (n, fam, roots)
    cached = _OPERATOR_CACHE.get(key)
    if cached is not None:
        return cached

    log.debug("Generating %s operators of order %d", fam.value, n)
    if fam == NodeFamily.GAUSS_LEGENDRE:
        x = generate_legendre_abscissas(n, roots=roots)
        w = generate_legendre_weights(n, x)
    else:
        x = generate_lobatto_abscissas(n, roots=roots)
        w = generate_lobatto_weights(n, x)

    wb = generate_barycentric_weights(n, x)
    ops = DomainOperators(
        order=n,
        family=fam,
        abscissas=x,
        weights=w,
        bary_weights=wb,
        diff_matrix=generate_differentiation_matrix(n, x, wb),
    )
    _OPERATOR_CACHE[key] = ops
    return ops


def clear_operator_cache() -> None:
    _OPERATOR_CACHE.clear()
