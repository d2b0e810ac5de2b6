from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..exceptions import (
    DimensionMismatchError,
    IndexOutOfRangeError,
    InterpolationSingularityError,
)
from ..numerics.legendre import legendre_ddp, legendre_dp, legendre_p
from ..numerics.quadrature import DomainOperators

__all__ = ["SpectralFunction", "lagrange_interpolant_at"]


def _node_index(x: float, abscissas: NDArray[np.floating]) -> int | None:
    hits = np.flatnonzero(abscissas == x)
    return int(hits[0]) if hits.size else None


def lagrange_interpolant_at(
    x: float,
    abscissas: NDArray[np.floating],
    bary_weights: NDArray[np.floating],
) -> NDArray[np.floating]:
    """Values ``l_i(x)`` of all Lagrange basis polynomials through ``abscissas``.

    Uses the barycentric form ``l_i(x) = (w_i / (x - x_i)) / sum_j w_j / (x - x_j)``;
    when ``x`` is a node the result is the corresponding unit vector.
    """
    xs = np.asarray(abscissas, dtype=float)
    wb = np.asarray(bary_weights, dtype=float)
    if xs.shape != wb.shape:
        raise DimensionMismatchError(
            f"abscissas {xs.shape} and barycentric weights {wb.shape} differ"
        )

    k = _node_index(float(x), xs)
    if k is not None:
        e = np.zeros_like(xs)
        e[k] = 1.0
        return e

    t = wb / (float(x) - xs)
    s = t.sum()
    if s == 0.0:
        raise InterpolationSingularityError(
            f"barycentric denominator vanished at {x}"
        )
    return t / s


class SpectralFunction:
    """One scalar field on one spectral domain.

    Holds the nodal (collocation) values and a shared reference to the
    domain's :class:`~spectral_wave.numerics.quadrature.DomainOperators`.
    Modal Legendre coefficients are computed lazily by quadrature projection
    and cached.

    Cache contract: the nodal array is read-only. The only way to change it is
    :meth:`set_nodal_values`, which drops the modal cache;
    :meth:`project_to_modal_coefficients` always recomputes.

    Closed-form derivatives (:meth:`derivative_at`, :meth:`second_derivative_at`
    without barycentric weights) divide by ``x^2 - 1`` and lose accuracy very
    close to the endpoints.
    """

    __slots__ = ("_ops", "_nodal", "_modal")

    def __init__(self, operators: DomainOperators, nodal_values: ArrayLike) -> None:
        self._ops = operators
        self._nodal = self._coerce(nodal_values)
        self._modal: NDArray[np.floating] | None = None

    def _coerce(self, values: ArrayLike) -> NDArray[np.floating]:
        arr = np.array(values, dtype=float, copy=True)
        if arr.shape != (self.order,):
            raise DimensionMismatchError(
                f"nodal values must have shape {(self.order,)} got {arr.shape}"
            )
        arr.setflags(write=False)
        return arr

    def _check_index(self, i: int, what: str = "node") -> int:
        if not 0 <= i < self.order:
            raise IndexOutOfRangeError(
                f"{what} index {i} outside [0, {self.order})"
            )
        return int(i)

    # ---- shared operators ----

    @property
    def operators(self) -> DomainOperators:
        return self._ops

    @property
    def order(self) -> int:
        return self._ops.order

    @property
    def abscissas(self) -> NDArray[np.floating]:
        return self._ops.abscissas

    @property
    def weights(self) -> NDArray[np.floating]:
        return self._ops.weights

    @property
    def nodal_values(self) -> NDArray[np.floating]:
        return self._nodal

    @property
    def has_modal_cache(self) -> bool:
        return self._modal is not None

    def set_nodal_values(self, values: ArrayLike) -> None:
        self._nodal = self._coerce(values)
        self._modal = None

    def with_nodal_values(self, values: ArrayLike) -> SpectralFunction:
        return SpectralFunction(self._ops, values)

    # ---- nodal access ----

    def nodal_derivative(self) -> NDArray[np.floating]:
        return self._ops.diff_matrix @ self._nodal

    def nodal_second_derivative(self) -> NDArray[np.floating]:
        D = self._ops.diff_matrix
        return D @ (D @ self._nodal)

    def value_at_node(self, i: int) -> float:
        return float(self._nodal[self._check_index(i)])

    def derivative_at_node(self, i: int) -> float:
        return float(self.nodal_derivative()[self._check_index(i)])

    def second_derivative_at_node(self, i: int) -> float:
        return float(self.nodal_second_derivative()[self._check_index(i)])

    # ---- modal representation ----

    def project_to_modal_coefficients(self) -> NDArray[np.floating]:
        """``c_k = (2k + 1) / 2 * sum_j w_j f(x_j) P_k(x_j)``; stored and returned."""
        x = self._ops.abscissas
        wf = self._ops.weights * self._nodal
        coeffs = np.empty(self.order, dtype=float)
        for k in range(self.order):
            coeffs[k] = (2 * k + 1) / 2.0 * float(np.dot(wf, legendre_p(k, x)))
        coeffs.setflags(write=False)
        self._modal = coeffs
        return coeffs

    def modal_coefficients(self) -> NDArray[np.floating]:
        if self._modal is None:
            return self.project_to_modal_coefficients()
        return self._modal

    def modal_coefficient(self, k: int) -> float:
        return float(self.modal_coefficients()[self._check_index(k, "mode")])

    def _series(self, x: float, basis) -> float:
        c = self.modal_coefficients()
        return float(sum(c[k] * basis(k, x) for k in range(self.order)))

    # ---- off-grid evaluation ----

    def value_at(self, x: float, bary_weights: Sequence[float] | None = None) -> float:
        """Value at ``x``: truncated Legendre series, or barycentric if weights are given."""
        if bary_weights is None:
            return self._series(float(x), legendre_p)

        ell = lagrange_interpolant_at(
            float(x), self._ops.abscissas, np.asarray(bary_weights)
        )
        return float(np.dot(ell, self._nodal))

    def derivative_at(
        self, x: float, bary_weights: Sequence[float] | None = None
    ) -> float:
        """First derivative at ``x``.

        Without weights this differentiates the modal series analytically.
        With weights it uses the barycentric derivative formula
        ``sum (w_i/(x-x_i)) (p(x) - f_i)/(x - x_i) / sum w_i/(x-x_i)``, and the
        differentiation-matrix row when ``x`` is a node.
        """
        x = float(x)
        if bary_weights is None:
            return self._series(x, legendre_dp)

        xs = self._ops.abscissas
        wb = np.asarray(bary_weights, dtype=float)
        k = _node_index(x, xs)
        if k is not None:
            return float(self.nodal_derivative()[k])

        px = self.value_at(x, wb)
        t = wb / (x - xs)
        den = t.sum()
        if den == 0.0:
            raise InterpolationSingularityError(
                f"barycentric denominator vanished at {x}"
            )
        return float(np.dot(t, (px - self._nodal) / (x - xs)) / den)

    def second_derivative_at(self, x: float) -> float:
        return self._series(float(x), legendre_ddp)

    def __repr__(self) -> str:
        return (
            f"SpectralFunction(order={self.order}, family={self._ops.family.value}, "
            f"modal_cached={self.has_modal_cache})"
        )
