"""Multi-domain evolution schemes and a small registry.

Both schemes discretise

    d(pi)/dt = d(psi)/dx,    d(psi)/dt = d(pi)/dx

on adjoining spectral domains and turn the flat global state vector into its
time derivative. They differ in how neighbouring domains are coupled:

* :class:`CollocationScheme` (Gauss-Lobatto nodes): every domain is evolved
  with the plain differentiation matrix, then the time derivatives at the two
  nodes sharing an interface are replaced by their average, which keeps the
  solution continuous.
* :class:`DGFluxScheme` (Gauss-Legendre nodes): a nodal discontinuous-Galerkin
  discretisation in skew (summation-by-parts) form with upwind numerical fluxes
  built from the characteristic combinations ``(pi +- psi) / 2``.

A string registry (mirroring the one used for time-stepping methods) lets
callers pick a scheme by name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray

from ..exceptions import (
    ConfigurationError,
    DimensionMismatchError,
    NonFiniteStateError,
)
from ..numerics.quadrature import DomainOperators, NodeFamily
from ..spectral.function import lagrange_interpolant_at
from .boundary import BoundaryDriver
from .state import Field, StateLayout

__all__ = [
    "EvolutionScheme",
    "CollocationScheme",
    "DGFluxScheme",
    "register_scheme",
    "available_schemes",
    "resolve_scheme",
]


@runtime_checkable
class EvolutionScheme(Protocol):
    """Right-hand side of the semi-discrete wave system.

    ``scheme(x, dxdt, t)`` writes the time derivative of the global state
    ``x`` into ``dxdt`` (every entry is overwritten); ``scheme.rhs(x, t)``
    returns it as a new array.
    """

    node_family: ClassVar[NodeFamily]

    @property
    def name(self) -> str:  # pragma: no cover
        ...

    @property
    def state_size(self) -> int:  # pragma: no cover
        ...

    def __call__(
        self, x: NDArray[np.floating], dxdt: NDArray[np.floating], t: float
    ) -> None:  # pragma: no cover
        ...

    def rhs(self, x: NDArray[np.floating], t: float) -> NDArray[np.floating]:
        ...  # pragma: no cover


@dataclass(frozen=True, slots=True, eq=False)
class _MultiDomainScheme:
    operators: tuple[DomainOperators, ...]
    driver: BoundaryDriver
    reflecting: bool = False
    layout: StateLayout = field(init=False, repr=False)

    def __post_init__(self) -> None:
        ops = tuple(self.operators)
        if len(ops) == 0:
            raise ConfigurationError("Need at least one domain")
        object.__setattr__(self, "operators", ops)
        object.__setattr__(
            self, "layout", StateLayout(orders=tuple(op.order for op in ops))
        )
        self._precompute()

    def _precompute(self) -> None:
        pass

    @property
    def n_domains(self) -> int:
        return len(self.operators)

    @property
    def state_size(self) -> int:
        return self.layout.size

    def _check_io(
        self, x: NDArray[np.floating], dxdt: NDArray[np.floating]
    ) -> NDArray[np.floating]:
        xx = self.layout.check(x)
        if not isinstance(dxdt, np.ndarray) or dxdt.shape != (self.state_size,):
            raise DimensionMismatchError(
                f"dxdt must be an ndarray of shape {(self.state_size,)}"
            )
        return xx

    def _check_finite(self, dxdt: NDArray[np.floating], t: float) -> None:
        if not np.all(np.isfinite(dxdt)):
            raise NonFiniteStateError(
                f"{self.name}: non-finite time derivative at t={t!r}"
            )

    def rhs(self, x: NDArray[np.floating], t: float) -> NDArray[np.floating]:
        dxdt = np.empty(self.state_size, dtype=float)
        self(x, dxdt, t)
        return dxdt


@dataclass(frozen=True, slots=True, eq=False)
class CollocationScheme(_MultiDomainScheme):
    """Continuous collocation coupling on Gauss-Lobatto domains.

    Interface ``k`` (``k = 0..D``) separates domain ``k - 1`` (its right edge
    supplies the *left* estimate) from domain ``k`` (its left edge supplies the
    *right* estimate). Outer boundaries supply the missing estimate:

    * left: ``-right_0 + 2 g'(t + 1)`` for pi and ``-right_0 - 2 g'(t + 1)``
      for psi, so the averaged boundary derivative equals the driven wave;
    * right: ``-left_D`` when reflecting, and additionally
      ``- 2 left_D`` of the other field when transmitting.

    Edge nodes then take the average ``(left_k + right_k) / 2``.
    """

    node_family: ClassVar[NodeFamily] = NodeFamily.GAUSS_LOBATTO

    @property
    def name(self) -> str:
        return "collocation"

    def _precompute(self) -> None:
        if not self.driver.has_derivative:
            raise ConfigurationError(
                "Collocation scheme needs a boundary driver with a time derivative"
            )
        for d, op in enumerate(self.operators):
            x = op.abscissas
            if op.order < 2 or x[0] != -1.0 or x[-1] != 1.0:
                raise ConfigurationError(
                    f"Collocation domain {d} needs nodes at both endpoints "
                    f"(Gauss-Lobatto), got {op.family.value} of order {op.order}"
                )

    def edge_estimates(
        self, x: NDArray[np.floating], dxdt: NDArray[np.floating]
    ) -> tuple[NDArray[np.floating], ...]:
        """Bulk-evolve every domain into ``dxdt``; return interface estimates.

        Returns ``(left_pi, right_pi, left_psi, right_psi)``, each of length
        ``D + 1``; outer entries ``left[0]`` and ``right[D]`` are left at 0.
        """
        D = self.n_domains
        left_pi = np.zeros(D + 1)
        right_pi = np.zeros(D + 1)
        left_psi = np.zeros(D + 1)
        right_psi = np.zeros(D + 1)

        fields = self.layout.split(x)
        for d, (op, (pi, psi)) in enumerate(zip(self.operators, fields)):
            dpi = op.diff_matrix @ psi
            dpsi = op.diff_matrix @ pi
            dxdt[self.layout.field_slice(d, Field.PI)] = dpi
            dxdt[self.layout.field_slice(d, Field.PSI)] = dpsi

            right_pi[d] = dpi[0]
            right_psi[d] = dpsi[0]
            left_pi[d + 1] = dpi[-1]
            left_psi[d + 1] = dpsi[-1]

        return left_pi, right_pi, left_psi, right_psi

    def __call__(
        self, x: NDArray[np.floating], dxdt: NDArray[np.floating], t: float
    ) -> None:
        xx = self._check_io(x, dxdt)
        D = self.n_domains

        left_pi, right_pi, left_psi, right_psi = self.edge_estimates(xx, dxdt)

        gdot = self.driver.dt(float(t) + 1.0)
        left_pi[0] = -right_pi[0] + 2.0 * gdot
        left_psi[0] = -right_psi[0] - 2.0 * gdot

        if self.reflecting:
            right_pi[D] = -left_pi[D]
            right_psi[D] = -left_psi[D]
        else:
            right_pi[D] = -left_pi[D] - 2.0 * left_psi[D]
            right_psi[D] = -left_psi[D] - 2.0 * left_pi[D]

        avg_pi = 0.5 * (left_pi + right_pi)
        avg_psi = 0.5 * (left_psi + right_psi)

        for d in range(D):
            s_pi = self.layout.field_slice(d, Field.PI)
            s_psi = self.layout.field_slice(d, Field.PSI)
            dxdt[s_pi.start] = avg_pi[d]
            dxdt[s_pi.stop - 1] = avg_pi[d + 1]
            dxdt[s_psi.start] = avg_psi[d]
            dxdt[s_psi.stop - 1] = avg_psi[d + 1]

        self._check_finite(dxdt, t)


@dataclass(frozen=True, slots=True, eq=False)
class DGFluxScheme(_MultiDomainScheme):
    """Nodal discontinuous-Galerkin coupling with upwind fluxes.

    Per domain the bulk term uses the skew-form matrix
    ``D_hat_ij = -(w_j / w_i) D_ji``; each edge adds the lift
    ``F * l(+-1)_i / w_i`` where ``l(+-1)`` are the Lagrange basis values at
    the edges (barycentric interpolation) and ``F`` is the interface flux.

    At interface ``k`` the flux is ``a_k - b_k`` with the left-moving part
    ``a_k = (pi + psi) / 2`` from the left edge of domain ``k`` and the
    right-moving part ``b_k = (pi - psi) / 2`` (pi equation) or
    ``(psi - pi) / 2`` (psi equation) from the right edge of domain ``k - 1``.
    Outer boundaries: ``b_0 = +-g(t + 1)``; ``a_D = 0`` when transmitting, and
    ``a_D = -b_D`` (pi equation value) when reflecting.
    """

    node_family: ClassVar[NodeFamily] = NodeFamily.GAUSS_LEGENDRE

    d_hat: tuple[NDArray[np.floating], ...] = field(init=False, repr=False)
    left_interpolant: tuple[NDArray[np.floating], ...] = field(init=False, repr=False)
    right_interpolant: tuple[NDArray[np.floating], ...] = field(init=False, repr=False)
    left_lift: tuple[NDArray[np.floating], ...] = field(init=False, repr=False)
    right_lift: tuple[NDArray[np.floating], ...] = field(init=False, repr=False)

    @property
    def name(self) -> str:
        return "dg"

    def _precompute(self) -> None:
        d_hat, l_int, r_int, l_lift, r_lift = [], [], [], [], []
        for op in self.operators:
            w = op.weights
            D = op.diff_matrix.as_array()
            d_hat.append(-(D.T * w[None, :]) / w[:, None])

            lv = lagrange_interpolant_at(-1.0, op.abscissas, op.bary_weights)
            rv = lagrange_interpolant_at(1.0, op.abscissas, op.bary_weights)
            l_int.append(lv)
            r_int.append(rv)
            l_lift.append(lv / w)
            r_lift.append(rv / w)

        object.__setattr__(self, "d_hat", tuple(d_hat))
        object.__setattr__(self, "left_interpolant", tuple(l_int))
        object.__setattr__(self, "right_interpolant", tuple(r_int))
        object.__setattr__(self, "left_lift", tuple(l_lift))
        object.__setattr__(self, "right_lift", tuple(r_lift))

    def fluxes(
        self, x: NDArray[np.floating], t: float
    ) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
        """Interface fluxes ``(F_pi, F_psi)``, each of length ``D + 1``."""
        xx = self.layout.check(x)
        D = self.n_domains
        a_pi = np.zeros(D + 1)
        b_pi = np.zeros(D + 1)
        a_psi = np.zeros(D + 1)
        b_psi = np.zeros(D + 1)

        g = self.driver(float(t) + 1.0)
        b_pi[0] = g
        b_psi[0] = -g

        for d, (pi, psi) in enumerate(self.layout.split(xx)):
            pi_l = float(np.dot(self.left_interpolant[d], pi))
            psi_l = float(np.dot(self.left_interpolant[d], psi))
            pi_r = float(np.dot(self.right_interpolant[d], pi))
            psi_r = float(np.dot(self.right_interpolant[d], psi))

            a_pi[d] = 0.5 * (pi_l + psi_l)
            a_psi[d] = 0.5 * (pi_l + psi_l)
            b_pi[d + 1] = 0.5 * (pi_r - psi_r)
            b_psi[d + 1] = 0.5 * (psi_r - pi_r)

        if self.reflecting:
            a_pi[D] = -b_pi[D]
            a_psi[D] = -b_pi[D]

        return a_pi - b_pi, a_psi - b_psi

    def __call__(
        self, x: NDArray[np.floating], dxdt: NDArray[np.floating], t: float
    ) -> None:
        xx = self._check_io(x, dxdt)
        f_pi, f_psi = self.fluxes(xx, t)

        for d, (pi, psi) in enumerate(self.layout.split(xx)):
            Dh = self.d_hat[d]
            ll = self.left_lift[d]
            rl = self.right_lift[d]
            dxdt[self.layout.field_slice(d, Field.PI)] = (
                Dh @ psi + f_pi[d + 1] * rl - f_pi[d] * ll
            )
            dxdt[self.layout.field_slice(d, Field.PSI)] = (
                Dh @ pi + f_psi[d + 1] * rl - f_psi[d] * ll
            )

        self._check_finite(dxdt, t)


# -----------------------------
# Registry
# -----------------------------

_SCHEME_REGISTRY: dict[str, type[_MultiDomainScheme]] = {}


def register_scheme(
    name: str,
    scheme_cls: type[_MultiDomainScheme],
    *,
    overwrite: bool = False,
    aliases: tuple[str, ...] = (),
) -> None:
    """Register a scheme class under one or more names.

    Parameters
    ----------
    name:
        Primary key users will pass as ``WaveConfig(scheme=...)``.
    scheme_cls:
        Class constructed as ``scheme_cls(operators, driver, reflecting)``; its
        ``node_family`` attribute selects the default abscissas.
    overwrite:
        If False (default), raise if ``name`` or any alias already exists.
    aliases:
        Additional strings that should resolve to the same class.
    """

    keys = (name, *aliases)
    for k in keys:
        kk = str(k).lower().strip()
        if not kk:
            raise ValueError("Scheme name/alias cannot be empty")
        if (not overwrite) and (kk in _SCHEME_REGISTRY):
            raise KeyError(f"Scheme '{kk}' is already registered")
        _SCHEME_REGISTRY[kk] = scheme_cls


def available_schemes() -> list[str]:
    """Return the currently registered scheme keys (sorted)."""

    return sorted(_SCHEME_REGISTRY.keys())


def resolve_scheme(name: str) -> type[_MultiDomainScheme]:
    key = str(name).lower().strip()
    try:
        return _SCHEME_REGISTRY[key]
    except KeyError as e:
        raise ConfigurationError(
            f"Unknown scheme '{name}'. Available: {', '.join(available_schemes())}"
        ) from e


def _register_builtin_schemes() -> None:
    register_scheme(
        "collocation",
        CollocationScheme,
        overwrite=True,
        aliases=("coll", "continuous", "lobatto-collocation"),
    )
    register_scheme(
        "dg",
        DGFluxScheme,
        overwrite=True,
        aliases=("discontinuous-galerkin", "discontinuous_galerkin", "dg-flux"),
    )


_register_builtin_schemes()
