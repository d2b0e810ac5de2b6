# src/spectral_wave/numerics/__init__.py
"""
Numerical building blocks (advanced API).

Top-level package `spectral_wave` exposes the everyday simulation API.
This subpackage exposes the reusable spectral primitives: Legendre
polynomials, quadrature nodes and weights, differentiation matrices and the
Newton root finder used to locate the nodes.
"""

from .legendre import legendre_ddp, legendre_dp, legendre_p, lobatto_dq, lobatto_q
from .matrix import SquareMatrix
from .quadrature import (
    DomainOperators,
    NodeFamily,
    build_domain_operators,
    clear_operator_cache,
    generate_barycentric_weights,
    generate_differentiation_matrix,
    generate_legendre_abscissas,
    generate_legendre_weights,
    generate_lobatto_abscissas,
    generate_lobatto_weights,
)
from .root_finding import (
    DerivativeTooSmallError,
    NoConvergenceError,
    RootFindingError,
    RootResult,
    newton_method,
)

__all__ = [
    # Legendre polynomials
    "legendre_p",
    "legendre_dp",
    "legendre_ddp",
    "lobatto_q",
    "lobatto_dq",
    # Matrices
    "SquareMatrix",
    # Quadrature
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
    # Root finding
    "RootResult",
    "RootFindingError",
    "NoConvergenceError",
    "DerivativeTooSmallError",
    "newton_method",
]
