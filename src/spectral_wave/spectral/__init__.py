"""Per-domain spectral representation of a scalar field."""

from .function import SpectralFunction, lagrange_interpolant_at

__all__ = ["SpectralFunction", "lagrange_interpolant_at"]
