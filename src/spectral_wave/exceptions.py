class SpectralWaveError(Exception):
    """Base class for every error raised by :mod:`spectral_wave`."""


class ConfigurationError(SpectralWaveError, ValueError):
    """Raised when a configuration object is inconsistent or out of range."""


class InvalidOrderError(SpectralWaveError, ValueError):
    """Raised when an approximation order is too small for the requested nodes.

    Gauss-Legendre nodes need ``order >= 1``; Gauss-Lobatto nodes always
    contain both endpoints and therefore need ``order >= 2``.
    """


class DimensionMismatchError(SpectralWaveError, ValueError):
    """Raised when a vector or matrix does not have the expected size.

    Typical causes are a global state vector whose length is not
    ``2 * sum(orders)``, or a matrix-vector product between a size-N matrix and
    a vector of a different length.
    """


class IndexOutOfRangeError(SpectralWaveError, IndexError):
    """Raised for nodal or modal indices outside ``[0, order)``."""


class ConvergenceFailureError(SpectralWaveError, ArithmeticError):
    """Raised when an iterative procedure does not reach its tolerance."""


class InterpolationSingularityError(SpectralWaveError, ZeroDivisionError):
    """Raised when a barycentric formula would divide by zero.

    Evaluation exactly at a node is handled by returning the nodal value, so
    this only surfaces for degenerate inputs (e.g. coincident abscissas).
    """


class NonFiniteStateError(SpectralWaveError, ArithmeticError):
    """Raised when an evolution step produces NaN or infinite values."""
