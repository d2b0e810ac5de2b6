# src/spectral_wave/numerics/matrix.py
from __future__ import annotations

from dataclasses import dataclass
from typing import cast

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..exceptions import DimensionMismatchError

__all__ = ["SquareMatrix"]


@dataclass(frozen=True, slots=True, eq=False)
class SquareMatrix:
    """Dense, immutable N x N matrix.

    The backing array is copied on construction and marked read-only, so a
    matrix can be shared freely between spectral functions and schemes.

    ``m @ v`` is the matrix-vector product (new length-N vector), ``m @ other``
    the matrix-matrix product; ``+`` and ``-`` are elementwise. All operators
    return new values.
    """

    data: NDArray[np.floating]

    def __post_init__(self) -> None:
        arr = np.array(self.data, dtype=float, copy=True)
        if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
            raise DimensionMismatchError(
                f"SquareMatrix needs N x N data, got shape {arr.shape}"
            )
        arr.setflags(write=False)
        object.__setattr__(self, "data", arr)

    # ---- constructors ----

    @classmethod
    def zeros(cls, size: int) -> SquareMatrix:
        if size < 0:
            raise ValueError("size must be >= 0")
        return cls(np.zeros((size, size), dtype=float))

    @classmethod
    def identity(cls, size: int, value: float = 1.0) -> SquareMatrix:
        """Scalar-diagonal matrix ``value * I``."""
        if size < 0:
            raise ValueError("size must be >= 0")
        return cls(float(value) * np.eye(size, dtype=float))

    # ---- shape ----

    @property
    def size(self) -> int:
        return int(self.data.shape[0])

    def check(self, other_size: int, what: str = "operand") -> None:
        if other_size != self.size:
            raise DimensionMismatchError(
                f"{what} has size {other_size}, matrix has size {self.size}"
            )

    def as_array(self) -> NDArray[np.floating]:
        return self.data

    def transpose(self) -> SquareMatrix:
        return SquareMatrix(self.data.T)

    @property
    def T(self) -> SquareMatrix:
        return self.transpose()

    def __getitem__(self, idx):
        return self.data[idx]

    # ---- algebra ----

    def mv(self, v: ArrayLike) -> NDArray[np.floating]:
        vec = np.asarray(v, dtype=float)
        if vec.ndim != 1:
            raise DimensionMismatchError(f"vector must be 1D, got shape {vec.shape}")
        self.check(int(vec.shape[0]), "vector")
        return cast(NDArray[np.floating], self.data @ vec)

    def mm(self, other: SquareMatrix) -> SquareMatrix:
        self.check(other.size, "matrix")
        return SquareMatrix(self.data @ other.data)

    def __matmul__(self, other):
        if isinstance(other, SquareMatrix):
            return self.mm(other)
        return self.mv(other)

    def __add__(self, other: SquareMatrix) -> SquareMatrix:
        if not isinstance(other, SquareMatrix):
            return NotImplemented
        self.check(other.size, "matrix")
        return SquareMatrix(self.data + other.data)

    def __sub__(self, other: SquareMatrix) -> SquareMatrix:
        if not isinstance(other, SquareMatrix):
            return NotImplemented
        self.check(other.size, "matrix")
        return SquareMatrix(self.data - other.data)

    def __neg__(self) -> SquareMatrix:
        return SquareMatrix(-self.data)

    def scale(self, factor: float) -> SquareMatrix:
        return SquareMatrix(float(factor) * self.data)
