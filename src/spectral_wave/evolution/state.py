# src/spectral_wave/evolution/state.py
from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import IntEnum

import numpy as np
from numpy.typing import NDArray

from ..exceptions import DimensionMismatchError

__all__ = ["Field", "StateLayout", "initial_state"]


class Field(IntEnum):
    PI = 0
    PSI = 1


@dataclass(frozen=True, slots=True)
class StateLayout:
    """Index map of the flat global state vector.

    For each domain ``d`` (left to right) the vector holds the ``n_d`` nodal
    values of pi followed by the ``n_d`` nodal values of psi, so the total
    length is ``2 * sum(n_d)``.
    """

    orders: tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "orders", tuple(int(n) for n in self.orders))

    @property
    def n_domains(self) -> int:
        return len(self.orders)

    @property
    def size(self) -> int:
        return 2 * sum(self.orders)

    def offset(self, domain: int) -> int:
        return 2 * sum(self.orders[:domain])

    def field_slice(self, domain: int, field: Field | int) -> slice:
        n = self.orders[domain]
        start = self.offset(domain) + int(field) * n
        return slice(start, start + n)

    def check(self, x: NDArray[np.floating], what: str = "state") -> NDArray[np.floating]:
        arr = np.asarray(x, dtype=float)
        if arr.shape != (self.size,):
            raise DimensionMismatchError(
                f"{what} must have shape {(self.size,)} got {arr.shape}"
            )
        return arr

    def split(
        self, x: NDArray[np.floating]
    ) -> list[tuple[NDArray[np.floating], NDArray[np.floating]]]:
        """Views ``[(pi_d, psi_d), ...]`` into ``x``, one pair per domain."""
        arr = self.check(x)
        return [
            (arr[self.field_slice(d, Field.PI)], arr[self.field_slice(d, Field.PSI)])
            for d in range(self.n_domains)
        ]

    def join(
        self, fields: Sequence[tuple[NDArray[np.floating], NDArray[np.floating]]]
    ) -> NDArray[np.floating]:
        if len(fields) != self.n_domains:
            raise DimensionMismatchError(
                f"expected {self.n_domains} domains, got {len(fields)}"
            )
        out = np.empty(self.size, dtype=float)
        for d, (pi, psi) in enumerate(fields):
            out[self.field_slice(d, Field.PI)] = pi
            out[self.field_slice(d, Field.PSI)] = psi
        return out


def initial_state(
    layout: StateLayout,
    abscissas: Sequence[NDArray[np.floating]],
    pi0: Callable[[NDArray[np.floating]], NDArray[np.floating]],
    psi0: Callable[[NDArray[np.floating]], NDArray[np.floating]],
) -> NDArray[np.floating]:
    """Sample ``pi0``/``psi0`` at the global node positions ``x + 2d``."""
    if len(abscissas) != layout.n_domains:
        raise DimensionMismatchError(
            f"expected {layout.n_domains} abscissa sets, got {len(abscissas)}"
        )
    fields = []
    for d, x in enumerate(abscissas):
        xg = np.asarray(x, dtype=float) + 2.0 * d
        fields.append(
            (np.asarray(pi0(xg), dtype=float), np.asarray(psi0(xg), dtype=float))
        )
    return layout.join(fields)
