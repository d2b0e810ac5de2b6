from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..config import StorePolicy
from ..exceptions import DimensionMismatchError
from ..numerics.quadrature import DomainOperators
from ..spectral.function import SpectralFunction
from .state import Field, StateLayout

__all__ = ["Snapshot", "HistoryRecorder"]


@dataclass(frozen=True, slots=True)
class Snapshot:
    """State of every field on every domain at one time.

    ``functions[d][f]`` is the :class:`SpectralFunction` of field ``f``
    (``Field.PI`` or ``Field.PSI``) on domain ``d``.
    """

    time: float
    functions: tuple[tuple[SpectralFunction, SpectralFunction], ...]

    def field(self, domain: int, field: Field | int) -> SpectralFunction:
        return self.functions[domain][int(field)]

    @property
    def n_domains(self) -> int:
        return len(self.functions)


class HistoryRecorder:
    """Observer that appends a :class:`Snapshot` after every accepted step.

    Each record holds new :class:`SpectralFunction` objects built from a copy
    of the state; earlier records are never edited. With ``store="final"``
    only the latest record is kept (the step count still advances).
    """

    def __init__(
        self,
        layout: StateLayout,
        operators: Sequence[DomainOperators],
        initial_state: NDArray[np.floating],
        *,
        t0: float = 0.0,
        store: StorePolicy = "all",
    ) -> None:
        if len(operators) != layout.n_domains:
            raise DimensionMismatchError(
                f"expected {layout.n_domains} operator sets, got {len(operators)}"
            )
        if store not in ("all", "final"):
            raise ValueError("store must be 'all' or 'final'")
        self.layout = layout
        self.operators = tuple(operators)
        self.store = store
        self.n_recorded = 0
        self._snapshots: list[Snapshot] = []
        self.record(initial_state, t0)

    def _snapshot(self, x: NDArray[np.floating], t: float) -> Snapshot:
        fields = []
        for ops, (pi, psi) in zip(self.operators, self.layout.split(x)):
            fields.append((SpectralFunction(ops, pi), SpectralFunction(ops, psi)))
        return Snapshot(time=float(t), functions=tuple(fields))

    def record(self, x: NDArray[np.floating], t: float) -> None:
        if self._snapshots and not float(t) > self._snapshots[-1].time:
            raise ValueError(
                f"History times must increase: {t!r} after "
                f"{self._snapshots[-1].time!r}"
            )
        snap = self._snapshot(x, t)
        if self.store == "final":
            self._snapshots[:] = [snap]
        else:
            self._snapshots.append(snap)
        self.n_recorded += 1

    __call__ = record

    @property
    def snapshots(self) -> tuple[Snapshot, ...]:
        return tuple(self._snapshots)

    @property
    def times(self) -> NDArray[np.floating]:
        return np.array([s.time for s in self._snapshots], dtype=float)

    @property
    def latest(self) -> Snapshot:
        return self._snapshots[-1]

    def __len__(self) -> int:
        return len(self._snapshots)

    def __iter__(self) -> Iterator[Snapshot]:
        return iter(self._snapshots)

    def __getitem__(self, i: int) -> Snapshot:
        return self._snapshots[i]
