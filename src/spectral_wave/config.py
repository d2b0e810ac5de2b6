from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .evolution.boundary import BoundaryDriver

StorePolicy = Literal["all", "final"]


@dataclass(frozen=True, slots=True)
class RootFindingConfig:
    """Newton-Raphson settings used when generating abscissas.

    ``tol_x`` is a relative step tolerance; the default of 2^-50 corresponds to
    about 50 significant bits. ``tol_f = 0`` means only the step criterion
    (or an exact zero) ends the iteration.
    """

    tol_x: float = 2.0**-50
    tol_f: float = 0.0
    max_iter: int = 100

    def __post_init__(self) -> None:
        if self.tol_x <= 0:
            raise ConfigurationError("tol_x must be > 0")
        if self.tol_f < 0:
            raise ConfigurationError("tol_f must be >= 0")
        if self.max_iter <= 0:
            raise ConfigurationError("max_iter must be > 0")


@dataclass(frozen=True, slots=True)
class WaveConfig:
    """Everything needed to set up and run one simulation.

    Parameters
    ----------
    orders:
        Approximation order (number of nodes) for each domain, left to right.
    scheme:
        Registered evolution scheme name, e.g. ``"dg"`` or ``"collocation"``.
    step, duration:
        Fixed RK4 step size and total simulated time (start time is 0).
    reflecting:
        Reflecting right boundary if True, transmitting otherwise.
    driver:
        Left boundary signal; a :class:`~spectral_wave.evolution.boundary.BoundaryDriver`
        or a preset name (``"sin"``, ``"fastsin"``, ``"pulse"``).
    node_family:
        Override the scheme's natural node family (``"legendre"`` or
        ``"lobatto"``). ``None`` keeps the scheme default.
    store:
        Keep every snapshot (``"all"``) or only the latest (``"final"``).
    """

    orders: tuple[int, ...]
    scheme: str = "dg"
    step: float = 0.01
    duration: float = 10.0
    reflecting: bool = False
    driver: BoundaryDriver | str = "sin"
    node_family: str | None = None
    store: StorePolicy = "all"
    roots: RootFindingConfig = field(default_factory=RootFindingConfig)

    def __post_init__(self) -> None:
        raw = tuple(self.orders)
        if len(raw) == 0:
            raise ConfigurationError("Need at least one domain")
        if any(isinstance(n, bool) or int(n) != n for n in raw):
            raise ConfigurationError(f"Every order must be an integer, got {raw}")
        orders = tuple(int(n) for n in raw)
        object.__setattr__(self, "orders", orders)

        if any(n < 1 for n in orders):
            raise ConfigurationError(f"Every order must be >= 1, got {orders}")
        if not self.step > 0:
            raise ConfigurationError("step must be > 0")
        if not self.duration > 0:
            raise ConfigurationError("duration must be > 0")
        if self.store not in ("all", "final"):
            raise ConfigurationError("store must be 'all' or 'final'")
        if not str(self.scheme).strip():
            raise ConfigurationError("scheme name cannot be empty")

    @classmethod
    def uniform(cls, n_domains: int, order: int, **kwargs) -> WaveConfig:
        """Config with ``n_domains`` domains that all share ``order``."""
        if n_domains < 1:
            raise ConfigurationError("n_domains must be >= 1")
        return cls(orders=(int(order),) * int(n_domains), **kwargs)

    @property
    def n_domains(self) -> int:
        return len(self.orders)

    @property
    def state_size(self) -> int:
        return 2 * sum(self.orders)
