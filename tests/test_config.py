# tests/test_config.py
import pytest

from spectral_wave import exceptions
from spectral_wave.config import RootFindingConfig, WaveConfig
from spectral_wave.exceptions import ConfigurationError


def test_defaults() -> None:
    cfg = WaveConfig(orders=(8,))
    assert cfg.scheme == "dg"
    assert cfg.step == 0.01
    assert cfg.duration == 10.0
    assert not cfg.reflecting
    assert cfg.driver == "sin"
    assert cfg.node_family is None
    assert cfg.store == "all"
    assert cfg.roots == RootFindingConfig()
    assert cfg.roots.tol_x == 2.0**-50
    assert cfg.roots.max_iter == 100


def test_uniform_constructor() -> None:
    cfg = WaveConfig.uniform(3, 8, scheme="collocation")
    assert cfg.orders == (8, 8, 8)
    assert cfg.n_domains == 3
    assert cfg.state_size == 48
    assert cfg.scheme == "collocation"


def test_orders_are_normalised_to_int_tuple() -> None:
    cfg = WaveConfig(orders=[4, 5.0])
    assert cfg.orders == (4, 5)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"orders": ()},
        {"orders": (4, 0)},
        {"orders": (4, 2.5)},
        {"orders": (True,)},
        {"orders": (4,), "step": 0.0},
        {"orders": (4,), "duration": -1.0},
        {"orders": (4,), "store": "some"},
        {"orders": (4,), "scheme": "  "},
    ],
)
def test_invalid_wave_config(kwargs) -> None:
    with pytest.raises(ConfigurationError):
        WaveConfig(**kwargs)


def test_uniform_needs_a_domain() -> None:
    with pytest.raises(ConfigurationError):
        WaveConfig.uniform(0, 4)


@pytest.mark.parametrize(
    "kwargs", [{"tol_x": 0.0}, {"tol_f": -1.0}, {"max_iter": 0}]
)
def test_invalid_root_config(kwargs) -> None:
    with pytest.raises(ConfigurationError):
        RootFindingConfig(**kwargs)


def test_config_is_frozen() -> None:
    cfg = WaveConfig(orders=(4,))
    with pytest.raises(AttributeError):
        cfg.step = 0.5  # type: ignore[misc]


@pytest.mark.parametrize(
    "cls, builtin",
    [
        ("ConfigurationError", ValueError),
        ("InvalidOrderError", ValueError),
        ("DimensionMismatchError", ValueError),
        ("IndexOutOfRangeError", IndexError),
        ("ConvergenceFailureError", ArithmeticError),
        ("InterpolationSingularityError", ZeroDivisionError),
        ("NonFiniteStateError", ArithmeticError),
    ],
)
def test_error_taxonomy(cls: str, builtin: type) -> None:
    err = getattr(exceptions, cls)
    assert issubclass(err, exceptions.SpectralWaveError)
    assert issubclass(err, builtin)
