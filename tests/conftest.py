"""Pytest helpers for the spectral_wave library."""

from __future__ import annotations

import numpy as np
import pytest

from spectral_wave.evolution.boundary import cosine_driver
from spectral_wave.evolution.solver import right_travelling_state
from spectral_wave.evolution.state import StateLayout
from spectral_wave.numerics.quadrature import NodeFamily, build_domain_operators


@pytest.fixture
def legendre_ops():
    """Factory fixture: cached Gauss-Legendre operators of a given order."""

    def _make(order: int):
        return build_domain_operators(order, NodeFamily.GAUSS_LEGENDRE)

    return _make


@pytest.fixture
def lobatto_ops():
    """Factory fixture: cached Gauss-Lobatto operators of a given order."""

    def _make(order: int):
        return build_domain_operators(order, NodeFamily.GAUSS_LOBATTO)

    return _make


@pytest.fixture
def cos2_driver():
    """The ``cos(2t)`` driver used by most end-to-end checks."""
    return cosine_driver(2.0)


@pytest.fixture
def exact_wave_state(cos2_driver):
    """Factory fixture: the exact right-travelling state on given operators."""

    def _make(operators, t: float = 0.0, driver=None):
        ops = tuple(operators)
        layout = StateLayout(orders=tuple(op.order for op in ops))
        return right_travelling_state(layout, ops, driver or cos2_driver, t)

    return _make


@pytest.fixture
def rng():
    """Seeded RNG factory."""

    def _rng(seed: int) -> np.random.Generator:
        return np.random.default_rng(seed)

    return _rng
