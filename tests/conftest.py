"""
Pytest configuration and shared fixtures for the pde_base test suite.

Provides the coordinates, unknown functions and small PDE systems used
across the unit and integration tests.
"""

import pytest

import sympy as sp

from pde_base import Equation, PDESystem
from pde_base.core import build_variable_map

# =============================================================================
# Test Configuration
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (slower, cross-component)")


def pytest_collection_modifyitems(config, items):
    """Add markers based on test file paths."""
    for item in items:
        test_path = str(item.fspath)
        if "/unit/" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)


# =============================================================================
# Symbols
# =============================================================================


@pytest.fixture
def t():
    return sp.Symbol("t")


@pytest.fixture
def x():
    return sp.Symbol("x")


@pytest.fixture
def y():
    return sp.Symbol("y")


@pytest.fixture
def u():
    return sp.Function("u")


@pytest.fixture
def v():
    return sp.Function("v")


# =============================================================================
# Systems
# =============================================================================


@pytest.fixture
def heat_system(t, x, u):
    """1D heat equation on [0, 1] with Dirichlet edges and an initial condition."""
    eqs = [Equation(sp.Derivative(u(t, x), t), sp.Derivative(u(t, x), (x, 2)))]
    bcs = [
        Equation(u(0, x), sp.sin(sp.pi * x)),
        Equation(u(t, 0), 0),
        Equation(u(t, 1), 0),
    ]
    return PDESystem(eqs, bcs, domain={t: (0.0, 1.0), x: (0.0, 1.0)}, ivs=[t, x], dvs=[u(t, x)], time=t)


@pytest.fixture
def heat_map(t, x, u):
    """Variable map of the 1D heat equation, built from raw lists."""
    eqs = [Equation(sp.Derivative(u(t, x), t), sp.Derivative(u(t, x), (x, 2)))]
    bcs = [Equation(u(0, x), 0), Equation(u(t, 0), 0), Equation(u(t, 1), 0)]
    return build_variable_map(eqs, bcs, [u], {t: (0.0, 1.0), x: (0.0, 1.0)}, time=t)


@pytest.fixture
def poisson_map(x, y, u):
    """Variable map of a stationary 2D problem on [0, 1] x [0, 2]."""
    eqs = [Equation(sp.Derivative(u(x, y), (x, 2)) + sp.Derivative(u(x, y), (y, 2)), 1)]
    return build_variable_map(eqs, [], [u], {x: (0.0, 1.0), y: (0.0, 2.0)})
