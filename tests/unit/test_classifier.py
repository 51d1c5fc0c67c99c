#!/usr/bin/env python3
"""
Unit tests for pde_base/boundary/classifier.py

Each boundary equation must yield exactly one EdgeBoundary, InterfaceBoundary
or HigherOrderInterfaceBoundary, or raise UnclassifiableBoundaryError.
"""

import pytest

import sympy as sp

from pde_base.boundary import (
    BoundaryClassifier,
    BoundaryKind,
    EdgeBoundary,
    HigherOrderInterfaceBoundary,
    InterfaceBoundary,
    classify_boundaries,
    classify_boundary,
)
from pde_base.boundary.boundary_map import is_periodic_interface
from pde_base.config import ClassificationConfig
from pde_base.core import Equation, build_variable_map
from pde_base.utils.exceptions import UnclassifiableBoundaryError, UnclassifiableReason


@pytest.fixture
def w():
    return sp.Function("w")


@pytest.fixture
def coupled_map(t, x, u, v, w):
    """Three unknowns on the same 1D domain."""
    eqs = [
        Equation(sp.Derivative(u(t, x), t), v(t, x)),
        Equation(sp.Derivative(v(t, x), t), sp.Derivative(u(t, x), (x, 2))),
        Equation(sp.Derivative(w(t, x), t), 0),
    ]
    return build_variable_map(eqs, [], [u, v, w], {t: (0.0, 1.0), x: (0.0, 1.0)}, time=t)


# =============================================================================
# Edge boundaries
# =============================================================================


class TestEdgeBoundaries:
    def test_lower_dirichlet(self, heat_map, t, x, u):
        b = classify_boundary(Equation(u(t, 0), 0), heat_map)
        assert isinstance(b, EdgeBoundary)
        assert b.kind is BoundaryKind.EDGE
        assert b.u == u(t, x)
        assert b.x == x
        assert b.is_upper is False
        assert b.order == 0
        assert b.value == 0.0
        assert b.depvars == frozenset({u})
        assert b.indvars == frozenset({x})

    def test_upper_neumann(self, heat_map, t, x, u):
        b = classify_boundary(Equation(sp.Derivative(u(t, 1), x), 0), heat_map)
        assert isinstance(b, EdgeBoundary)
        assert b.x == x
        assert b.is_upper is True
        assert b.order == 1

    def test_second_order_edge(self, heat_map, t, x, u):
        b = classify_boundary(Equation(sp.Derivative(u(t, 1), (x, 2)), 0), heat_map)
        assert b.order == 2

    def test_robin_uses_highest_order(self, heat_map, t, x, u):
        eq = Equation(u(t, 0) + 2 * sp.Derivative(u(t, 0), x), 1)
        b = classify_boundary(eq, heat_map)
        assert isinstance(b, EdgeBoundary)
        assert b.order == 1
        assert b.is_upper is False

    def test_same_point_on_both_sides_is_an_edge(self, heat_map, t, x, u):
        eq = Equation(sp.Derivative(u(t, 1), x), u(t, 1))
        b = classify_boundary(eq, heat_map)
        assert isinstance(b, EdgeBoundary)
        assert b.order == 1

    def test_derivatives_along_free_coordinates_do_not_count(self, heat_map, t, x, u):
        b = classify_boundary(Equation(sp.Derivative(u(t, 0), t), 0), heat_map)
        assert b.x == x
        assert b.order == 0

    def test_initial_condition(self, heat_map, t, x, u):
        b = classify_boundary(Equation(u(0, x), sp.sin(x)), heat_map)
        assert isinstance(b, EdgeBoundary)
        assert b.x == t
        assert b.is_initial
        assert not b.is_terminal

    def test_terminal_condition(self, heat_map, t, x, u):
        b = classify_boundary(Equation(u(1, x), 0), heat_map)
        assert b.x == t
        assert b.is_upper
        assert b.is_terminal
        assert not b.is_initial

    def test_bound_matching_within_tolerance(self, heat_map, t, u):
        b = classify_boundary(Equation(u(t, 1.0000000000001), 0), heat_map)
        assert b.is_upper

    def test_tolerance_is_configurable(self, heat_map, t, u):
        config = ClassificationConfig(atol=1e-3, min_domain_width=1e-2)
        b = classify_boundary(Equation(u(t, 0.9995), 0), heat_map, config=config)
        assert b.is_upper
        with pytest.raises(UnclassifiableBoundaryError):
            classify_boundary(Equation(u(t, 0.9995), 0), heat_map)

    def test_two_dimensional_edges(self, poisson_map, x, y, u):
        left = classify_boundary(Equation(u(0, y), 0), poisson_map)
        top = classify_boundary(Equation(sp.Derivative(u(x, 2), y), 0), poisson_map)
        assert (left.x, left.is_upper, left.order) == (x, False, 0)
        assert (top.x, top.is_upper, top.order) == (y, True, 1)

    def test_subs_form_is_recognized(self, heat_map, t, x, u):
        eq = Equation(sp.diff(u(t, x), x).subs(x, 1), 0)
        b = classify_boundary(eq, heat_map)
        assert isinstance(b, EdgeBoundary)
        assert b.is_upper
        assert b.order == 1

    def test_raw_sympy_equality_is_accepted(self, heat_map, t, u):
        b = classify_boundary(sp.Eq(u(t, 0), 1), heat_map)
        assert isinstance(b, EdgeBoundary)
        assert b.eq == Equation(u(t, 0), 1)


# =============================================================================
# Interfaces
# =============================================================================


class TestInterfaces:
    def test_periodic_interface(self, heat_map, t, x, u):
        b = classify_boundary(Equation(u(t, 0), u(t, 1)), heat_map)
        assert isinstance(b, InterfaceBoundary)
        assert b.kind is BoundaryKind.INTERFACE
        assert (b.x, b.is_upper) == (x, False)
        assert (b.x2, b.is_upper2) == (x, True)
        assert b.order == 0
        assert is_periodic_interface(b)

    def test_periodic_derivative_interface(self, heat_map, t, x, u):
        eq = Equation(sp.Derivative(u(t, 0), x), sp.Derivative(u(t, 1), x))
        b = classify_boundary(eq, heat_map)
        assert isinstance(b, HigherOrderInterfaceBoundary)
        assert b.kind is BoundaryKind.HIGHER_ORDER_INTERFACE
        assert b.order == 1
        assert is_periodic_interface(b)

    def test_two_function_interface(self, coupled_map, t, x, u, v):
        b = classify_boundary(Equation(u(t, 1), v(t, 0)), coupled_map)
        assert isinstance(b, InterfaceBoundary)
        assert b.u == u(t, x)
        assert b.u2 == v(t, x)
        assert b.depvars == frozenset({u, v})
        assert not is_periodic_interface(b)

    def test_interface_across_time_is_rejected(self, heat_map, x, u):
        with pytest.raises(UnclassifiableBoundaryError) as exc_info:
            classify_boundary(Equation(u(0, x), u(1, x)), heat_map)
        assert exc_info.value.reason == UnclassifiableReason.TIME_INTERFACE


# =============================================================================
# Unclassifiable conditions
# =============================================================================


class TestUnclassifiable:
    def test_interior_value(self, heat_map, t, u):
        with pytest.raises(UnclassifiableBoundaryError) as exc_info:
            classify_boundary(Equation(u(t, 0.5), 0), heat_map)
        assert exc_info.value.reason == UnclassifiableReason.NO_MATCHING_BOUND
        assert exc_info.value.error_code == "UNCLASSIFIABLE_BOUNDARY"
        assert exc_info.value.equation == Equation(u(t, 0.5), 0)

    def test_interior_condition(self, heat_map, t, x, u):
        with pytest.raises(UnclassifiableBoundaryError) as exc_info:
            classify_boundary(Equation(u(t, x), 0), heat_map)
        assert exc_info.value.reason == UnclassifiableReason.INTERIOR

    def test_no_unknown(self, heat_map, x):
        with pytest.raises(UnclassifiableBoundaryError) as exc_info:
            classify_boundary(Equation(x, 0), heat_map)
        assert exc_info.value.reason == UnclassifiableReason.NO_UNKNOWN

    def test_corner_condition(self, heat_map, u):
        with pytest.raises(UnclassifiableBoundaryError) as exc_info:
            classify_boundary(Equation(u(0, 0), 0), heat_map)
        assert exc_info.value.reason == UnclassifiableReason.MULTIPLE_FIXED

    def test_more_than_two_points(self, coupled_map, t, u, v):
        with pytest.raises(UnclassifiableBoundaryError) as exc_info:
            classify_boundary(Equation(u(t, 0) + u(t, 1), v(t, 0)), coupled_map)
        assert exc_info.value.reason == UnclassifiableReason.TOO_MANY_POINTS

    def test_more_than_two_functions(self, coupled_map, t, u, v, w):
        with pytest.raises(UnclassifiableBoundaryError) as exc_info:
            classify_boundary(Equation(u(t, 0), v(t, 0) + w(t, 0)), coupled_map)
        assert exc_info.value.reason == UnclassifiableReason.TOO_MANY_FUNCTIONS

    def test_tag_without_signature(self, t, x, u, w):
        eqs = [Equation(sp.Derivative(u(t, x), t), 0)]
        vmap = build_variable_map(eqs, [Equation(w(t, 0), 0)], [u, w], {t: (0, 1), x: (0, 1)}, time=t)
        with pytest.raises(UnclassifiableBoundaryError) as exc_info:
            classify_boundary(Equation(w(t, 0), 0), vmap)
        assert exc_info.value.reason == UnclassifiableReason.UNKNOWN_SIGNATURE

    def test_free_arguments_must_match_signature(self, poisson_map, x, u):
        with pytest.raises(UnclassifiableBoundaryError) as exc_info:
            classify_boundary(Equation(u(0, x), 0), poisson_map)
        assert exc_info.value.reason == UnclassifiableReason.FREE_MISMATCH


# =============================================================================
# Batch classification
# =============================================================================


class TestClassifyAll:
    def test_order_is_preserved(self, heat_map, t, x, u):
        bcs = [Equation(u(0, x), 0), Equation(u(t, 0), 0), Equation(sp.Derivative(u(t, 1), x), 0)]
        boundaries = BoundaryClassifier(heat_map).classify_all(bcs)
        assert [b.eq for b in boundaries] == bcs
        assert [b.x for b in boundaries] == [t, x, x]
        assert boundaries[2].order == 1

    def test_first_failure_aborts(self, heat_map, t, u):
        bcs = [Equation(u(t, 0), 0), Equation(u(t, 0.5), 0)]
        with pytest.raises(UnclassifiableBoundaryError):
            classify_boundaries(bcs, heat_map)

    def test_orders_table_without_entries_short_cuts_to_zero(self, heat_map, t, x, u):
        classifier = BoundaryClassifier(heat_map, orders={t: [], x: []})
        b = classifier.classify(Equation(sp.Derivative(u(t, 1), x), 0))
        assert b.order == 0

    def test_orders_table_with_entries(self, heat_map, t, x, u):
        classifier = BoundaryClassifier(heat_map, orders={t: [], x: [1]})
        b = classifier.classify(Equation(sp.Derivative(u(t, 1), x), 0))
        assert b.order == 1
