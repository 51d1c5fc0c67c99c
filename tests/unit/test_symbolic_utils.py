#!/usr/bin/env python3
"""
Unit tests for pde_base/core/symbolic_utils.py

Covers derivative counting, application discovery, term splitting and the
``Subs`` lowering used for boundary equations written with ``.subs``.
"""

import pytest

import sympy as sp

from pde_base.core.equations import Equation
from pde_base.core.symbolic_utils import (
    count_differentials,
    d_orders,
    derivative_order,
    differential_order,
    find_derivative,
    function_tag,
    get_all_depvars,
    get_depvars,
    get_indvars,
    has_derivatives,
    is_application,
    is_coordinate,
    is_numeric,
    iter_depvars,
    lower_subs,
    lower_subs_equation,
    remove,
    split_additive_terms,
    split_terms,
    subsmatch,
    unitindex,
    unitindices,
)

# =============================================================================
# Derivative counting
# =============================================================================


class TestDerivativeCounting:
    """Orders of derivative operators with respect to one coordinate."""

    def test_second_order_node_counts_two(self, t, x, u):
        assert count_differentials(sp.Derivative(u(t, x), (x, 2)), x) == 2

    def test_nested_derivatives_sum(self, t, x, u):
        nested = sp.Derivative(sp.Derivative(u(t, x), x), x)
        assert count_differentials(nested, x) == 2

    def test_other_coordinates_do_not_count(self, t, x, u):
        mixed = sp.Derivative(u(t, x), x, t)
        assert count_differentials(mixed, x) == 1
        assert count_differentials(mixed, t) == 1
        assert count_differentials(sp.Derivative(u(t, x), t), x) == 0

    def test_plain_expressions_count_zero(self, t, x, u):
        assert count_differentials(u(t, x), x) == 0
        assert count_differentials(sp.Integer(3), x) == 0
        assert count_differentials(2.0, x) == 0

    def test_derivative_order_of_single_node(self, t, x, u):
        assert derivative_order(sp.Derivative(u(t, x), (x, 3)), x) == 3
        assert derivative_order(u(t, x), x) == 0

    def test_differential_order_over_both_sides(self, t, x, u):
        eq = Equation(sp.Derivative(u(t, x), t), sp.Derivative(u(t, x), (x, 2)))
        assert differential_order(eq, x) == {2}
        assert differential_order(eq, t) == {1}

    def test_differential_order_excludes_zero(self, t, x, u):
        assert differential_order(Equation(u(t, 0), 0), x) == set()

    def test_differential_order_inside_products(self, t, x, u):
        expr = u(t, x) * sp.Derivative(u(t, x), x) + sp.Derivative(u(t, x), (x, 3))
        assert differential_order(expr, x) == {1, 3}

    def test_d_orders_sorted_descending(self, t, x, u):
        eqs = [
            Equation(sp.Derivative(u(t, x), x), 0),
            Equation(sp.Derivative(u(t, x), (x, 2)), 0),
            Equation(u(t, 0), 0),
        ]
        assert d_orders(x, eqs) == [2, 1]
        assert d_orders(t, eqs) == []

    def test_has_derivatives(self, t, x, u):
        assert has_derivatives(sp.Derivative(u(t, 1), x) + 1)
        assert has_derivatives(Equation(0, sp.Derivative(u(t, x), t)))
        assert not has_derivatives(u(t, 0) + x)


# =============================================================================
# Applications and coordinates
# =============================================================================


class TestApplications:
    """Discovery of unknown-function applications."""

    def test_function_tag(self, t, x, u):
        assert function_tag(u) is u
        assert function_tag(u(t, x)) == u
        assert function_tag(u(t, 0)) == u

    def test_function_tag_rejects_symbols(self, x):
        with pytest.raises(TypeError):
            function_tag(x)

    def test_is_application(self, t, x, u, v):
        assert is_application(u(t, 0), [u])
        assert not is_application(v(t, 0), [u])
        assert not is_application(x, [u])

    def test_is_numeric_and_is_coordinate(self, x):
        assert is_numeric(0)
        assert is_numeric(0.5)
        assert is_numeric(sp.Float(1.5))
        assert is_numeric(sp.pi)
        assert not is_numeric(x)
        assert not is_numeric(2 * x)
        assert is_coordinate(x)
        assert not is_coordinate(sp.Integer(1))
        assert not is_coordinate(2 * x)

    def test_get_depvars_does_not_search_inside_matches(self, t, x, u):
        expr = sp.Derivative(u(t, x), x) + u(t, 0)
        assert get_depvars(expr, [u]) == {u(t, x), u(t, 0)}

    def test_get_depvars_over_equation(self, t, u, v):
        eq = Equation(u(t, 0), v(t, 1))
        assert get_depvars(eq, [u, v]) == {u(t, 0), v(t, 1)}
        assert get_depvars(eq, [u]) == {u(t, 0)}

    def test_iter_depvars_lhs_first(self, t, u):
        eq = Equation(u(t, 0), u(t, 1))
        assert list(iter_depvars(eq, [u])) == [u(t, 0), u(t, 1)]

    def test_get_all_depvars_ordered_without_repeats(self, t, x, u, v):
        eqs = [
            Equation(sp.Derivative(u(t, x), t), 0),
            Equation(u(t, 0), v(t, 1)),
            Equation(u(t, x), 1),
        ]
        assert get_all_depvars(eqs, [u, v]) == [u(t, x), u(t, 0), v(t, 1)]

    def test_get_indvars(self, t, x, y, u):
        eq = Equation(u(t, x) + y, 0)
        assert get_indvars(eq, [t, x, y]) == {t, x, y}
        assert get_indvars(Equation(u(t, 0), 0), [x]) == set()

    def test_find_derivative(self, t, x, u):
        assert find_derivative(u(t, 0) + 1, u) == u(t, 0)
        node = sp.Derivative(u(t, x), x)
        assert find_derivative(2 * node, u) == node
        assert find_derivative(sp.sin(x), u) is None


# =============================================================================
# Term splitting and matching
# =============================================================================


class TestTerms:
    def test_split_terms_flattens_sums_and_products(self, t, x, u):
        dx = sp.Derivative(u(t, x), x)
        terms = split_terms(Equation(2 * u(t, x) + dx, 0))
        assert u(t, x) in terms
        assert dx in terms
        assert sp.Integer(2) in terms

    def test_split_additive_terms(self, t, x, u):
        terms = split_additive_terms(Equation(u(t, 0) + x, 3))
        assert set(terms) == {u(t, 0), x, sp.Integer(3)}

    def test_subsmatch(self, t, u):
        eq = Equation(u(t, 0) + 1, 0)
        assert subsmatch(eq, (u(t, 0), 2))
        assert subsmatch(eq, {u(t, 0): 2})
        assert not subsmatch(eq, (u(t, 1), 2))

    def test_remove_keeps_order(self, t, x, y):
        assert remove([x, t, y], t) == [x, y]
        assert remove((x, y), None) == [x, y]

    def test_split_terms_keeps_products_with_spatial_derivatives(self, t, x, u):
        a = sp.Function("a")
        dx = sp.Derivative(u(t, x), x)
        dt = sp.Derivative(u(t, x), t)
        eq = Equation(a(x) * dt + a(x) * dx + dx / x, 0)

        terms = split_terms(eq, [x])
        assert a(x) * dx in terms
        assert dx / x in terms
        assert dt in terms
        assert sp.S.Zero not in terms

        plain = split_terms(eq)
        assert a(x) * dx not in plain
        assert dx in plain
        assert sp.S.Zero in plain

    def test_unit_indices(self):
        assert unitindex(3, 2) == (0, 1, 0)
        assert unitindex(1, 1) == (1,)
        assert unitindices(2) == [(1, 0), (0, 1)]
        assert unitindices(0) == []


# =============================================================================
# Subs lowering
# =============================================================================


class TestLowerSubs:
    def test_subs_derivative_becomes_boundary_derivative(self, t, x, u):
        written = sp.diff(u(t, x), x).subs(x, 0)
        assert isinstance(written, sp.Subs)
        assert lower_subs(written) == sp.Derivative(u(t, 0), x)

    def test_second_order_subs(self, t, x, u):
        written = sp.diff(u(t, x), x, 2).subs(x, 1)
        assert lower_subs(written) == sp.Derivative(u(t, 1), (x, 2))

    def test_expressions_without_subs_are_unchanged(self, t, x, u):
        expr = sp.Derivative(u(t, 1), x) + u(t, 1)
        assert lower_subs(expr) is expr

    def test_equation_lowering(self, t, x, u):
        eq = Equation(sp.diff(u(t, x), x).subs(x, 1), 0)
        lowered = lower_subs_equation(eq)
        assert lowered.lhs == sp.Derivative(u(t, 1), x)
        assert lowered.rhs == 0

        plain = Equation(u(t, 0), 0)
        assert lower_subs_equation(plain) is plain
