"""Equations, PDE system declaration, expression inspection and the variable map."""

from .equations import (
    Equation,
    as_equation,
    cardinalize,
    cardinalize_eqs,
    flatten_equations,
    subs_alleqs,
    substitute,
)
from .pde_system import PDESystem
from .symbolic_utils import (
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
    lower_subs,
    remove,
    split_additive_terms,
    split_terms,
    subsmatch,
    unitindex,
    unitindices,
)
from .variable_map import VariableMap, build_variable_map, resolve_interval

__all__ = [
    "Equation",
    "PDESystem",
    "VariableMap",
    "as_equation",
    "build_variable_map",
    "cardinalize",
    "cardinalize_eqs",
    "count_differentials",
    "d_orders",
    "derivative_order",
    "differential_order",
    "find_derivative",
    "flatten_equations",
    "function_tag",
    "get_all_depvars",
    "get_depvars",
    "get_indvars",
    "has_derivatives",
    "is_application",
    "is_coordinate",
    "is_numeric",
    "lower_subs",
    "remove",
    "resolve_interval",
    "split_additive_terms",
    "split_terms",
    "subs_alleqs",
    "subsmatch",
    "unitindex",
    "unitindices",
    "substitute",
]
