"""
Structural queries over SymPy expression trees.

Nothing here evaluates, differentiates or simplifies an expression: every
function walks the tree as written. Unknown functions are matched by their
tag (the undefined-function class, e.g. ``Function("u")``), never by the
values of their arguments, so ``u(t, x)`` and ``u(t, 0)`` are both
applications of ``u``.

Derivative operators are ``sympy.Derivative`` nodes. SymPy merges directly
nested derivatives into one node, ``Derivative(u, (x, 2))``, whose order with
respect to ``x`` is the count stored in ``variable_count``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from numbers import Number
from typing import TYPE_CHECKING, Any

import sympy as sp
from sympy.core.function import FunctionClass, UndefinedFunction

from .equations import Equation

if TYPE_CHECKING:
    from collections.abc import Collection


def _sides(eq: Any) -> tuple:
    """Both sides of an equation, or the expression itself."""
    if isinstance(eq, Equation):
        return eq.sides
    if isinstance(eq, sp.Equality):
        return (eq.lhs, eq.rhs)
    return (eq,)


def is_numeric(arg: Any) -> bool:
    """True for Python numbers and SymPy constants such as ``0.5`` or ``pi``."""
    if isinstance(arg, Number):
        return True
    return isinstance(arg, sp.Basic) and bool(arg.is_number)


def is_coordinate(arg: Any) -> bool:
    """True for atomic symbols, the only valid free arguments of an unknown."""
    return isinstance(arg, sp.Symbol)


def is_application(expr: Any, depvar_ops: Collection) -> bool:
    """True if ``expr`` applies one of the function tags in ``depvar_ops``."""
    return isinstance(expr, sp.Basic) and bool(expr.args) and not expr.is_Atom and expr.func in depvar_ops


def function_tag(expr: Any):
    """
    The tag of a function application, or the tag itself.

    Accepts ``u`` (an undefined function) as well as ``u(t, x)``.
    """
    if isinstance(expr, UndefinedFunction):
        return expr
    if isinstance(expr, sp.Basic) and isinstance(expr.func, FunctionClass):
        return expr.func
    raise TypeError(f"{expr!r} is neither a function tag nor a function application")


def derivative_order(node: Any, x: sp.Symbol) -> int:
    """
    Order of a single derivative operator node with respect to ``x``.

    Returns 0 if ``node`` is not a ``Derivative`` or does not differentiate by ``x``.
    """
    if not isinstance(node, sp.Derivative):
        return 0
    return sum(int(count) for variable, count in node.variable_count if variable == x)


def count_differentials(term: Any, x: sp.Symbol) -> int:
    """
    Count the derivative operators with respect to ``x`` in a term.

    Nested operators are summed, so ``Derivative(u(t, x), (x, 2))`` and
    ``Derivative(Derivative(u(t, x), x), x)`` both count 2, while derivatives
    with respect to other coordinates do not count.

    Args:
        term: A symbolic expression to analyze
        x: The coordinate to count derivatives for

    Returns:
        Total order of differentiation with respect to ``x`` in ``term``
    """
    if not isinstance(term, sp.Basic) or not term.args:
        return 0
    count_children = sum(count_differentials(arg, x) for arg in term.args)
    return derivative_order(term, x) + count_children


def differential_order(eq: Any, x: sp.Symbol) -> set[int]:
    """
    Set of all nonzero derivative orders with respect to ``x`` in an equation.

    Each outermost derivative operator contributes the total order found in
    its subtree; orders of zero are excluded.

    Args:
        eq: An ``Equation``, ``sympy.Eq`` or expression
        x: The coordinate to compute derivative orders for
    """
    orders: set[int] = set()
    for side in _sides(eq):
        _differential_order(orders, side, x)
    orders.discard(0)
    return orders


def _differential_order(orders: set[int], expr: Any, x: sp.Symbol) -> None:
    if not isinstance(expr, sp.Basic) or not expr.args:
        return
    if isinstance(expr, sp.Derivative):
        orders.add(count_differentials(expr, x))
        return
    for arg in expr.args:
        _differential_order(orders, arg, x)


def has_derivatives(term: Any) -> bool:
    """True if ``term`` contains any derivative operator; stops at the first one."""
    return any(isinstance(node, sp.Derivative) for side in _sides(term) for node in sp.preorder_traversal(side))


def find_derivative(term: Any, depvar_op) -> sp.Basic | None:
    """
    First subexpression (pre-order) that is a derivative or applies ``depvar_op``.

    Returns:
        The matching node, or None if there is none
    """
    for node in sp.preorder_traversal(term):
        if isinstance(node, sp.Derivative):
            return node
        if isinstance(node, sp.Basic) and node.args and node.func == depvar_op:
            return node
    return None


def iter_depvars(eq: Any, depvar_ops: Collection) -> Iterator[sp.Basic]:
    """
    Yield every application of a tag in ``depvar_ops``, lhs first, in pre-order.

    Matched applications are not searched inside. Repeated applications are
    yielded each time they occur.
    """
    ops = set(depvar_ops)
    for side in _sides(eq):
        yield from _iter_depvars(side, ops)


def _iter_depvars(expr: Any, ops: set) -> Iterator[sp.Basic]:
    if not isinstance(expr, sp.Basic) or not expr.args:
        return
    if is_application(expr, ops):
        yield expr
        return
    for arg in expr.args:
        yield from _iter_depvars(arg, ops)


def get_depvars(eq: Any, depvar_ops: Collection) -> set[sp.Basic]:
    """All applications of the tags in ``depvar_ops`` found in ``eq``."""
    return set(iter_depvars(eq, depvar_ops))


def get_all_depvars(equations: Iterable, depvar_ops: Collection) -> list[sp.Basic]:
    """Applications found across all equations, in first-discovery order without repeats."""
    return list(dict.fromkeys(app for eq in equations for app in iter_depvars(eq, depvar_ops)))


def get_indvars(eq: Any, coordinates: Iterable[sp.Symbol]) -> set[sp.Symbol]:
    """Coordinates from ``coordinates`` that occur as atoms in ``eq``."""
    wanted = set(coordinates)
    found: set[sp.Symbol] = set()
    for side in _sides(eq):
        found |= {atom for atom in side.atoms(sp.Symbol) if atom in wanted}
    return found


def d_orders(x: sp.Symbol, equations: Iterable) -> list[int]:
    """All nonzero derivative orders with respect to ``x`` across equations, highest first."""
    orders: set[int] = set()
    for eq in equations:
        orders |= differential_order(eq, x)
    return sorted(orders, reverse=True)


def split_terms(eq: Any, coordinates: Iterable[sp.Symbol] | None = None) -> list[sp.Basic]:
    """
    Split both sides into the operands of their ``+``, ``*`` and ``/`` trees.

    SymPy represents subtraction and division as ``Add``/``Mul`` with negative
    coefficients and powers, so only those two heads are split.

    With ``coordinates`` given, a product or quotient that directly contains a
    derivative with respect to one of them is kept whole, so coefficient
    products (``a(x) * Dx(u)``, upwinding) and nonlinear Laplacian pieces
    (``Dx(a * Dx(u)) / r``) reach the stencil rules intact. Zero terms are dropped.
    """
    wanted = None if coordinates is None else set(coordinates)
    terms: list[sp.Basic] = []
    for side in _sides(eq):
        terms.extend(_split_terms(side, wanted))
    if wanted is None:
        return terms
    return [term for term in terms if term != 0]


def _split_terms(term: sp.Basic, coordinates: set | None = None) -> list[sp.Basic]:
    if isinstance(term, sp.Mul) and coordinates is not None:
        if any(_differentiates_by(arg, coordinates) for arg in term.args):
            return [term]
    if isinstance(term, (sp.Add, sp.Mul)):
        result: list[sp.Basic] = []
        for arg in term.args:
            result.extend(_split_terms(arg, coordinates))
        return result
    return [term]


def _differentiates_by(node: Any, coordinates: set) -> bool:
    return isinstance(node, sp.Derivative) and any(variable in coordinates for variable in node.variables)


def split_additive_terms(eq: Any) -> list[sp.Basic]:
    """Top-level additive terms of both sides."""
    return [term for side in _sides(eq) for term in sp.Add.make_args(side)]


def subsmatch(expr: Any, rule) -> bool:
    """
    True if the pattern side of ``rule`` occurs structurally in ``expr``.

    Args:
        expr: Expression or equation to search
        rule: ``(pattern, replacement)`` pair or a single-item mapping
    """
    pattern = next(iter(rule.keys())) if hasattr(rule, "keys") else rule[0]
    return any(node == pattern for side in _sides(expr) for node in sp.preorder_traversal(side))


def remove(items: Iterable, value: Any) -> list:
    """Items in order with ``value`` dropped; nothing is dropped when ``value`` is None."""
    if value is None:
        return list(items)
    return [item for item in items if item != value]


def unitindex(n: int, j: int) -> tuple[int, ...]:
    """Unit index of length ``n`` in dimension ``j`` (1-based): ``unitindex(3, 2) == (0, 1, 0)``."""
    return tuple(int(i == j) for i in range(1, n + 1))


def unitindices(n: int) -> list[tuple[int, ...]]:
    """Unit indices of every dimension ``1..n``; empty for ``n == 0``."""
    return [unitindex(n, j) for j in range(1, n + 1)]


def lower_subs(expr: Any) -> Any:
    """
    Rewrite ``Subs`` nodes as derivatives of boundary-evaluated applications.

    ``diff(u(t, x), x).subs(x, 0)`` is held by SymPy as
    ``Subs(Derivative(u(t, x), x), x, 0)``; it becomes
    ``Derivative(u(t, 0), x)``, the form the classifier recognizes.
    Expressions without ``Subs`` are returned unchanged.
    """
    if not isinstance(expr, sp.Basic) or not expr.args:
        return expr
    if isinstance(expr, sp.Subs):
        mapping = dict(zip(expr.variables, expr.point))
        return _replace_keeping_derivatives(lower_subs(expr.expr), mapping)
    new_args = [lower_subs(arg) for arg in expr.args]
    if all(new is old for new, old in zip(new_args, expr.args)):
        return expr
    return expr.func(*new_args)


def _replace_keeping_derivatives(expr: Any, mapping: dict) -> Any:
    if isinstance(expr, sp.Derivative):
        inner = _replace_keeping_derivatives(expr.expr, mapping)
        return sp.Derivative(inner, *expr.variable_count)
    if expr in mapping:
        return mapping[expr]
    if not isinstance(expr, sp.Basic) or not expr.args:
        return expr
    return expr.func(*[_replace_keeping_derivatives(arg, mapping) for arg in expr.args])


def lower_subs_equation(eq: Equation) -> Equation:
    """``lower_subs`` applied to both sides of an equation."""
    lhs, rhs = lower_subs(eq.lhs), lower_subs(eq.rhs)
    if lhs is eq.lhs and rhs is eq.rhs:
        return eq
    return Equation(lhs, rhs)
