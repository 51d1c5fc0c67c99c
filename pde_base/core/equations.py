"""
Equation value type and equation-list preprocessing.

SymPy's ``Eq`` evaluates trivially true relations (``Eq(u(0), u(0))`` becomes
``True``), which loses the condition. ``Equation`` keeps both sides exactly as
written, like the ``lhs ~ rhs`` notation used throughout the docs.

Accepted raw forms, normalized by ``as_equation``:
    - ``Equation(lhs, rhs)``
    - ``sympy.Eq(lhs, rhs)`` (any unevaluated ``Equality``)
    - ``(lhs, rhs)`` pairs, e.g. initial conditions written as ``(u(0, x), sin(x))``
    - a bare expression ``expr``, read as ``expr ~ 0``

Nested groups of equations are ``list`` objects; tuples are always pairs.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import sympy as sp
from sympy.logic.boolalg import BooleanAtom


@dataclass(frozen=True)
class Equation:
    """
    A symbolic equation ``lhs ~ rhs``.

    Attributes:
        lhs: Left-hand side expression
        rhs: Right-hand side expression
    """

    lhs: sp.Basic
    rhs: sp.Basic

    def __post_init__(self):
        object.__setattr__(self, "lhs", sp.sympify(self.lhs))
        object.__setattr__(self, "rhs", sp.sympify(self.rhs))

    @property
    def sides(self) -> tuple[sp.Basic, sp.Basic]:
        return (self.lhs, self.rhs)

    def __str__(self) -> str:
        return f"{self.lhs} ~ {self.rhs}"

    def to_sympy(self) -> sp.Equality:
        """Unevaluated ``sympy.Eq`` with the same sides."""
        return sp.Eq(self.lhs, self.rhs, evaluate=False)


def as_equation(raw: Any) -> Equation:
    """
    Normalize one raw equation into an ``Equation``.

    Raises:
        TypeError: If ``raw`` is an evaluated boolean or an unsupported object
    """
    if isinstance(raw, Equation):
        return raw
    if isinstance(raw, BooleanAtom):
        raise TypeError(
            f"Equation evaluated to {raw}; build it with Equation(lhs, rhs) or sympy.Eq(..., evaluate=False)"
        )
    if isinstance(raw, sp.Equality):
        return Equation(raw.lhs, raw.rhs)
    if isinstance(raw, tuple) and len(raw) == 2:
        return Equation(raw[0], raw[1])
    if isinstance(raw, sp.Expr):
        return Equation(raw, sp.S.Zero)
    raise TypeError(f"Cannot interpret {raw!r} ({type(raw).__name__}) as an equation")


def flatten_equations(equations: Any) -> list[Equation]:
    """
    Flatten arbitrarily nested lists of equations into one ordered list.

    Upstream preprocessing (e.g. splitting complex conditions into real and
    imaginary parts) may hand over groups of equations; their order is kept.

    Examples:
        >>> flatten_equations([eq1, [eq2, [eq3]], eq4])
        [eq1, eq2, eq3, eq4]
    """
    if equations is None:
        return []
    if not isinstance(equations, list):
        if isinstance(equations, (Equation, tuple, sp.Basic)) or not isinstance(equations, Iterable):
            return [as_equation(equations)]
        equations = list(equations)

    flat: list[Equation] = []
    for item in equations:
        if isinstance(item, list):
            flat.extend(flatten_equations(item))
        else:
            flat.append(as_equation(item))
    return flat


def cardinalize(equation: Equation) -> Equation:
    """Rewrite ``lhs ~ rhs`` as ``lhs - rhs ~ 0``."""
    return Equation(equation.lhs - equation.rhs, sp.S.Zero)


def cardinalize_eqs(equations: Iterable[Equation]) -> list[Equation]:
    return [cardinalize(eq) for eq in equations]


def substitute(equation: Equation, rules: Mapping) -> Equation:
    """Structurally replace subexpressions on both sides (no evaluation)."""
    return Equation(equation.lhs.xreplace(dict(rules)), equation.rhs.xreplace(dict(rules)))


def subs_alleqs(eqs: Iterable[Equation], bcs: Iterable[Equation], rules: Mapping) -> tuple[list, list]:
    """Apply ``substitute`` to every governing and boundary equation."""
    return [substitute(eq, rules) for eq in eqs], [substitute(bc, rules) for bc in bcs]
