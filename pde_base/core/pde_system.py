"""
Declarative PDE problem container.

A ``PDESystem`` is what the problem loader hands over: the raw declared lists
as written by the user. Nothing is validated here beyond normalizing the
equation objects; the variable map builder checks the coordinate/domain
correspondence independently and fails loudly when it is broken.

Example:
    >>> t, x = sp.symbols("t x")
    >>> u = sp.Function("u")
    >>> pdesys = PDESystem(
    ...     eqs=[Equation(sp.Derivative(u(t, x), t), sp.Derivative(u(t, x), (x, 2)))],
    ...     bcs=[Equation(u(0, x), sp.sin(x)), Equation(u(t, 0), 0), Equation(u(t, 1), 0)],
    ...     domain={t: (0.0, 1.0), x: (0.0, 1.0)},
    ...     ivs=[t, x],
    ...     dvs=[u(t, x)],
    ...     time=t,
    ... )
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import sympy as sp

from .equations import Equation, flatten_equations
from .symbolic_utils import function_tag


@dataclass
class PDESystem:
    """
    Raw declaration of a PDE problem.

    Attributes:
        eqs: Governing equations (nested lists are flattened)
        bcs: Boundary and initial conditions (nested lists are flattened, order kept)
        domain: Coordinate -> interval, as a mapping or a list of ``(coordinate, interval)``
            pairs; intervals are ``(lower, upper)`` tuples or ``sympy.Interval``
        ivs: Declared coordinates, including time when present
        dvs: Declared unknowns as tags (``u``) or applications (``u(t, x)``)
        ps: Parameters (symbols, or ``(symbol, value)`` pairs)
        time: The coordinate designated as time, if any
        name: Optional system name used in log messages
    """

    eqs: list[Any]
    bcs: list[Any]
    domain: Any
    ivs: list[sp.Symbol]
    dvs: list[Any]
    ps: list[Any] = field(default_factory=list)
    time: sp.Symbol | None = None
    name: str | None = None

    def __post_init__(self):
        self.eqs = flatten_equations(self.eqs)
        self.bcs = flatten_equations(self.bcs)
        self.ivs = list(self.ivs)
        self.dvs = list(self.dvs)
        self.ps = list(self.ps) if self.ps is not None else []
        if self.time is not None and self.time not in self.ivs:
            raise ValueError(f"Time coordinate {self.time} is not among the declared coordinates {self.ivs}")

    @property
    def depvar_ops(self) -> list:
        """Function tags of the declared unknowns, in declaration order."""
        return list(dict.fromkeys(function_tag(u) for u in self.dvs))

    @property
    def domain_table(self) -> dict[sp.Symbol, Any]:
        """The raw domain declaration as a dict, intervals not yet resolved."""
        if isinstance(self.domain, Mapping):
            return dict(self.domain)
        return {variable: interval for variable, interval in self.domain}

    def with_equations(self, eqs: list[Equation] | None = None, bcs: list[Equation] | None = None) -> PDESystem:
        """Copy of this system with replaced equation lists."""
        return PDESystem(
            eqs=list(self.eqs if eqs is None else eqs),
            bcs=list(self.bcs if bcs is None else bcs),
            domain=self.domain,
            ivs=self.ivs,
            dvs=self.dvs,
            ps=self.ps,
            time=self.time,
            name=self.name,
        )

    def __str__(self) -> str:
        label = self.name or "PDESystem"
        return f"{label}({len(self.eqs)} equation(s), {len(self.bcs)} condition(s), unknowns={self.dvs})"
