"""
Boundary condition classification.

Each raw boundary equation is inspected structurally: the applications of
unknown functions it references are collected, the coordinate each of them
fixes is matched against the domain bounds, and the set of distinct end
points ``(function, coordinate, bound)`` decides the variant:

    one end point   -> EdgeBoundary
    two end points  -> InterfaceBoundary / HigherOrderInterfaceBoundary
    anything else   -> UnclassifiableBoundaryError

No condition is ever dropped; an equation either yields exactly one boundary
or raises.

Example:
    >>> classifier = BoundaryClassifier(variable_map)
    >>> b = classifier.classify(Equation(sp.Derivative(u(t, 1), x), 0))
    >>> b.x, b.is_upper, b.order
    (x, True, 1)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
import sympy as sp

from pde_base.config.core import ClassificationConfig
from pde_base.core.equations import as_equation
from pde_base.core.symbolic_utils import (
    count_differentials,
    d_orders,
    has_derivatives,
    is_numeric,
    iter_depvars,
    lower_subs_equation,
    split_terms,
)
from pde_base.utils.exceptions import UnclassifiableBoundaryError, UnclassifiableReason
from pde_base.utils.pde_logging import get_logger

from .types import Boundary, EdgeBoundary, HigherOrderInterfaceBoundary, InterfaceBoundary

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from pde_base.core.equations import Equation
    from pde_base.core.variable_map import VariableMap

logger = get_logger(__name__)


@dataclass(frozen=True)
class _EndPoint:
    """One boundary-evaluated application and where it sits."""

    tag: Any
    x: sp.Symbol
    is_upper: bool
    value: float
    app: sp.Basic

    @property
    def key(self) -> tuple:
        return (self.tag, self.x, self.is_upper)


class BoundaryClassifier:
    """
    Classify boundary equations against a variable map.

    Args:
        variable_map: Unknowns, signatures and resolved domains
        orders: Coordinate -> derivative orders found across the boundary
            equations (``d_orders``). A coordinate with no orders short-cuts
            the order computation to 0.
        config: Bound-matching tolerances
    """

    def __init__(
        self,
        variable_map: VariableMap,
        orders: Mapping[sp.Symbol, list[int]] | None = None,
        config: ClassificationConfig | None = None,
    ):
        self.variable_map = variable_map
        self.orders = dict(orders) if orders is not None else None
        self.config = config or ClassificationConfig()

    def classify_all(self, eqs: Iterable[Any]) -> list[Boundary]:
        """Classify every equation, in order; the first failure aborts."""
        eqs = [lower_subs_equation(as_equation(eq)) for eq in eqs]
        classifier = self
        if self.orders is None:
            orders = {x: d_orders(x, eqs) for x in self.variable_map.all_ivs()}
            classifier = BoundaryClassifier(self.variable_map, orders=orders, config=self.config)
        return [classifier.classify(eq) for eq in eqs]

    def classify(self, eq: Any) -> Boundary:
        """
        Classify one boundary equation.

        Raises:
            UnclassifiableBoundaryError: The equation matches no variant
        """
        eq = lower_subs_equation(as_equation(eq))
        v = self.variable_map

        applications = list(dict.fromkeys(iter_depvars(eq, v.depvar_ops)))
        if not applications:
            raise UnclassifiableBoundaryError(eq, UnclassifiableReason.NO_UNKNOWN)

        ends = [self._end_point(eq, app) for app in applications]

        tags = list(dict.fromkeys(end.tag for end in ends))
        if len(tags) > 2:
            raise UnclassifiableBoundaryError(
                eq, UnclassifiableReason.TOO_MANY_FUNCTIONS, details={"functions": [str(t) for t in tags]}
            )

        points: dict[tuple, _EndPoint] = {}
        for end in ends:
            points.setdefault(end.key, end)

        if len(points) == 1:
            boundary = self._edge(eq, next(iter(points.values())))
        elif len(points) == 2:
            boundary = self._interface(eq, *points.values())
        else:
            raise UnclassifiableBoundaryError(
                eq,
                UnclassifiableReason.TOO_MANY_POINTS,
                details={"points": [str(end.app) for end in points.values()]},
            )

        logger.debug(f"Classified {eq} as {boundary.kind.value} on {boundary.x}")
        return boundary

    # =========================================================================
    # End points
    # =========================================================================

    def _end_point(self, eq: Equation, app: sp.Basic) -> _EndPoint:
        v = self.variable_map
        tag = app.func
        if tag not in v.args:
            raise UnclassifiableBoundaryError(
                eq, UnclassifiableReason.UNKNOWN_SIGNATURE, details={"application": str(app)}
            )
        signature = v.args[tag]

        fixed = [(i, a) for i, a in enumerate(app.args) if is_numeric(a)]
        if not fixed:
            raise UnclassifiableBoundaryError(eq, UnclassifiableReason.INTERIOR, details={"application": str(app)})
        if len(fixed) > 1:
            raise UnclassifiableBoundaryError(
                eq,
                UnclassifiableReason.MULTIPLE_FIXED,
                details={"application": str(app), "fixed": [str(signature[i]) for i, _ in fixed]},
            )

        position, raw_value = fixed[0]
        if len(app.args) != len(signature) or any(
            a != s for i, (a, s) in enumerate(zip(app.args, signature)) if i != position
        ):
            raise UnclassifiableBoundaryError(
                eq,
                UnclassifiableReason.FREE_MISMATCH,
                details={"application": str(app), "signature": str(signature)},
            )

        x = signature[position]
        try:
            value = float(raw_value)
        except TypeError as exc:
            raise UnclassifiableBoundaryError(
                eq, UnclassifiableReason.NO_MATCHING_BOUND, details={"coordinate": str(x), "value": str(raw_value)}
            ) from exc
        return _EndPoint(tag=tag, x=x, is_upper=self._match_bound(eq, x, value), value=value, app=app)

    def _match_bound(self, eq: Equation, x: sp.Symbol, value: float) -> bool:
        """True for the upper bound of ``x``, False for the lower one."""
        lower, upper = self.variable_map.interval(x)
        atol, rtol = self.config.atol, self.config.rtol
        at_lower = bool(np.isclose(value, lower, atol=atol, rtol=rtol))
        at_upper = bool(np.isclose(value, upper, atol=atol, rtol=rtol))
        if at_lower == at_upper:
            raise UnclassifiableBoundaryError(
                eq,
                UnclassifiableReason.NO_MATCHING_BOUND,
                details={
                    "coordinate": str(x),
                    "value": value,
                    "bounds": (lower, upper),
                    "ambiguous": at_lower and at_upper,
                },
            )
        return at_upper

    # =========================================================================
    # Variants
    # =========================================================================

    def _order(self, eq: Equation, x: sp.Symbol) -> int:
        """Highest derivative order with respect to ``x`` over the derivative-bearing terms."""
        if self.orders is not None and not self.orders.get(x):
            return 0
        return max((count_differentials(term, x) for term in split_terms(eq) if has_derivatives(term)), default=0)

    def _edge(self, eq: Equation, end: _EndPoint) -> EdgeBoundary:
        v = self.variable_map
        return EdgeBoundary(
            u=v.depvar(end.tag),
            x=end.x,
            is_upper=end.is_upper,
            order=self._order(eq, end.x),
            eq=eq,
            depvars=frozenset({end.tag}),
            indvars=frozenset({end.x}),
            value=end.value,
            is_time=v.time is not None and end.x == v.time,
        )

    def _interface(self, eq: Equation, first: _EndPoint, second: _EndPoint) -> Boundary:
        v = self.variable_map
        if v.time is not None and v.time in (first.x, second.x):
            raise UnclassifiableBoundaryError(
                eq, UnclassifiableReason.TIME_INTERFACE, details={"points": [str(first.app), str(second.app)]}
            )

        order = max(self._order(eq, first.x), self._order(eq, second.x))
        fields = dict(
            u=v.depvar(first.tag),
            x=first.x,
            is_upper=first.is_upper,
            u2=v.depvar(second.tag),
            x2=second.x,
            is_upper2=second.is_upper,
            eq=eq,
            depvars=frozenset({first.tag, second.tag}),
            indvars=frozenset({first.x, second.x}),
            app=first.app,
            app2=second.app,
        )
        if order == 0:
            return InterfaceBoundary(**fields)
        return HigherOrderInterfaceBoundary(order=order, **fields)


def classify_boundary(
    eq: Any,
    variable_map: VariableMap,
    orders: Mapping[sp.Symbol, list[int]] | None = None,
    config: ClassificationConfig | None = None,
) -> Boundary:
    """Classify a single boundary equation; see ``BoundaryClassifier``."""
    return BoundaryClassifier(variable_map, orders=orders, config=config).classify(eq)


def classify_boundaries(
    eqs: Iterable[Any],
    variable_map: VariableMap,
    orders: Mapping[sp.Symbol, list[int]] | None = None,
    config: ClassificationConfig | None = None,
) -> list[Boundary]:
    """Classify boundary equations in order."""
    return BoundaryClassifier(variable_map, orders=orders, config=config).classify_all(eqs)
