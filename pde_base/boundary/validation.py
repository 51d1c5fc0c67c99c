"""
Boundary map validation strategies.

A discretization backend decides which boundary maps it can work with. The
check is an injected strategy object rather than a global override:

    validator = CompositeValidator([EdgeCoverageValidator(), MyBackendValidator()])
    validator.check(bmap, v)   # raises ValidationError or returns None
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pde_base.utils.exceptions import ValidationError

from .boundary_map import haslowerupper, isperiodic

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pde_base.core.variable_map import VariableMap

    from .boundary_map import BoundaryMap


@runtime_checkable
class BoundaryMapValidator(Protocol):
    """
    Strategy that accepts or rejects an assembled boundary map.

    Required methods:
        check(boundary_map, variable_map): return None to accept, raise
            ``ValidationError`` to reject
    """

    def check(self, boundary_map: BoundaryMap, variable_map: VariableMap) -> None: ...


class NullValidator:
    """Accepts every boundary map."""

    def check(self, boundary_map: BoundaryMap, variable_map: VariableMap) -> None:
        return None


class EdgeCoverageValidator:
    """
    Require a condition at both bounds of every spatial coordinate of every unknown.

    A bound counts as covered by an edge condition, by an interface end
    fixing that bound, or by a periodic condition on the coordinate. Time is
    not checked.
    """

    def check(self, boundary_map: BoundaryMap, variable_map: VariableMap) -> None:
        uncovered: dict[str, list[str]] = {}
        for u in variable_map.depvars():
            for x in variable_map.ivs(u):
                if isperiodic(boundary_map, u, x):
                    continue
                has_lower, has_upper = haslowerupper(boundary_map[u][x], x, u)
                missing = [side for side, present in (("lower", has_lower), ("upper", has_upper)) if not present]
                if missing:
                    uncovered[f"({u.func}, {x})"] = missing

        if uncovered:
            pairs = ", ".join(f"{pair} missing {'/'.join(sides)}" for pair, sides in uncovered.items())
            raise ValidationError(
                f"Boundary conditions do not cover every spatial edge: {pairs}",
                component="EdgeCoverageValidator",
                suggested_action="Add a condition at each listed bound, or a periodic/interface condition",
                diagnostic_data={"uncovered": uncovered},
            )


class CompositeValidator:
    """Runs several validators in order; the first rejection propagates."""

    def __init__(self, validators: Iterable[BoundaryMapValidator] = ()):
        self.validators = list(validators)

    def check(self, boundary_map: BoundaryMap, variable_map: VariableMap) -> None:
        for validator in self.validators:
            validator.check(boundary_map, variable_map)
