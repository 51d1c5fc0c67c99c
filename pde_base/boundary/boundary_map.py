"""
Boundary map assembly and boundary-list queries.

A ``BoundaryMap`` files every classified boundary under its unknown function
and the coordinate it fixes:

    bmap[u][x] -> [EdgeBoundary(...), InterfaceBoundary(...), ...]

Every (unknown, coordinate) pair of the variable map is present, including
the time coordinate, possibly with an empty list. Lists keep the order of
the input equations. An interface is filed under both of its end points when
they differ.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from pde_base.core.symbolic_utils import function_tag
from pde_base.utils.exceptions import ValidationError
from pde_base.utils.pde_logging import get_logger

from .types import Boundary, EdgeBoundary, HigherOrderInterfaceBoundary, InterfaceBoundary

if TYPE_CHECKING:
    import sympy as sp

    from pde_base.core.variable_map import VariableMap

logger = get_logger(__name__)


class BoundaryMap:
    """
    Classified boundaries indexed by function tag and coordinate.

    Args:
        table: Tag -> coordinate -> list of boundaries
        variable_map: The map the boundaries were classified against
    """

    def __init__(self, table: dict, variable_map: VariableMap | None = None):
        self._table = table
        self.variable_map = variable_map

    @classmethod
    def empty(cls, variable_map: VariableMap) -> BoundaryMap:
        """A map with an empty list for every (unknown, coordinate) pair."""
        table = {
            function_tag(u): {x: [] for x in variable_map.all_ivs_of(u)} for u in variable_map.depvars()
        }
        return cls(table, variable_map)

    @classmethod
    def assemble(cls, boundaries: Iterable[Boundary], variable_map: VariableMap) -> BoundaryMap:
        """
        File classified boundaries in input order.

        Raises:
            ValidationError: A boundary is not one of the known variants, or
                references an (unknown, coordinate) pair outside the map
        """
        bmap = cls.empty(variable_map)
        for boundary in boundaries:
            if isinstance(boundary, EdgeBoundary):
                bmap._file(boundary, boundary.tag, boundary.x)
            elif isinstance(boundary, (InterfaceBoundary, HigherOrderInterfaceBoundary)):
                bmap._file(boundary, boundary.tag, boundary.x)
                if (boundary.tag2, boundary.x2) != (boundary.tag, boundary.x):
                    bmap._file(boundary, boundary.tag2, boundary.x2)
            else:
                raise ValidationError(
                    f"Cannot file {boundary!r}: not a boundary variant",
                    component="BoundaryMap",
                    diagnostic_data={"type": type(boundary).__name__},
                )
        logger.debug(f"Assembled boundary map with {len(bmap.flatten())} boundaries")
        return bmap

    def _file(self, boundary: Boundary, tag, x) -> None:
        if tag not in self._table or x not in self._table[tag]:
            raise ValidationError(
                f"Boundary on ({tag}, {x}) does not match any unknown and coordinate of the variable map",
                component="BoundaryMap",
                suggested_action="Check that the condition uses a declared unknown with its declared coordinates",
                diagnostic_data={"function": str(tag), "coordinate": str(x), "equation": str(boundary.eq)},
            )
        self._table[tag][x].append(boundary)

    # =========================================================================
    # Access
    # =========================================================================

    def __getitem__(self, u) -> dict:
        return self._table[function_tag(u)]

    def __contains__(self, u) -> bool:
        try:
            return function_tag(u) in self._table
        except TypeError:
            return False

    def __iter__(self):
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def boundaries(self, u, x) -> list[Boundary]:
        """Boundaries filed under (``u``, ``x``)."""
        return self[u][x]

    def items(self):
        """``(tag, {coordinate: boundaries})`` pairs."""
        return self._table.items()

    def flatten(self) -> list[Boundary]:
        """Every filed boundary once, in filing order."""
        seen: dict[int, Boundary] = {}
        for per_coordinate in self._table.values():
            for boundaries in per_coordinate.values():
                for b in boundaries:
                    seen.setdefault(id(b), b)
        return list(seen.values())

    def without_time(self) -> BoundaryMap:
        """Copy restricted to spatial coordinates."""
        time = self.variable_map.time if self.variable_map is not None else None
        table = {
            tag: {x: list(bs) for x, bs in per_coordinate.items() if x != time}
            for tag, per_coordinate in self._table.items()
        }
        return BoundaryMap(table, self.variable_map)

    def initial_conditions(self) -> list[EdgeBoundary]:
        """Edge boundaries at the lower time bound, per unknown in map order."""
        time = self.variable_map.time if self.variable_map is not None else None
        if time is None:
            return []
        return [b for per_coordinate in self._table.values() for b in per_coordinate.get(time, []) if b.is_initial]

    def as_dict(self) -> dict:
        return {tag: {x: list(bs) for x, bs in per_coordinate.items()} for tag, per_coordinate in self._table.items()}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundaryMap):
            return NotImplemented
        return self._table == other._table

    __hash__ = None

    def __repr__(self) -> str:
        counts = {str(tag): {str(x): len(bs) for x, bs in pc.items()} for tag, pc in self._table.items()}
        return f"BoundaryMap({counts})"


def assemble_boundary_map(boundaries: Iterable[Boundary], variable_map: VariableMap) -> BoundaryMap:
    return BoundaryMap.assemble(boundaries, variable_map)


# =============================================================================
# Boundary-list queries
# =============================================================================


def isupper(b: Boundary) -> bool:
    """True if the (first) end point of ``b`` is at the upper bound."""
    return b.is_upper


def isinterface(b: Boundary) -> bool:
    return isinstance(b, (InterfaceBoundary, HigherOrderInterfaceBoundary))


def filter_interfaces(bs: Iterable[Boundary]) -> list[Boundary]:
    return [b for b in bs if isinterface(b)]


def has_interfaces(bs: Iterable[Boundary]) -> bool:
    return any(isinterface(b) for b in bs)


def haslowerupper(bs: Iterable[Boundary], x: sp.Symbol, u=None) -> tuple[bool, bool]:
    """
    Whether ``bs`` holds a condition at the lower and at the upper bound of ``x``.

    Interfaces count at each of their ends that fixes ``x``. With ``u`` (tag or
    application) given, only ends belonging to that function count.

    Returns:
        ``(has_lower, has_upper)``
    """
    tag = function_tag(u) if u is not None else None
    has_lower = has_upper = False
    for b in bs:
        ends = [(b.tag, b.x, b.is_upper)]
        if isinterface(b):
            ends.append((b.tag2, b.x2, b.is_upper2))
        for end_tag, end_x, end_upper in ends:
            if end_x != x or (tag is not None and end_tag != tag):
                continue
            if end_upper:
                has_upper = True
            else:
                has_lower = True
    return has_lower, has_upper


def flatten_vardict(d: Mapping[Any, Any]) -> list:
    """Concatenate the values of a (possibly nested) dict of lists, keeping order."""
    flat: list = []
    for value in d.values():
        if isinstance(value, Mapping):
            flat.extend(flatten_vardict(value))
        elif isinstance(value, (list, tuple)):
            flat.extend(value)
        else:
            flat.append(value)
    return flat


def isperiodic(bmap: BoundaryMap, u, x) -> bool:
    """True if some interface filed under (``u``, ``x``) is a periodic condition."""
    return any(is_periodic_interface(b) for b in bmap[u][x] if isinterface(b))


def is_periodic_interface(b: Boundary) -> bool:
    """
    Same function at both ends, same coordinate at opposite bounds, identical free arguments.
    """
    if not isinterface(b):
        return False
    if b.tag != b.tag2 or b.x != b.x2 or b.is_upper == b.is_upper2:
        return False
    if b.app is None or b.app2 is None:
        return False
    free, free2 = b.free_arguments()
    return free == free2
