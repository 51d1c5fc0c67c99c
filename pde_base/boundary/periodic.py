"""
Periodicity analysis over an assembled boundary map.

An (unknown, coordinate) pair is periodic when one of its interface
conditions ties the same function to itself at the two opposite bounds of
that coordinate, with the same free arguments at both ends:

    u(t, 0) ~ u(t, 1)                  periodic in x
    Dx(u(t, 0)) ~ Dx(u(t, 1))          periodic in x
    u(t, 0) ~ v(t, 1)                  not periodic (two functions)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pde_base.core.symbolic_utils import function_tag

from .boundary_map import is_periodic_interface, isinterface

if TYPE_CHECKING:
    from pde_base.core.variable_map import VariableMap

    from .boundary_map import BoundaryMap


class PeriodicMap:
    """
    Function tag -> coordinate -> periodic flag.

    Examples:
        >>> pmap = PeriodicMap.from_boundary_map(bmap, v)
        >>> pmap[u][x], pmap.has_periodic
        (True, True)
    """

    def __init__(self, table: dict):
        self._table = table

    @classmethod
    def from_boundary_map(cls, bmap: BoundaryMap, variable_map: VariableMap | None = None) -> PeriodicMap:
        variable_map = variable_map or bmap.variable_map
        table: dict = {}
        for tag, per_coordinate in bmap.items():
            coordinates = variable_map.all_ivs_of(tag) if variable_map is not None else list(per_coordinate)
            table[tag] = {
                x: any(is_periodic_interface(b) for b in per_coordinate.get(x, []) if isinterface(b))
                for x in coordinates
            }
        return cls(table)

    def __getitem__(self, u) -> dict:
        return self._table[function_tag(u)]

    def items(self):
        return self._table.items()

    def is_periodic(self, u, x) -> bool:
        return self._table.get(function_tag(u), {}).get(x, False)

    @property
    def has_periodic(self) -> bool:
        """True if any (unknown, coordinate) pair is periodic."""
        return any(flag for per_coordinate in self._table.values() for flag in per_coordinate.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PeriodicMap):
            return NotImplemented
        return self._table == other._table

    __hash__ = None

    def __repr__(self) -> str:
        flags = {str(tag): {str(x): flag for x, flag in pc.items()} for tag, pc in self._table.items()}
        return f"PeriodicMap({flags})"
