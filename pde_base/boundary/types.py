"""
Boundary condition variants.

Every raw boundary equation is classified into exactly one of three
variants:

- EdgeBoundary: one unknown evaluated at one bound of one coordinate
  (Dirichlet, Neumann, Robin and initial/terminal conditions alike)
- InterfaceBoundary: two end points coupled without normal derivatives,
  e.g. ``u(t, 0) ~ u(t, 1)``
- HigherOrderInterfaceBoundary: two end points coupled through a normal
  derivative, e.g. ``Dx(u(t, 0)) ~ Dx(u(t, 1))``

The set is closed. Code dispatching on a boundary should handle all three
and raise on anything else.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Union

import sympy as sp

if TYPE_CHECKING:
    from pde_base.core.equations import Equation


class BoundaryKind(Enum):
    """Names of the boundary variants."""

    EDGE = "edge"
    INTERFACE = "interface"
    HIGHER_ORDER_INTERFACE = "higher_order_interface"


@dataclass(frozen=True)
class EdgeBoundary:
    """
    Condition on one unknown at one bound of one coordinate.

    Attributes:
        u: Genuine application of the unknown, e.g. ``u(t, x)``
        x: The fixed coordinate
        is_upper: True at the upper bound, False at the lower bound
        order: Highest derivative order with respect to ``x`` in the equation
        eq: The boundary equation as written
        depvars: Referenced function tags
        indvars: Referenced fixed coordinates
        value: Bound value of ``x`` as written in the equation
        is_time: True when ``x`` is the time coordinate
    """

    u: sp.Basic
    x: sp.Symbol
    is_upper: bool
    order: int
    eq: Equation
    depvars: frozenset
    indvars: frozenset
    value: float = 0.0
    is_time: bool = False

    @property
    def kind(self) -> BoundaryKind:
        return BoundaryKind.EDGE

    @property
    def tag(self):
        return self.u.func

    @property
    def is_initial(self) -> bool:
        """Condition at the lower time bound."""
        return self.is_time and not self.is_upper

    @property
    def is_terminal(self) -> bool:
        """Condition at the upper time bound."""
        return self.is_time and self.is_upper

    def __str__(self) -> str:
        side = "upper" if self.is_upper else "lower"
        return f"EdgeBoundary({self.u} at {side} {self.x}, order {self.order}: {self.eq})"


class _TwoEnded:
    """Shared accessors for the two interface variants."""

    @property
    def tag(self):
        return self.u.func

    @property
    def tag2(self):
        return self.u2.func

    @property
    def ends(self) -> tuple[tuple, tuple]:
        """``(u, x, is_upper)`` of both end points."""
        return ((self.u, self.x, self.is_upper), (self.u2, self.x2, self.is_upper2))

    @property
    def is_time(self) -> bool:
        return False

    @property
    def is_initial(self) -> bool:
        return False

    def free_arguments(self) -> tuple[tuple, tuple]:
        """Arguments of both end applications with the fixed position removed."""
        return (_free(self.app, self.u, self.x), _free(self.app2, self.u2, self.x2))


def _free(app: sp.Basic, u: sp.Basic, x: sp.Symbol) -> tuple:
    position = list(u.args).index(x)
    return tuple(a for i, a in enumerate(app.args) if i != position)


@dataclass(frozen=True)
class InterfaceBoundary(_TwoEnded):
    """
    Zero-order coupling between two boundary points.

    Attributes:
        u, x, is_upper: First end point (unknown, fixed coordinate, bound)
        u2, x2, is_upper2: Second end point
        eq: The boundary equation as written
        depvars: Referenced function tags
        indvars: Referenced fixed coordinates
        app, app2: The boundary-evaluated applications of both ends
    """

    u: sp.Basic
    x: sp.Symbol
    is_upper: bool
    u2: sp.Basic
    x2: sp.Symbol
    is_upper2: bool
    eq: Equation
    depvars: frozenset
    indvars: frozenset
    app: sp.Basic = None
    app2: sp.Basic = None

    @property
    def kind(self) -> BoundaryKind:
        return BoundaryKind.INTERFACE

    @property
    def order(self) -> int:
        return 0

    def __str__(self) -> str:
        return f"InterfaceBoundary({self.app} <-> {self.app2}: {self.eq})"


@dataclass(frozen=True)
class HigherOrderInterfaceBoundary(_TwoEnded):
    """Coupling between two boundary points through normal derivatives of order ``order``."""

    u: sp.Basic
    x: sp.Symbol
    is_upper: bool
    u2: sp.Basic
    x2: sp.Symbol
    is_upper2: bool
    eq: Equation
    depvars: frozenset
    indvars: frozenset
    order: int = 1
    app: sp.Basic = None
    app2: sp.Basic = None

    @property
    def kind(self) -> BoundaryKind:
        return BoundaryKind.HIGHER_ORDER_INTERFACE

    def __str__(self) -> str:
        return f"HigherOrderInterfaceBoundary({self.app} <-> {self.app2}, order {self.order}: {self.eq})"


Boundary = Union[EdgeBoundary, InterfaceBoundary, HigherOrderInterfaceBoundary]

INTERFACE_TYPES = (InterfaceBoundary, HigherOrderInterfaceBoundary)
BOUNDARY_TYPES = (EdgeBoundary, *INTERFACE_TYPES)
