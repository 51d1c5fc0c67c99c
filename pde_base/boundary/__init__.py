"""
Boundary condition classification, assembly and periodicity analysis.

    >>> boundaries = BoundaryClassifier(v).classify_all(bcs)
    >>> bmap = BoundaryMap.assemble(boundaries, v)
    >>> pmap = PeriodicMap.from_boundary_map(bmap, v)
"""

from .boundary_map import (
    BoundaryMap,
    assemble_boundary_map,
    filter_interfaces,
    flatten_vardict,
    has_interfaces,
    haslowerupper,
    is_periodic_interface,
    isinterface,
    isperiodic,
    isupper,
)
from .classifier import BoundaryClassifier, classify_boundaries, classify_boundary
from .periodic import PeriodicMap
from .types import (
    Boundary,
    BoundaryKind,
    EdgeBoundary,
    HigherOrderInterfaceBoundary,
    InterfaceBoundary,
)
from .validation import (
    BoundaryMapValidator,
    CompositeValidator,
    EdgeCoverageValidator,
    NullValidator,
)

__all__ = [
    "Boundary",
    "BoundaryClassifier",
    "BoundaryKind",
    "BoundaryMap",
    "BoundaryMapValidator",
    "CompositeValidator",
    "EdgeBoundary",
    "EdgeCoverageValidator",
    "HigherOrderInterfaceBoundary",
    "InterfaceBoundary",
    "NullValidator",
    "PeriodicMap",
    "assemble_boundary_map",
    "classify_boundaries",
    "classify_boundary",
    "filter_interfaces",
    "flatten_vardict",
    "has_interfaces",
    "haslowerupper",
    "is_periodic_interface",
    "isinterface",
    "isperiodic",
    "isupper",
]
