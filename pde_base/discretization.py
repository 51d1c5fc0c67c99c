"""
Parsing pipeline: from a declared PDESystem to everything a backend needs.

``parse_pde_system`` runs the system through the steps every discretization
shares before any grid or stencil exists:

    1. cardinalize the governing equations (``lhs - rhs ~ 0``) and lower
       ``Subs`` nodes in the boundary equations
    2. build the VariableMap
    3. backend interface checks
    4. classify every boundary equation and assemble the BoundaryMap
    5. backend boundary-map checks (and edge coverage, when configured)
    6. optional backend transform, after which boundaries are re-parsed
    7. periodicity, derivative-order tables, initial conditions, time span

Classification either succeeds for every boundary equation or the run
aborts; errors are logged before they propagate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import sympy as sp

from pde_base.boundary import BoundaryClassifier, BoundaryMap, EdgeCoverageValidator, PeriodicMap
from pde_base.config.core import PDEBaseConfig
from pde_base.core.equations import cardinalize_eqs, flatten_equations
from pde_base.core.symbolic_utils import d_orders, lower_subs_equation
from pde_base.core.variable_map import VariableMap
from pde_base.hooks import DiscretizationHooks
from pde_base.utils.exceptions import PDEBaseError, UnclassifiableBoundaryError, ValidationError
from pde_base.utils.pde_logging import (
    get_logger,
    log_boundary_summary,
    log_classification_error,
    log_validation_error,
    log_variable_map_summary,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pde_base.boundary import EdgeBoundary
    from pde_base.core.equations import Equation
    from pde_base.core.pde_system import PDESystem

logger = get_logger(__name__)


@dataclass
class ParsedSystem:
    """
    Result of ``parse_pde_system``.

    Attributes:
        pdesys: The system after cardinalization and any backend transform
        eqs: Governing equations, all of the form ``expr ~ 0``
        bcs: Boundary equations, flattened, in input order
        variable_map: Unknowns, coordinates and domains
        boundary_map: Every boundary filed by (function tag, coordinate)
        periodic_map: Periodic flag per (function tag, coordinate)
        bcorders: Coordinate -> derivative orders in the boundary equations
        orders: Spatial coordinate -> derivative orders in equations and boundaries
        ics: Initial conditions (edge boundaries at the lower time bound)
        tspan: Time interval, or None for stationary systems
        bcmap: Boundary map restricted to spatial coordinates
        transformed: Whether a backend transform replaced the system
    """

    pdesys: PDESystem
    eqs: list[Equation]
    bcs: list[Equation]
    variable_map: VariableMap
    boundary_map: BoundaryMap
    periodic_map: PeriodicMap
    bcorders: dict[sp.Symbol, list[int]]
    orders: dict[sp.Symbol, list[int]]
    ics: list[EdgeBoundary]
    tspan: tuple[float, float] | None
    bcmap: BoundaryMap
    transformed: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def time(self) -> sp.Symbol | None:
        return self.variable_map.time

    @property
    def has_periodic(self) -> bool:
        return self.periodic_map.has_periodic


def parse_pde_system(
    pdesys: PDESystem,
    hooks: DiscretizationHooks | None = None,
    config: PDEBaseConfig | None = None,
    replaced_vars: Mapping | None = None,
) -> ParsedSystem:
    """
    Parse a declared PDE system into variable, boundary and periodic maps.

    Args:
        pdesys: The declared problem
        hooks: Discretization backend hooks (default: accept everything)
        config: Tolerances, validation and logging settings
        replaced_vars: Renamed variables from upstream preprocessing

    Returns:
        ParsedSystem with every boundary classified

    Raises:
        DomainResolutionError: A coordinate in use has no valid domain
        SignatureInconsistencyError: An unknown is used with incompatible arguments
        UnclassifiableBoundaryError: A boundary equation matches no variant
        ValidationError: A backend or the edge-coverage check rejected the boundary map
    """
    config = config or PDEBaseConfig()
    hooks = hooks if hooks is not None else DiscretizationHooks()

    hook_time = hooks.get_time()
    time = hook_time if hook_time is not None else pdesys.time

    logger.info(f"Parsing {pdesys}")
    pdesys = _normalize(pdesys)

    try:
        v = VariableMap.from_pde_system(
            pdesys, time=time, replaced_vars=replaced_vars, config=config.classification
        )
        log_variable_map_summary(logger, v)

        hooks.interface_errors(pdesys, v)

        bmap, bcorders = _parse_boundaries(pdesys.bcs, v, config)
        _check_boundarymap(bmap, v, hooks, config)

        transformed = False
        if hooks.should_transform(pdesys, bmap):
            result = hooks.transform_pde_system(v, bmap, pdesys)
            if result is not None:
                transformed = True
                pdesys = _normalize(result)
                logger.info(f"Backend transformed the system into {pdesys}")
                bmap, bcorders = _parse_boundaries(pdesys.bcs, v, config)
                _check_boundarymap(bmap, v, hooks, config)

    except UnclassifiableBoundaryError as e:
        log_classification_error(logger, e.equation, e.reason, e.suggested_action)
        raise
    except ValidationError as e:
        log_validation_error(logger, e.component, e.message, e.suggested_action)
        raise
    except PDEBaseError as e:
        logger.error(str(e))
        raise

    periodic_map = PeriodicMap.from_boundary_map(bmap, v)
    pdeorders = {x: d_orders(x, pdesys.eqs) for x in v.indvars()}
    orders = {x: sorted(set(pdeorders[x]) | set(bcorders[x]), reverse=True) for x in v.indvars()}

    parsed = ParsedSystem(
        pdesys=pdesys,
        eqs=list(pdesys.eqs),
        bcs=list(pdesys.bcs),
        variable_map=v,
        boundary_map=bmap,
        periodic_map=periodic_map,
        bcorders=bcorders,
        orders=orders,
        ics=bmap.initial_conditions(),
        tspan=v.tspan(),
        bcmap=bmap.without_time(),
        transformed=transformed,
    )
    if periodic_map.has_periodic:
        logger.info("System has periodic boundary conditions")
    return hooks.on_parse_end(parsed)


def _normalize(pdesys: PDESystem) -> PDESystem:
    """Cardinalize the governing equations, flatten the boundary equations and lower ``Subs`` nodes."""
    bcs = [lower_subs_equation(bc) for bc in flatten_equations(pdesys.bcs)]
    return pdesys.with_equations(eqs=cardinalize_eqs(pdesys.eqs), bcs=bcs)


def _parse_boundaries(
    bcs: list[Equation], v: VariableMap, config: PDEBaseConfig
) -> tuple[BoundaryMap, dict[sp.Symbol, list[int]]]:
    """Classify and assemble the boundary equations against ``v``."""
    bcorders = {x: d_orders(x, bcs) for x in v.all_ivs()}
    classifier = BoundaryClassifier(v, orders=bcorders, config=config.classification)
    bmap = BoundaryMap.assemble(classifier.classify_all(bcs), v)
    log_boundary_summary(logger, bmap)
    return bmap, bcorders


def _check_boundarymap(bmap: BoundaryMap, v: VariableMap, hooks: DiscretizationHooks, config: PDEBaseConfig) -> None:
    hooks.check_boundarymap(bmap, v)
    if config.validate_boundaries:
        EdgeCoverageValidator().check(bmap, v)
