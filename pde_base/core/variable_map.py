"""
Variable map: canonical metadata about the unknowns of one discretization run.

The map records every unknown function, its coordinate signature, the
spatial coordinates in discovery order, the optional time coordinate, the
resolved domain of every coordinate in use and a bijective table between
spatial coordinates and dimension numbers ``1..n``.

Discovery:
    Applications of the declared function tags are collected from the
    governing equations and then the boundary equations, left side before
    right side, in pre-order. An application whose arguments are all
    coordinates is *genuine* and defines the function's signature; an
    application with at least one numeric argument is *boundary-evaluated*.
    Any other argument (``u(2*x)``, ``u(t, L)`` with an undeclared ``L``) is
    rejected.

The map is read-only once built. ``register_unknown`` is the only mutation:
it appends an auxiliary unknown introduced by a later pipeline stage and
never renumbers existing entries. Callers must not run it concurrently with
any read of the map.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

import numpy as np
import sympy as sp

from pde_base.config.core import ClassificationConfig
from pde_base.utils.exceptions import DomainResolutionError, SignatureInconsistencyError
from pde_base.utils.pde_logging import get_logger

from .equations import flatten_equations
from .symbolic_utils import function_tag, get_all_depvars, is_coordinate, is_numeric, remove

if TYPE_CHECKING:
    from .pde_system import PDESystem

logger = get_logger(__name__)


class VariableMap:
    """
    Unknowns, coordinates, domains and index tables of a PDE system.

    Attributes:
        unknowns: Genuine applications of every unknown, in discovery order
        spatial: Spatial coordinates in discovery order (the dimension order)
        ps: Parameters
        time: Time coordinate, or None
        intervals: Coordinate -> ``(lower, upper)`` for every coordinate in use
        args: Function tag -> ordered coordinate signature
        depvar_ops: Declared function tags, then tags of registered auxiliary unknowns
        x2i_table: Spatial coordinate -> dimension number (1-based)
        i2x_table: Dimension number -> spatial coordinate
        replaced_vars: Renamed variables supplied by upstream preprocessing

    Examples:
        >>> v = VariableMap.from_pde_system(pdesys)
        >>> v.ivs(u(t, x))
        [x]
        >>> v.dimension_of(x), v.coordinate_of(1)
        (1, x)
    """

    def __init__(
        self,
        unknowns: list,
        spatial: list,
        ps: list,
        time: sp.Symbol | None,
        intervals: dict,
        args: dict,
        depvar_ops: list,
        x2i_table: dict,
        i2x_table: dict,
        replaced_vars: dict | None = None,
    ):
        self.unknowns = list(unknowns)
        self.spatial = list(spatial)
        self.ps = list(ps)
        self.time = time
        self.intervals = dict(intervals)
        self.args = dict(args)
        self.depvar_ops = list(depvar_ops)
        self.x2i_table = dict(x2i_table)
        self.i2x_table = dict(i2x_table)
        self.replaced_vars = dict(replaced_vars or {})

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_pde_system(
        cls,
        pdesys: PDESystem,
        time: sp.Symbol | None = None,
        replaced_vars: Mapping | None = None,
        config: ClassificationConfig | None = None,
    ) -> VariableMap:
        """
        Build the variable map of a declared PDE system.

        Args:
            pdesys: The declared problem
            time: Time coordinate; overrides ``pdesys.time`` when given
            replaced_vars: Renamed variables from upstream preprocessing
            config: Tolerances (``min_domain_width`` is used here)
        """
        return build_variable_map(
            eqs=pdesys.eqs,
            bcs=pdesys.bcs,
            depvar_ops=pdesys.depvar_ops,
            domain=pdesys.domain_table,
            time=time if time is not None else pdesys.time,
            ps=pdesys.ps,
            ivs=pdesys.ivs,
            replaced_vars=replaced_vars,
            config=config,
        )

    def register_unknown(self, app: sp.Basic) -> VariableMap:
        """
        Append an auxiliary unknown introduced by a later pipeline stage.

        Existing entries are never removed or renumbered. Registering a tag
        again with its current signature is a no-op.

        Args:
            app: Genuine application of the new unknown, e.g. ``w(t, x)``

        Returns:
            This map, for chaining

        Raises:
            SignatureInconsistencyError: If an argument is not a coordinate, or
                the tag is already registered with another signature
            DomainResolutionError: If an argument has no resolved domain
        """
        tag = function_tag(app)
        signature = tuple(app.args)
        if not all(is_coordinate(a) for a in signature):
            raise SignatureInconsistencyError(
                tag, [signature], reason="a registered unknown must be applied to coordinates only"
            )
        if tag in self.args:
            if self.args[tag] != signature:
                raise SignatureInconsistencyError(tag, [self.args[tag], signature])
            return self
        for x in signature:
            if x not in self.intervals:
                raise DomainResolutionError(x, reason="no domain declared")

        self.unknowns.append(app)
        self.args[tag] = signature
        self.depvar_ops.append(tag)
        logger.debug(f"Registered auxiliary unknown {app}")
        return self

    def extended(self, app: sp.Basic) -> VariableMap:
        """Copy of this map with ``app`` registered; this map is left untouched."""
        return copy.copy(self)._detach().register_unknown(app)

    def _detach(self) -> VariableMap:
        self.unknowns = list(self.unknowns)
        self.args = dict(self.args)
        self.depvar_ops = list(self.depvar_ops)
        return self

    # =========================================================================
    # Accessors
    # =========================================================================

    def depvars(self) -> list:
        """Genuine applications of all unknowns."""
        return self.unknowns

    def indvars(self) -> list:
        """Spatial coordinates in dimension order."""
        return self.spatial

    def all_ivs(self) -> list:
        """Spatial coordinates followed by time, when present."""
        return list(self.spatial) if self.time is None else [*self.spatial, self.time]

    def all_ivs_of(self, u) -> list:
        """Full signature of ``u`` (tag or application), time included."""
        return list(self.args[function_tag(u)])

    def ivs(self, u) -> list:
        """Signature of ``u`` without the time coordinate."""
        return remove(self.args[function_tag(u)], self.time)

    def ndims(self, u) -> int:
        return len(self.ivs(u))

    def depvar(self, u) -> sp.Basic:
        """Genuine application of ``u``, given its tag or any application of it."""
        tag = function_tag(u)
        return tag(*self.args[tag])

    def x2i(self, u, x) -> int | None:
        """Position (1-based) of ``x`` among the spatial arguments of ``u``."""
        spatial_args = self.ivs(u)
        return spatial_args.index(x) + 1 if x in spatial_args else None

    def dimension_of(self, x) -> int:
        """Global dimension number of a spatial coordinate."""
        return self.x2i_table[x]

    def coordinate_of(self, i: int) -> sp.Symbol:
        """Spatial coordinate of a global dimension number."""
        return self.i2x_table[i]

    def interval(self, x) -> tuple[float, float]:
        return self.intervals[x]

    def tspan(self) -> tuple[float, float] | None:
        return None if self.time is None else self.intervals[self.time]

    def axiesvals(self, u, index: Iterable[int]) -> list[tuple[sp.Symbol, float]]:
        """
        Edge coordinate values of ``u`` for an index tuple over its spatial arguments.

        Index 1 selects the lower bound of that coordinate, anything else the upper one.
        """
        index = tuple(index)
        return [
            (x, self.intervals[x][0] if index[self.x2i(u, x) - 1] == 1 else self.intervals[x][1])
            for x in self.ivs(u)
        ]

    # =========================================================================
    # Comparison and display
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VariableMap):
            return NotImplemented
        return (
            self.unknowns == other.unknowns
            and self.spatial == other.spatial
            and self.ps == other.ps
            and self.time == other.time
            and self.intervals == other.intervals
            and self.args == other.args
            and self.depvar_ops == other.depvar_ops
            and self.x2i_table == other.x2i_table
            and self.i2x_table == other.i2x_table
            and self.replaced_vars == other.replaced_vars
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"VariableMap(unknowns={self.unknowns}, spatial={self.spatial}, time={self.time})"


# =============================================================================
# Builder
# =============================================================================


def build_variable_map(
    eqs: Any,
    bcs: Any,
    depvar_ops: Iterable,
    domain: Mapping,
    time: sp.Symbol | None = None,
    ps: Iterable | None = None,
    ivs: Iterable | None = None,
    replaced_vars: Mapping | None = None,
    config: ClassificationConfig | None = None,
) -> VariableMap:
    """
    Build a VariableMap from raw declared lists.

    Args:
        eqs: Governing equations (nested lists are flattened)
        bcs: Boundary equations (nested lists are flattened, order kept)
        depvar_ops: Declared unknowns as tags or applications
        domain: Coordinate -> interval table
        time: Time coordinate, if any
        ps: Parameters
        ivs: Declared coordinates; when given, every coordinate in use must be one
        replaced_vars: Renamed variables from upstream preprocessing
        config: Tolerances (``min_domain_width`` is used here)

    Raises:
        DomainResolutionError: A coordinate in use has no valid finite domain
        SignatureInconsistencyError: A tag is used with incompatible arguments
    """
    config = config or ClassificationConfig()
    eqs = flatten_equations(eqs)
    bcs = flatten_equations(bcs)
    ops = list(dict.fromkeys(function_tag(d) for d in depvar_ops))

    applications = get_all_depvars([*eqs, *bcs], ops)

    genuine: list = []
    evaluated: list = []
    for app in applications:
        invalid = [a for a in app.args if not (is_coordinate(a) or is_numeric(a))]
        if invalid:
            raise SignatureInconsistencyError(
                app.func,
                [app.args],
                reason=f"arguments that are neither coordinates nor numbers: {invalid}",
            )
        if all(is_coordinate(a) for a in app.args):
            genuine.append(app)
        else:
            evaluated.append(app)

    args: dict = {}
    unknowns: list = []
    for app in genuine:
        tag, signature = app.func, tuple(app.args)
        if tag in args:
            if args[tag] != signature:
                raise SignatureInconsistencyError(tag, [args[tag], signature])
            continue
        args[tag] = signature
        unknowns.append(app)

    for app in evaluated:
        tag = app.func
        if tag in args and len(app.args) != len(args[tag]):
            raise SignatureInconsistencyError(
                tag, [args[tag], app.args], reason="a boundary application with the wrong number of arguments"
            )

    allivs = list(dict.fromkeys(a for app in applications for a in app.args if is_coordinate(a)))
    if time is not None and time not in allivs:
        allivs.append(time)
    spatial = remove(allivs, time)

    declared = None if ivs is None else set(ivs)
    domain = dict(domain)
    intervals = {}
    for x in allivs:
        if declared is not None and x not in declared:
            raise DomainResolutionError(x, reason="not a declared coordinate")
        intervals[x] = resolve_interval(x, domain.get(x), config)

    x2i_table = {x: i for i, x in enumerate(spatial, start=1)}
    i2x_table = {i: x for x, i in x2i_table.items()}

    variable_map = VariableMap(
        unknowns=unknowns,
        spatial=spatial,
        ps=list(ps or []),
        time=time,
        intervals=intervals,
        args=args,
        depvar_ops=ops,
        x2i_table=x2i_table,
        i2x_table=i2x_table,
        replaced_vars=replaced_vars,
    )
    logger.debug(
        f"Discovered {len(genuine)} genuine and {len(evaluated)} boundary-evaluated application(s); "
        f"spatial coordinates {spatial}, time {time}"
    )
    return variable_map


def resolve_interval(x: sp.Symbol, raw: Any, config: ClassificationConfig | None = None) -> tuple[float, float]:
    """
    Resolve a raw domain declaration to finite ``(lower, upper)`` floats.

    Accepts ``(lower, upper)`` pairs and interval objects exposing ``inf`` and
    ``sup`` (``sympy.Interval``).

    Raises:
        DomainResolutionError: Missing, non-numeric, infinite, inverted or too narrow domain
    """
    config = config or ClassificationConfig()
    if raw is None:
        raise DomainResolutionError(x, reason="no domain declared")

    if hasattr(raw, "inf") and hasattr(raw, "sup"):
        bounds = (raw.inf, raw.sup)
    elif isinstance(raw, (tuple, list)) and len(raw) == 2:
        bounds = tuple(raw)
    else:
        raise DomainResolutionError(x, reason=f"unrecognized domain declaration {raw!r}")

    try:
        lower, upper = (float(sp.sympify(b)) for b in bounds)
    except (TypeError, ValueError, sp.SympifyError) as exc:
        raise DomainResolutionError(x, reason="bounds must be numeric", bounds=bounds) from exc

    if not (np.isfinite(lower) and np.isfinite(upper)):
        raise DomainResolutionError(x, reason="bounds must be finite", bounds=bounds)
    if lower >= upper:
        raise DomainResolutionError(x, reason="lower bound must be below upper bound", bounds=bounds)
    if upper - lower < config.min_domain_width:
        raise DomainResolutionError(
            x, reason=f"domain width below min_domain_width ({config.min_domain_width:.1e})", bounds=bounds
        )
    return (lower, upper)
