"""
Discretization backend hooks.

A discretization backend plugs into ``parse_pde_system`` by subclassing
``DiscretizationHooks`` and overriding only the steps it cares about. Every
method has a no-op default, so an empty subclass accepts every system.
"""

from __future__ import annotations

from abc import ABC
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import sympy as sp

    from pde_base.boundary import BoundaryMap, BoundaryMapValidator
    from pde_base.core import PDESystem, VariableMap
    from pde_base.discretization import ParsedSystem


class DiscretizationHooks(ABC):
    """
    Base class for discretization backend hooks.

    Override any method to customize parsing. All methods are optional.

    Attributes:
        validator: Optional boundary-map validation strategy used by the
            default ``check_boundarymap``

    Example:
        class FiniteDifferenceHooks(DiscretizationHooks):
            def get_time(self):
                return t

            def interface_errors(self, pdesys, v):
                if len(v.spatial) > 3:
                    raise ValidationError("at most three spatial dimensions")

        parsed = parse_pde_system(pdesys, hooks=FiniteDifferenceHooks())
    """

    validator: BoundaryMapValidator | None = None

    def get_time(self) -> sp.Symbol | None:
        """
        Time coordinate the backend discretizes in, if any.

        Returns:
            The time symbol, or None to use the one declared on the system
        """
        return None

    def interface_errors(self, pdesys: PDESystem, v: VariableMap) -> None:
        """
        Check that the backend can discretize the system at all.

        Called after the variable map is built and before any boundary is
        classified. Raise to reject the system.
        """
        pass

    def check_boundarymap(self, bmap: BoundaryMap, v: VariableMap) -> None:
        """
        Check that the backend supports the assembled boundary map.

        The default delegates to ``self.validator`` when one is set.
        """
        if self.validator is not None:
            self.validator.check(bmap, v)

    def should_transform(self, pdesys: PDESystem, bmap: BoundaryMap) -> bool:
        """Whether ``transform_pde_system`` should run for this system."""
        return False

    def transform_pde_system(self, v: VariableMap, bmap: BoundaryMap, pdesys: PDESystem) -> PDESystem | None:
        """
        Rewrite the system into a form the backend supports.

        May register auxiliary unknowns on ``v`` with ``register_unknown``.

        Returns:
            The transformed system, or None to keep ``pdesys``
        """
        return None

    def on_parse_end(self, parsed: ParsedSystem) -> ParsedSystem:
        """
        Called just before ``parse_pde_system`` returns.

        Returns:
            Potentially modified parse result
        """
        return parsed
