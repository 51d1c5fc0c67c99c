"""
Hook composition.

Utilities for combining several backend hooks into one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import DiscretizationHooks

if TYPE_CHECKING:
    import sympy as sp

    from pde_base.boundary import BoundaryMap
    from pde_base.core import PDESystem, VariableMap
    from pde_base.discretization import ParsedSystem


class MultiHook(DiscretizationHooks):
    """
    Compose multiple hooks into one.

    Example:
        combined = MultiHook(
            TimeHook(t),
            ValidatorHook(EdgeCoverageValidator()),
        )

        parsed = parse_pde_system(pdesys, hooks=combined)
    """

    def __init__(self, *hooks: DiscretizationHooks):
        self.hooks = list(hooks)

    def add_hook(self, hook: DiscretizationHooks) -> None:
        """Add a hook to the composition."""
        self.hooks.append(hook)

    def remove_hook(self, hook: DiscretizationHooks) -> bool:
        """Remove a hook from the composition. Returns True if found and removed."""
        try:
            self.hooks.remove(hook)
            return True
        except ValueError:
            return False

    def get_time(self) -> sp.Symbol | None:
        """First hook to name a time coordinate wins."""
        for hook in self.hooks:
            time = hook.get_time()
            if time is not None:
                return time
        return None

    def interface_errors(self, pdesys: PDESystem, v: VariableMap) -> None:
        for hook in self.hooks:
            hook.interface_errors(pdesys, v)

    def check_boundarymap(self, bmap: BoundaryMap, v: VariableMap) -> None:
        super().check_boundarymap(bmap, v)
        for hook in self.hooks:
            hook.check_boundarymap(bmap, v)

    def should_transform(self, pdesys: PDESystem, bmap: BoundaryMap) -> bool:
        return any(hook.should_transform(pdesys, bmap) for hook in self.hooks)

    def transform_pde_system(self, v: VariableMap, bmap: BoundaryMap, pdesys: PDESystem) -> PDESystem | None:
        """
        Run the transform of every hook that asks for one, in order.

        Each transform sees the system produced by the previous one.
        """
        transformed = None
        for hook in self.hooks:
            current = transformed if transformed is not None else pdesys
            if hook.should_transform(current, bmap):
                result = hook.transform_pde_system(v, bmap, current)
                if result is not None:
                    transformed = result
        return transformed

    def on_parse_end(self, parsed: ParsedSystem) -> ParsedSystem:
        """Execute all hooks' on_parse_end methods in sequence."""
        for hook in self.hooks:
            parsed = hook.on_parse_end(parsed)
        return parsed


class ValidatorHook(DiscretizationHooks):
    """
    Hook whose only job is to run a boundary-map validation strategy.

    Example:
        hooks = ValidatorHook(EdgeCoverageValidator())
    """

    def __init__(self, validator):
        self.validator = validator


class TimeHook(DiscretizationHooks):
    """Hook that names the time coordinate."""

    def __init__(self, time):
        self.time = time

    def get_time(self):
        return self.time
