"""
Hooks system for discretization backends.

Basic Usage:
    from pde_base.hooks import DiscretizationHooks

    class MyBackendHooks(DiscretizationHooks):
        def interface_errors(self, pdesys, v): ...

    parsed = parse_pde_system(pdesys, hooks=MyBackendHooks())

Composition:
    from pde_base.hooks import MultiHook, TimeHook, ValidatorHook

    hooks = MultiHook(TimeHook(t), ValidatorHook(EdgeCoverageValidator()))
"""

from .base import DiscretizationHooks
from .composition import MultiHook, TimeHook, ValidatorHook

__all__ = ["DiscretizationHooks", "MultiHook", "TimeHook", "ValidatorHook"]
