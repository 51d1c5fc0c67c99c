"""Configuration models for pde_base."""

from .core import (
    ClassificationConfig,
    LoggingConfig,
    PDEBaseConfig,
    create_default_config,
    create_strict_config,
)

__all__ = [
    "ClassificationConfig",
    "LoggingConfig",
    "PDEBaseConfig",
    "create_default_config",
    "create_strict_config",
]
