"""
Logging utilities for pde_base.

Usage:
    >>> from pde_base.utils.pde_logging import get_logger, configure_logging
    >>> configure_logging(level="DEBUG")
    >>> logger = get_logger(__name__)
    >>> logger.info("Parsing boundary conditions...")
"""

from __future__ import annotations

from .logger import (
    PDEFormatter,
    PDELogger,
    configure_logging,
    get_logger,
    log_boundary_summary,
    log_classification_error,
    log_validation_error,
    log_variable_map_summary,
)

__all__ = [
    "PDEFormatter",
    "PDELogger",
    "configure_logging",
    "get_logger",
    "log_boundary_summary",
    "log_classification_error",
    "log_validation_error",
    "log_variable_map_summary",
]
