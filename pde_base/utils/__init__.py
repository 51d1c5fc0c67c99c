"""Shared utilities: error taxonomy and logging."""

from .exceptions import (
    DomainResolutionError,
    PDEBaseError,
    SignatureInconsistencyError,
    UnclassifiableBoundaryError,
    UnclassifiableReason,
    ValidationError,
)
from .pde_logging import configure_logging, get_logger

__all__ = [
    "DomainResolutionError",
    "PDEBaseError",
    "SignatureInconsistencyError",
    "UnclassifiableBoundaryError",
    "UnclassifiableReason",
    "ValidationError",
    "configure_logging",
    "get_logger",
]
