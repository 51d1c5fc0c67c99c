"""
Exception classes for pde_base with structured context and user guidance.

Every error raised while building the variable map or classifying boundary
conditions is fatal to the current run. The classes below keep the offending
equation, coordinate or function as attributes so callers can locate the
faulty input, and format a readable message with a suggestion.
"""

from __future__ import annotations

from typing import Any


class PDEBaseError(Exception):
    """
    Base exception for pde_base errors with helpful context and suggestions.

    This exception class provides structured error information including:
    - Clear error description
    - Component context information
    - Suggested actions for resolution
    - Optional diagnostic data
    """

    def __init__(
        self,
        message: str,
        component: str | None = None,
        suggested_action: str | None = None,
        error_code: str | None = None,
        diagnostic_data: dict[str, Any] | None = None,
    ):
        self.message = message
        self.component = component or "pde_base"
        self.suggested_action = suggested_action
        self.error_code = error_code
        self.diagnostic_data = diagnostic_data or {}

        full_message = f"[{self.component}] {message}"

        if self.suggested_action:
            full_message += f"\nSuggestion: {self.suggested_action}"

        if self.error_code:
            full_message += f"\nError Code: {self.error_code}"

        if self.diagnostic_data:
            full_message += "\nDiagnostic Information:"
            for key, value in self.diagnostic_data.items():
                full_message += f"\n   - {key}: {value}"

        super().__init__(full_message)


class DomainResolutionError(PDEBaseError):
    """Raised when a coordinate in use has no declared, finite domain."""

    def __init__(
        self,
        coordinate: Any,
        reason: str = "no domain declared",
        bounds: tuple | None = None,
        component: str | None = None,
    ):
        self.coordinate = coordinate
        self.reason = reason
        self.bounds = bounds

        diagnostic_data = {"coordinate": str(coordinate), "reason": reason}
        if bounds is not None:
            diagnostic_data["bounds"] = str(bounds)

        message = f"Cannot resolve domain for coordinate '{coordinate}': {reason}"

        super().__init__(
            message=message,
            component=component or "VariableMapBuilder",
            suggested_action=_generate_domain_suggestions(coordinate, reason),
            error_code="DOMAIN_RESOLUTION",
            diagnostic_data=diagnostic_data,
        )


class SignatureInconsistencyError(PDEBaseError):
    """Raised when a function tag is used with incompatible argument lists."""

    def __init__(
        self,
        function: Any,
        signatures: list | tuple = (),
        reason: str | None = None,
        component: str | None = None,
    ):
        self.function = function
        self.signatures = tuple(tuple(s) for s in signatures)
        self.reason = reason or "incompatible coordinate signatures"

        diagnostic_data = {"function": str(function), "reason": self.reason}
        for i, signature in enumerate(self.signatures, start=1):
            diagnostic_data[f"signature_{i}"] = "(" + ", ".join(str(a) for a in signature) + ")"

        message = f"Function '{function}' has {self.reason}"

        super().__init__(
            message=message,
            component=component or "VariableMapBuilder",
            suggested_action=(
                f"Apply '{function}' to the same ordered coordinates in every equation; "
                "boundary applications may only replace coordinates by numeric values"
            ),
            error_code="SIGNATURE_INCONSISTENCY",
            diagnostic_data=diagnostic_data,
        )


class UnclassifiableReason:
    """Human-readable reasons attached to UnclassifiableBoundaryError."""

    NO_UNKNOWN = "references no unknown function evaluated on a boundary"
    INTERIOR = "interior condition: an unknown is applied to free coordinates only"
    NO_MATCHING_BOUND = "fixed value matches no domain bound"
    MULTIPLE_FIXED = "a single application fixes more than one coordinate"
    TOO_MANY_FUNCTIONS = "references more than two distinct unknown functions"
    TOO_MANY_POINTS = "references more than two distinct boundary points"
    FREE_MISMATCH = "free arguments do not match the function signature"
    UNKNOWN_SIGNATURE = "references a function with no registered signature"
    TIME_INTERFACE = "interface condition across the time coordinate"


class UnclassifiableBoundaryError(PDEBaseError):
    """Raised when a raw condition matches none of the classification rules."""

    def __init__(
        self,
        equation: Any,
        reason: str,
        details: dict[str, Any] | None = None,
        component: str | None = None,
    ):
        self.equation = equation
        self.reason = reason
        self.details = details or {}

        diagnostic_data = {"equation": str(equation), "reason": reason}
        diagnostic_data.update(self.details)

        message = f"Boundary condition '{equation}' could not be classified"

        super().__init__(
            message=message,
            component=component or "BoundaryClassifier",
            suggested_action=_generate_boundary_suggestions(reason),
            error_code="UNCLASSIFIABLE_BOUNDARY",
            diagnostic_data=diagnostic_data,
        )


class ValidationError(PDEBaseError):
    """Raised when a boundary-map validation strategy rejects the assembled map."""

    def __init__(
        self,
        message: str,
        component: str | None = None,
        suggested_action: str | None = None,
        diagnostic_data: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            component=component or "BoundaryMapValidator",
            suggested_action=suggested_action,
            error_code="BOUNDARY_VALIDATION",
            diagnostic_data=diagnostic_data,
        )


# Helper functions for generating specific suggestions


def _generate_domain_suggestions(coordinate: Any, reason: str) -> str:
    """Generate specific suggestions for domain resolution errors."""
    if "no domain" in reason:
        return f"Add an interval for '{coordinate}' to the domain table, e.g. {{{coordinate}: (0.0, 1.0)}}"
    if "finite" in reason:
        return f"Truncate the domain of '{coordinate}' to finite bounds"
    if "width" in reason:
        return f"Widen the domain of '{coordinate}' or lower min_domain_width in the classification config"
    if "lower" in reason:
        return f"Declare the domain of '{coordinate}' as (lower, upper) with lower < upper"
    return f"Check the domain declared for '{coordinate}'"


def _generate_boundary_suggestions(reason: str) -> str:
    """Generate specific suggestions for unclassifiable boundary conditions."""
    if reason == UnclassifiableReason.INTERIOR:
        return "Boundary conditions must evaluate the unknown at a domain bound, e.g. u(t, 0) instead of u(t, x)"
    if reason == UnclassifiableReason.NO_MATCHING_BOUND:
        return "Use a value equal to the lower or upper bound of the fixed coordinate's domain"
    if reason in (UnclassifiableReason.TOO_MANY_FUNCTIONS, UnclassifiableReason.TOO_MANY_POINTS):
        return "Split the condition so that each equation couples at most two boundary points"
    if reason == UnclassifiableReason.MULTIPLE_FIXED:
        return "Corner conditions are not supported; fix one coordinate per condition"
    return "Rewrite the condition in terms of unknowns evaluated at domain bounds"
