"""
Core configuration classes.

Configurations specify HOW boundary conditions are matched and checked
(tolerances, validation strictness, logging), not WHAT problem is parsed
(that is a PDESystem instance).
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ClassificationConfig(BaseModel):
    """
    Tolerances used when matching fixed coordinate values against domain bounds.

    Attributes
    ----------
    atol : float
        Absolute tolerance for bound matching (default: 1e-10)
    rtol : float
        Relative tolerance for bound matching (default: 1e-9)
    min_domain_width : float
        Domains narrower than this are rejected, so that a fixed value can never
        lie within tolerance of both bounds (default: 1e-8)
    """

    atol: float = Field(1e-10, gt=0.0, description="Absolute tolerance for bound matching")
    rtol: float = Field(1e-9, ge=0.0, lt=1.0, description="Relative tolerance for bound matching")
    min_domain_width: float = Field(1e-8, gt=0.0, description="Smallest accepted domain width")

    @model_validator(mode="after")
    def validate_width_exceeds_tolerance(self) -> ClassificationConfig:
        """A domain must be wide enough that its two bounds are distinguishable."""
        if self.min_domain_width <= 2 * self.atol:
            raise ValueError(
                f"min_domain_width ({self.min_domain_width:.2e}) must exceed twice atol ({self.atol:.2e})"
            )
        return self

    model_config = ConfigDict(validate_assignment=True, frozen=True)


class LoggingConfig(BaseModel):
    """
    Configuration for logging.

    Attributes
    ----------
    level : Literal["DEBUG", "INFO", "WARNING", "ERROR"]
        Logging level (default: WARNING)
    use_colors : bool
        Colored console output (default: True)
    include_location : bool
        Append file:line to every record (default: False)
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    use_colors: bool = True
    include_location: bool = False


class PDEBaseConfig(BaseModel):
    """
    Top-level configuration for parsing a PDE system.

    Attributes
    ----------
    classification : ClassificationConfig
        Bound-matching tolerances
    logging : LoggingConfig
        Logging settings applied by ``apply_logging()``
    validate_boundaries : bool
        Require every spatial (function, coordinate) pair to be closed by a
        lower and an upper edge condition or an interface (default: False)
    """

    classification: ClassificationConfig = Field(default_factory=ClassificationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    validate_boundaries: bool = False

    def apply_logging(self) -> None:
        """Push the logging section into the global logger configuration."""
        from pde_base.utils.pde_logging import configure_logging

        configure_logging(
            level=self.logging.level,
            use_colors=self.logging.use_colors,
            include_location=self.logging.include_location,
        )


def create_default_config() -> PDEBaseConfig:
    """Default tolerances, no coverage validation."""
    return PDEBaseConfig()


def create_strict_config() -> PDEBaseConfig:
    """Tight tolerances and edge-coverage validation of every boundary map."""
    return PDEBaseConfig(
        classification=ClassificationConfig(atol=1e-12, rtol=0.0, min_domain_width=1e-6),
        validate_boundaries=True,
    )
