"""
Unit tests for the pydantic configuration models in pde_base/config/core.py
"""

import pytest
from pydantic import ValidationError

from pde_base.config import (
    ClassificationConfig,
    LoggingConfig,
    PDEBaseConfig,
    create_default_config,
    create_strict_config,
)
from pde_base.utils.pde_logging import PDELogger, configure_logging


class TestClassificationConfig:
    def test_default_values(self):
        config = ClassificationConfig()
        assert config.atol == 1e-10
        assert config.rtol == 1e-9
        assert config.min_domain_width == 1e-8

    def test_parameter_validation_ranges(self):
        with pytest.raises(ValidationError) as exc_info:
            ClassificationConfig(atol=0.0)
        assert "greater than 0" in str(exc_info.value)

        with pytest.raises(ValidationError):
            ClassificationConfig(rtol=-1e-3)

        with pytest.raises(ValidationError):
            ClassificationConfig(rtol=1.0)

        with pytest.raises(ValidationError):
            ClassificationConfig(min_domain_width=0.0)

    def test_width_must_exceed_twice_atol(self):
        with pytest.raises(ValidationError, match="must exceed twice atol"):
            ClassificationConfig(atol=1e-3, min_domain_width=1e-3)

    def test_config_is_frozen(self):
        config = ClassificationConfig()
        with pytest.raises(ValidationError):
            config.atol = 1e-4


class TestLoggingConfig:
    def test_default_values(self):
        config = LoggingConfig()
        assert config.level == "WARNING"
        assert config.use_colors is True
        assert config.include_location is False

    def test_invalid_level(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level="VERBOSE")


class TestPDEBaseConfig:
    def test_factories(self):
        default = create_default_config()
        assert default.validate_boundaries is False
        assert default.classification == ClassificationConfig()

        strict = create_strict_config()
        assert strict.validate_boundaries is True
        assert strict.classification.atol == 1e-12
        assert strict.classification.rtol == 0.0

    def test_nested_dict_construction(self):
        config = PDEBaseConfig(classification={"atol": 1e-6, "min_domain_width": 1e-4}, validate_boundaries=True)
        assert config.classification.atol == 1e-6
        assert config.validate_boundaries

    def test_apply_logging(self):
        config = PDEBaseConfig(logging=LoggingConfig(level="DEBUG", use_colors=False))
        try:
            config.apply_logging()
            assert PDELogger._log_level == 10
            assert PDELogger._use_colors is False
        finally:
            configure_logging(level="WARNING")
