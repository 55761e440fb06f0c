"""
Validation Module for TBM Link Bench

Provides parameter range clamping, physical domain checks and YAML
config validation for the link budget.
"""

from __future__ import annotations

from tbm_link.validation.input_validators import (
    ConfigValidationResult,
    ParameterValidationResult,
    clamp_value,
    validate_config_file,
    validate_parameters,
)

__all__ = [
    "ParameterValidationResult",
    "ConfigValidationResult",
    "clamp_value",
    "validate_parameters",
    "validate_config_file",
]
