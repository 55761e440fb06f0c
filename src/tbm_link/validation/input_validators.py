"""
Input Validators for TBM Link Bench

Provides robust validation for:
- Link parameter ranges (clamping to the control limits)
- Physical domain checks (non-positive conductivity, frequency, distance)
- YAML configuration file parsing

These validators give the control layer readable feedback instead of a
ValueError from deep inside the link budget.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from tbm_link.physics.constants import PARAMETER_RANGES
from tbm_link.physics.link_budget import ParameterSet
from tbm_link.physics.wire_table import SUPPORTED_GAUGES, is_supported_gauge

log = logging.getLogger(__name__)

# Fields whose value must stay an integer after clamping
_INTEGER_FIELDS = {"tx_turns", "rx_turns", "wire_gauge"}

# Fields that feed a denominator or logarithm in the link budget
_DOMAIN_FIELDS = (
    "ground_conductivity",
    "carrier_frequency",
    "distance",
    "tx_current",
    "tx_loop_diameter",
    "rx_loop_diameter",
    "tx_turns",
    "rx_turns",
    "battery_mah",
)


# =============================================================================
# Validation Result Types
# =============================================================================


@dataclass
class ParameterValidationResult:
    """Result of link parameter validation.

    Attributes
    ----------
    is_valid : bool
        True if `parameters` is safe to pass to evaluate().
    parameters : ParameterSet
        The validated parameters (clamped copy when clamping was enabled).
    clamped_fields : list[str]
        Names of fields that were moved into range.
    warnings : list[str]
        Non-fatal warnings (e.g., clamped values, gauge fallback).
    errors : list[str]
        Fatal errors (e.g., zero conductivity without clamping).
    recovery_suggestions : list[str]
        Actionable suggestions for fixing issues.
    """

    is_valid: bool
    parameters: ParameterSet
    clamped_fields: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    recovery_suggestions: list[str] = field(default_factory=list)


@dataclass
class ConfigValidationResult:
    """Result of YAML configuration file validation.

    Attributes
    ----------
    is_valid : bool
        True if config loaded and validated successfully.
    config : dict | None
        Loaded configuration (None if load failed).
    file_path : Path | None
        Path to the config file (None if using defaults).
    warnings : list[str]
        Non-fatal warnings (e.g., missing optional fields).
    errors : list[str]
        Fatal errors (e.g., parse failures).
    recovery_suggestions : list[str]
        Actionable suggestions for fixing issues.
    """

    is_valid: bool
    config: dict[str, Any] | None
    file_path: Path | None
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    recovery_suggestions: list[str] = field(default_factory=list)


# =============================================================================
# Parameter Validation
# =============================================================================


def clamp_value(name: str, value: float) -> float:
    """
    Clamp one parameter into its control range.

    Integer fields are rounded to the nearest whole value first. Fields
    without a declared range are returned unchanged.
    """
    if name not in PARAMETER_RANGES:
        return value

    low, high = PARAMETER_RANGES[name]
    clamped = min(max(value, low), high)

    if name in _INTEGER_FIELDS:
        return int(round(clamped))
    return float(clamped)


def validate_parameters(
    params: ParameterSet,
    clamp: bool = True,
) -> ParameterValidationResult:
    """
    Validate a ParameterSet against the control ranges and physical domain.

    With clamp=True (the control-layer default) every out-of-range field is
    pulled to the nearest range limit and reported as a warning, so the
    returned parameters are always safe to evaluate. With clamp=False,
    out-of-range values are warnings and domain violations are errors.

    Parameters
    ----------
    params : ParameterSet
        Parameters to validate.
    clamp : bool, optional
        Clamp out-of-range values into PARAMETER_RANGES. Default True.

    Returns
    -------
    ParameterValidationResult
        Validation result with the (possibly clamped) parameters.

    Examples
    --------
    >>> result = validate_parameters(ParameterSet(distance=0.0))
    >>> result.is_valid, result.parameters.distance
    (True, 0.5)

    >>> result = validate_parameters(ParameterSet(distance=0.0), clamp=False)
    >>> result.is_valid
    False
    >>> result.errors
    ['DOMAIN ERROR: ...']
    """
    warnings = []
    errors = []
    suggestions = []
    clamped_fields = []
    updates: dict[str, Any] = {}

    for f in fields(params):
        name = f.name
        value = getattr(params, name)

        if name == "wire_gauge":
            if not is_supported_gauge(value):
                warnings.append(
                    f"GAUGE FALLBACK: AWG {value} is not in {list(SUPPORTED_GAUGES)}. "
                    "AWG 18 wire properties will be used."
                )
            continue

        if not isinstance(value, (int, float)) or not math.isfinite(value):
            errors.append(f"TYPE ERROR: {name}={value!r} is not a finite number.")
            suggestions.append(f"Set {name} to a number in {PARAMETER_RANGES.get(name)}.")
            continue

        if name in _INTEGER_FIELDS and value != int(value):
            warnings.append(f"ROUNDING: {name}={value} rounded to {int(round(value))}.")
            updates[name] = int(round(value))
            value = updates[name]

        low, high = PARAMETER_RANGES[name]
        in_range = low <= value <= high

        if clamp:
            if not in_range:
                new_value = clamp_value(name, value)
                warnings.append(
                    f"RANGE WARNING: {name}={value} is outside [{low}, {high}]. "
                    f"Clamped to {new_value}."
                )
                updates[name] = new_value
                clamped_fields.append(name)
            continue

        if name in _DOMAIN_FIELDS and value <= 0:
            errors.append(
                f"DOMAIN ERROR: {name}={value} must be strictly positive; "
                "the link budget divides by it."
            )
            suggestions.append(f"Set {name} within [{low}, {high}] or validate with clamp=True.")
        elif not in_range:
            warnings.append(
                f"RANGE WARNING: {name}={value} is outside expected range [{low}, {high}]."
            )

    validated = replace(params, **updates) if updates else params

    if clamped_fields:
        log.warning("Clamped link parameters: %s", ", ".join(clamped_fields))

    return ParameterValidationResult(
        is_valid=len(errors) == 0,
        parameters=validated,
        clamped_fields=clamped_fields,
        warnings=warnings,
        errors=errors,
        recovery_suggestions=suggestions,
    )


# =============================================================================
# Configuration File Validation
# =============================================================================

# Required sections in config
REQUIRED_CONFIG_SECTIONS = ["link", "loops", "power"]

# Type specifications for validation
CONFIG_TYPE_SPECS = {
    "link": {
        "ground_conductivity_s_m": (float, *PARAMETER_RANGES["ground_conductivity"]),
        "carrier_frequency_hz": (float, *PARAMETER_RANGES["carrier_frequency"]),
        "tx_current_a": (float, *PARAMETER_RANGES["tx_current"]),
        "distance_m": (float, *PARAMETER_RANGES["distance"]),
        "bit_rate_bps": (float, *PARAMETER_RANGES["bit_rate"]),
    },
    "loops": {
        "tx_diameter_cm": (float, *PARAMETER_RANGES["tx_loop_diameter"]),
        "rx_diameter_cm": (float, *PARAMETER_RANGES["rx_loop_diameter"]),
        "tx_turns": (int, *PARAMETER_RANGES["tx_turns"]),
        "rx_turns": (int, *PARAMETER_RANGES["rx_turns"]),
        "wire_gauge_awg": (int, min(SUPPORTED_GAUGES), max(SUPPORTED_GAUGES)),
    },
    "power": {
        "battery_mah": (float, *PARAMETER_RANGES["battery_mah"]),
    },
    "simulation": {
        "tick_rate_hz": (float, 1.0, 120.0),
    },
}


def validate_config_file(
    config_path: Path | str | None = None,
    strict: bool = False,
) -> ConfigValidationResult:
    """
    Load and validate YAML configuration file.

    Provides graceful error handling with helpful messages for:
    - Missing files (falls back to defaults)
    - Malformed YAML (syntax errors)
    - Invalid parameter values (type/range checks)

    Parameters
    ----------
    config_path : Path or str, optional
        Path to YAML config file. If None, uses default_link.yaml.
    strict : bool
        If True, treat warnings as errors. Default False.

    Returns
    -------
    ConfigValidationResult
        Validation result with loaded config and any issues found.

    Examples
    --------
    >>> result = validate_config_file("nonexistent.yaml")
    >>> result.is_valid
    True  # Falls back to defaults
    >>> len(result.warnings) > 0
    True
    """
    from tbm_link.config import DEFAULT_CONFIG_PATH, get_default_config

    warnings = []
    errors = []
    suggestions = []

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    else:
        config_path = Path(config_path)

    config = None
    file_exists = config_path.exists()

    if not file_exists:
        warnings.append(
            f"CONFIG FILE NOT FOUND: '{config_path}' does not exist. "
            "Using built-in defaults."
        )
        suggestions.append(
            f"Create config file at '{config_path}' or use load_config() without path."
        )
        config = get_default_config()
    else:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
            # Empty YAML file loads as None
            if config is None:
                warnings.append(
                    f"CONFIG FILE EMPTY: '{config_path}' contains no data. "
                    "Using built-in defaults."
                )
                config = get_default_config()
        except yaml.YAMLError as e:
            errors.append(f"YAML PARSE ERROR in '{config_path}': {str(e)}")
            suggestions.append(
                "Check YAML syntax: proper indentation (2 spaces), "
                "colons after keys, no tabs."
            )
            config = get_default_config()
        except IOError as e:
            errors.append(f"FILE READ ERROR for '{config_path}': {str(e)}")
            suggestions.append("Check file permissions and path.")
            config = get_default_config()

    if not isinstance(config, dict):
        errors.append(
            f"STRUCTURE ERROR: '{config_path}' must contain a mapping of sections, "
            f"got {type(config).__name__}."
        )
        config = get_default_config()

    defaults = get_default_config()

    for section in REQUIRED_CONFIG_SECTIONS:
        if config.get(section) is None:
            if strict:
                errors.append(f"MISSING REQUIRED SECTION: '{section}' not found in config.")
            else:
                warnings.append(f"MISSING SECTION: '{section}' not found. Using defaults.")
            config[section] = defaults[section]

    for section in CONFIG_TYPE_SPECS:
        if section in config and not isinstance(config[section], dict):
            errors.append(
                f"STRUCTURE ERROR: section '{section}' must be a mapping, "
                f"got {type(config[section]).__name__}."
            )
            suggestions.append(f"Write '{section}:' followed by indented 'key: value' lines.")
            config[section] = defaults[section]

    for section, specs in CONFIG_TYPE_SPECS.items():
        if not isinstance(config.get(section), dict):
            continue
        for param, (expected_type, min_val, max_val) in specs.items():
            if param not in config[section]:
                continue
            value = config[section][param]

            accepted = (int, float) if expected_type is float else (int,)
            if isinstance(value, bool) or not isinstance(value, accepted):
                message = (
                    f"{section}.{param} should be {expected_type.__name__}, "
                    f"got {type(value).__name__}."
                )
                if strict:
                    errors.append(f"TYPE ERROR: {message}")
                    continue
                warnings.append(f"TYPE WARNING: {message} Attempting conversion.")
                try:
                    value = expected_type(value)
                    config[section][param] = value
                except (ValueError, TypeError):
                    errors.append(
                        f"CONVERSION FAILED: Cannot convert {section}.{param} "
                        f"value '{value}' to {expected_type.__name__}."
                    )
                    continue

            if value < min_val or value > max_val:
                warnings.append(
                    f"RANGE WARNING: {section}.{param}={value} is outside "
                    f"expected range [{min_val}, {max_val}]."
                )

    is_valid = len(errors) == 0
    if strict:
        is_valid = is_valid and len(warnings) == 0

    return ConfigValidationResult(
        is_valid=is_valid,
        config=config,
        file_path=config_path if file_exists else None,
        warnings=warnings,
        errors=errors,
        recovery_suggestions=suggestions,
    )


# =============================================================================
# Convenience Functions
# =============================================================================


def validate_all(
    params: ParameterSet | None = None,
    config_path: Path | str | None = None,
    clamp: bool | None = None,
) -> dict[str, Any]:
    """
    Validate a config file and the parameters built from it.

    Parameters are only built from the config when the config itself is
    valid; otherwise the defaults are validated and "all_valid" is False.

    Parameters
    ----------
    params : ParameterSet, optional
        Parameters to validate. If None, they are built from the config.
    config_path : Path or str, optional
        Config file path.
    clamp : bool, optional
        Passed to validate_parameters(). If None, uses the config's
        simulation.clamp_parameters setting.

    Returns
    -------
    dict
        Dictionary with "config" and "parameters" results and an
        "all_valid" boolean.
    """
    from tbm_link.config import parameters_from_config, simulation_settings

    config_result = validate_config_file(config_path)
    if clamp is None:
        clamp = simulation_settings(config_result.config)["clamp_parameters"]

    if params is None:
        if config_result.is_valid:
            params = parameters_from_config(config_result.config)
        else:
            log.warning("Config is invalid; validating default parameters instead")
            params = ParameterSet()
    parameter_result = validate_parameters(params, clamp=clamp)

    return {
        "config": config_result,
        "parameters": parameter_result,
        "all_valid": config_result.is_valid and parameter_result.is_valid,
    }
