"""
Configuration Management for TBM Link Bench

Loads link parameters from YAML config files with fallback to
hardcoded defaults in physics.constants.

Usage:
    from tbm_link.config import load_config, parameters_from_config

    cfg = load_config()  # Load default config
    cfg = load_config("configs/custom.yaml")  # Load custom config

    # Access parameters
    sigma = cfg["link"]["ground_conductivity_s_m"]
    params = parameters_from_config(cfg)
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from tbm_link.physics.link_budget import ParameterSet

log = logging.getLogger(__name__)

# File is at: src/tbm_link/config.py
# Project root: src/tbm_link -> src -> project_root
_THIS_FILE = Path(__file__)
PROJECT_ROOT = _THIS_FILE.parent.parent.parent

DEFAULT_CONFIG_PATH = PROJECT_ROOT / "configs" / "default_link.yaml"

# (section, key) in the YAML file for each ParameterSet field
PARAMETER_KEYS: dict[str, tuple[str, str]] = {
    "ground_conductivity": ("link", "ground_conductivity_s_m"),
    "carrier_frequency": ("link", "carrier_frequency_hz"),
    "tx_current": ("link", "tx_current_a"),
    "distance": ("link", "distance_m"),
    "bit_rate": ("link", "bit_rate_bps"),
    "tx_loop_diameter": ("loops", "tx_diameter_cm"),
    "rx_loop_diameter": ("loops", "rx_diameter_cm"),
    "tx_turns": ("loops", "tx_turns"),
    "rx_turns": ("loops", "rx_turns"),
    "wire_gauge": ("loops", "wire_gauge_awg"),
    "battery_mah": ("power", "battery_mah"),
}


def get_config_path(config_name: str = "default_link.yaml") -> Path:
    """
    Get the full path to a config file.

    Parameters
    ----------
    config_name : str
        Name of the config file (with or without .yaml extension).

    Returns
    -------
    Path
        Full path to the config file.
    """
    if not config_name.endswith(".yaml"):
        config_name = f"{config_name}.yaml"
    return PROJECT_ROOT / "configs" / config_name


def get_default_config() -> dict[str, Any]:
    """
    Return hardcoded default configuration.

    Used as fallback when config file is missing.
    """
    # Import here to avoid circular imports
    from tbm_link.physics.constants import (
        BATTERY_CAPACITY_MAH,
        CARRIER_FREQUENCY_HZ,
        CLOCK_TICK_RATE_HZ,
        DEFAULT_WIRE_GAUGE_AWG,
        MUCK_CONDUCTIVITY_S_M,
        RX_LOOP_DIAMETER_CM,
        RX_TURNS,
        SEPARATION_DISTANCE_M,
        TARGET_BIT_RATE_BPS,
        TX_CURRENT_A,
        TX_LOOP_DIAMETER_CM,
        TX_TURNS,
    )

    return {
        "link": {
            "ground_conductivity_s_m": MUCK_CONDUCTIVITY_S_M,
            "carrier_frequency_hz": CARRIER_FREQUENCY_HZ,
            "tx_current_a": TX_CURRENT_A,
            "distance_m": SEPARATION_DISTANCE_M,
            "bit_rate_bps": TARGET_BIT_RATE_BPS,
        },
        "loops": {
            "tx_diameter_cm": TX_LOOP_DIAMETER_CM,
            "rx_diameter_cm": RX_LOOP_DIAMETER_CM,
            "tx_turns": TX_TURNS,
            "rx_turns": RX_TURNS,
            "wire_gauge_awg": DEFAULT_WIRE_GAUGE_AWG,
        },
        "power": {
            "battery_mah": BATTERY_CAPACITY_MAH,
        },
        "simulation": {
            "tick_rate_hz": CLOCK_TICK_RATE_HZ,
            "start_running": True,
            "clamp_parameters": True,
        },
    }


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """
    Load configuration from YAML file with fallback to defaults.

    Parameters
    ----------
    config_path : str or Path, optional
        Path to YAML config file. If None, uses default_link.yaml.
        If file doesn't exist, falls back to hardcoded defaults.

    Returns
    -------
    dict
        Configuration dictionary.

    Raises
    ------
    None
        This function never raises; it gracefully falls back to defaults.

    Examples
    --------
    >>> cfg = load_config()
    >>> cfg["link"]["carrier_frequency_hz"]
    25000.0
    """
    config, errors = load_config_safe(config_path)
    for message in errors:
        log.debug(message)
    return config


def load_config_safe(
    config_path: str | Path | None = None,
) -> tuple[dict[str, Any], list[str]]:
    """
    Load configuration with detailed error reporting.

    Unlike load_config(), this function returns error messages
    for debugging and user feedback.

    Parameters
    ----------
    config_path : str or Path, optional
        Path to YAML config file.

    Returns
    -------
    tuple[dict, list[str]]
        (config_dict, error_messages). Config is always valid (defaults used on error).
        error_messages is empty if load succeeded.

    Examples
    --------
    >>> cfg, errors = load_config_safe("bad_config.yaml")
    >>> if errors:
    ...     print("Warnings:", errors)
    """
    errors = []

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        errors.append(f"Config file not found: {config_path}. Using defaults.")
        return get_default_config(), errors

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
        if config is None:
            errors.append(f"Config file is empty: {config_path}. Using defaults.")
            return get_default_config(), errors
        if not isinstance(config, dict):
            errors.append(
                f"Config file {config_path} must contain a mapping of sections, "
                f"got {type(config).__name__}. Using defaults."
            )
            return get_default_config(), errors
        return config, errors
    except yaml.YAMLError as e:
        errors.append(
            f"YAML parse error in {config_path}: {e}. "
            "Check indentation and syntax. Using defaults."
        )
        return get_default_config(), errors
    except IOError as e:
        errors.append(f"Cannot read {config_path}: {e}. Using defaults.")
        return get_default_config(), errors


def save_config(config: dict[str, Any], config_path: str | Path) -> None:
    """
    Save configuration to a YAML file.

    Parameters
    ----------
    config : dict
        Configuration dictionary.
    config_path : str or Path
        Output path for the YAML file.
    """
    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def parameters_from_config(config: dict[str, Any]) -> "ParameterSet":
    """
    Build a ParameterSet from a config dictionary.

    Missing sections or keys take the ParameterSet defaults. Integer fields
    (turns, wire gauge) are coerced to int. Sections that are not mappings
    and values that cannot be converted are skipped with a warning, so the
    field keeps its default. This function never raises on malformed data.

    Parameters
    ----------
    config : dict
        Configuration as returned by load_config().

    Returns
    -------
    ParameterSet
        Unvalidated parameters; pass through validate_parameters() before
        evaluating.

    Examples
    --------
    >>> parameters_from_config({"link": {"distance_m": "far"}}).distance
    1.5
    """
    from tbm_link.physics.link_budget import ParameterSet

    if not isinstance(config, dict):
        log.warning(
            "Config must be a mapping of sections, got %s. Using default parameters.",
            type(config).__name__,
        )
        return ParameterSet()

    int_fields = {"tx_turns", "rx_turns", "wire_gauge"}
    values: dict[str, Any] = {}

    for name, (section, key) in PARAMETER_KEYS.items():
        section_values = config.get(section)
        if section_values is None:
            continue
        if not isinstance(section_values, dict):
            log.warning("Config section '%s' is not a mapping; ignoring it", section)
            continue
        if key not in section_values:
            continue

        value = section_values[key]
        try:
            values[name] = int(value) if name in int_fields else float(value)
        except (TypeError, ValueError, OverflowError):
            log.warning(
                "Cannot convert %s.%s=%r; using default %s",
                section, key, value, name,
            )

    return ParameterSet(**values)


def simulation_settings(config: dict[str, Any]) -> dict[str, Any]:
    """
    Read the `simulation` section with defaults for missing or bad values.

    Parameters
    ----------
    config : dict
        Configuration as returned by load_config().

    Returns
    -------
    dict
        Keys tick_rate_hz (float > 0), start_running (bool) and
        clamp_parameters (bool).
    """
    settings = dict(get_default_config()["simulation"])
    section = config.get("simulation") if isinstance(config, dict) else None
    if section is None:
        return settings
    if not isinstance(section, dict):
        log.warning("Config section 'simulation' is not a mapping; ignoring it")
        return settings

    if "tick_rate_hz" in section:
        rate = section["tick_rate_hz"]
        if isinstance(rate, (int, float)) and not isinstance(rate, bool) and 0 < rate < math.inf:
            settings["tick_rate_hz"] = float(rate)
        else:
            log.warning(
                "Invalid simulation.tick_rate_hz=%r; using %s",
                rate, settings["tick_rate_hz"],
            )

    for key in ("start_running", "clamp_parameters"):
        if key not in section:
            continue
        if isinstance(section[key], bool):
            settings[key] = section[key]
        else:
            log.warning(
                "simulation.%s should be true or false, got %r; using %s",
                key, section[key], settings[key],
            )

    return settings


def config_from_parameters(params: "ParameterSet") -> dict[str, Any]:
    """
    Inverse of parameters_from_config(), on top of the default config.

    Parameters
    ----------
    params : ParameterSet
        Parameters to store.

    Returns
    -------
    dict
        Full configuration dictionary suitable for save_config().
    """
    config = get_default_config()
    for name, (section, key) in PARAMETER_KEYS.items():
        config[section][key] = getattr(params, name)
    return config
