"""
Link Presets for TBM Link Bench

Pre-configured ground and antenna scenarios for common tunnelling conditions.
Each preset pairs a display name and description with a complete
ParameterSet.

Usage:
    from tbm_link.presets import BASELINE_CLAY, get_preset

    # Use preset directly
    params = BASELINE_CLAY["parameters"]

    # Or load by name
    params = get_preset("baseline_clay")
"""

from __future__ import annotations

from typing import Any

from tbm_link.physics.link_budget import ParameterSet

# =============================================================================
# Preset Definitions
# =============================================================================


BASELINE_CLAY: dict[str, Any] = {
    "name": "Baseline Wet Clay",
    "description": (
        "Reference design: 25 kHz carrier through 1.5 m of saturated clay "
        "muck, 30 cm loops, AWG 18, single 18650 cell."
    ),
    "parameters": ParameterSet(),
}


SALINE_MUCK: dict[str, Any] = {
    "name": "Saline Groundwater",
    "description": (
        "High-conductivity spoil below the water table. Lower carrier keeps "
        "the skin depth above the gap width."
    ),
    "parameters": ParameterSet(
        ground_conductivity=2.0,
        carrier_frequency=10_000.0,
        tx_current=1.0,
        distance=1.5,
        tx_loop_diameter=40.0,
        rx_loop_diameter=50.0,
        tx_turns=25,
        rx_turns=40,
        wire_gauge=16,
    ),
}


DRY_SAND: dict[str, Any] = {
    "name": "Dry Sand, Long Gap",
    "description": (
        "Low-loss ground with the receiver mounted far back on the shield. "
        "Spreading loss (1/d^3) dominates over muck attenuation."
    ),
    "parameters": ParameterSet(
        ground_conductivity=0.05,
        carrier_frequency=40_000.0,
        distance=3.0,
        tx_loop_diameter=50.0,
        rx_loop_diameter=60.0,
        tx_turns=30,
        rx_turns=60,
    ),
}


LOW_POWER: dict[str, Any] = {
    "name": "Low-Power Endurance",
    "description": (
        "Reduced drive current for battery life. Thin AWG 22 wire keeps "
        "the loops light at the cost of Q."
    ),
    "parameters": ParameterSet(
        tx_current=0.1,
        distance=1.0,
        wire_gauge=22,
        battery_mah=7000.0,
    ),
}


# =============================================================================
# Preset Registry
# =============================================================================


PRESETS: dict[str, dict[str, Any]] = {
    "baseline_clay": BASELINE_CLAY,
    "saline_muck": SALINE_MUCK,
    "dry_sand": DRY_SAND,
    "low_power": LOW_POWER,
}


def list_presets() -> list[str]:
    """
    List all available preset names.

    Examples
    --------
    >>> list_presets()
    ['baseline_clay', 'saline_muck', 'dry_sand', 'low_power']
    """
    return list(PRESETS.keys())


def get_preset(name: str) -> ParameterSet:
    """
    Get a preset's parameters by name.

    Parameters
    ----------
    name : str
        Preset name (case-insensitive, spaces and hyphens allowed).

    Returns
    -------
    ParameterSet
        Preset parameters. ParameterSet is frozen, so callers cannot
        modify the registry through it.

    Raises
    ------
    KeyError
        If preset name not found.

    Examples
    --------
    >>> get_preset("Saline Muck").ground_conductivity
    2.0
    """
    normalized = name.lower().replace(" ", "_").replace("-", "_")

    if normalized not in PRESETS:
        available = ", ".join(list_presets())
        raise KeyError(f"Preset '{name}' not found. Available presets: {available}")

    return PRESETS[normalized]["parameters"]


def get_preset_names_and_descriptions() -> list[tuple[str, str, str]]:
    """
    Get all preset names with their display names and descriptions.

    Returns
    -------
    list[tuple[str, str, str]]
        List of (key, display_name, description) tuples.
    """
    return [(key, preset["name"], preset["description"]) for key, preset in PRESETS.items()]
