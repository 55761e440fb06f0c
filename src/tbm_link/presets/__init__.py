"""
Link Presets for TBM Link Bench

Pre-configured ground and antenna scenarios.
"""

from __future__ import annotations

from tbm_link.presets.link_presets import (
    BASELINE_CLAY,
    DRY_SAND,
    LOW_POWER,
    PRESETS,
    SALINE_MUCK,
    get_preset,
    get_preset_names_and_descriptions,
    list_presets,
)

__all__ = [
    "BASELINE_CLAY",
    "SALINE_MUCK",
    "DRY_SAND",
    "LOW_POWER",
    "PRESETS",
    "get_preset",
    "get_preset_names_and_descriptions",
    "list_presets",
]
