"""
Simulation Module

Contains the duty-cycled node state machine and the fixed-rate clock
that drives it.
"""

from .clock import CycleFrame, SimulationClock
from .operational_cycle import (
    NodeState,
    cycle_schedule,
    is_active,
    phase,
    state_current_draw,
)

__all__ = [
    "CycleFrame",
    "SimulationClock",
    "NodeState",
    "cycle_schedule",
    "is_active",
    "phase",
    "state_current_draw",
]
