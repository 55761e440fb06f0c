"""
Physics Module

Contains the magnetic-induction link budget, AWG wire data, and parameter
sweeps for the through-muck loop antenna link.
"""

from .constants import *
from .link_budget import (
    DerivedMetrics,
    LinkBudgetCache,
    LinkStatus,
    LoopMetrics,
    ParameterSet,
    classify_link,
    compute_attenuation,
    compute_loop_metrics,
    compute_power_budget,
    compute_skin_depth,
    compute_snr_db,
    effective_q,
    evaluate,
)
from .wire_table import SUPPORTED_GAUGES, WireSpec, lookup
