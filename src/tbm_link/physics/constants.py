"""
Physical Constants for TBM Link Bench Simulations

All constants include units in their names. Values marked "fixed" are design
figures of the cutterhead node, not measured quantities.
"""

from __future__ import annotations

import math

# Electromagnetic Constants
# Exact pre-2019 definition; the link budget is calibrated against it.
VACUUM_PERMEABILITY_H_M: float = 4.0 * math.pi * 1e-7  # H/m
COPPER_CONDUCTIVITY_S_M: float = 5.8e7  # S/m, annealed copper

# Muck (wet soil) conductivity (S/m)
MUCK_CONDUCTIVITY_S_M: float = 0.5  # Saturated clay / spoil mix
DRY_SOIL_CONDUCTIVITY_S_M: float = 0.05
SALINE_MUCK_CONDUCTIVITY_S_M: float = 2.0

# =============================================================================
# Carrier and Geometry Defaults
# =============================================================================

CARRIER_FREQUENCY_HZ: float = 25_000.0
SEPARATION_DISTANCE_M: float = 1.5  # Cutterhead to shield receiver
TARGET_BIT_RATE_BPS: float = 250.0  # Informational only

TX_CURRENT_A: float = 0.5
TX_LOOP_DIAMETER_CM: float = 30.0
RX_LOOP_DIAMETER_CM: float = 30.0
TX_TURNS: int = 20
RX_TURNS: int = 30
DEFAULT_WIRE_GAUGE_AWG: int = 18

# 18650 cell
BATTERY_CAPACITY_MAH: float = 3500.0

# =============================================================================
# Resonant Tank
# =============================================================================

# Parasitic and loading losses saturate practical tank Q above this value
MAX_EFFECTIVE_Q: float = 150.0

# =============================================================================
# Power Budget (fixed)
# =============================================================================

SLEEP_CURRENT_UA: float = 4.0  # ATmega328P power-down + RTC
TX_DUTY_CYCLE: float = 0.01  # 1% of each second spent transmitting
ACTIVE_CURRENT_MA: float = 20.0  # MCU + PLL awake, H-bridge idle
TX_DRAW_MA_PER_A: float = 300.0  # Supply draw per amp of loop current
HOURS_PER_YEAR: float = 8760.0

# =============================================================================
# Receiver and Link Thresholds
# =============================================================================

NOISE_FLOOR_V: float = 200e-6  # 200 uV receiver input noise
SNR_FLOOR_LINEAR: float = 1e-9  # Clamp before log10
MIN_DECODE_SNR_DB: float = 12.0  # FSK decode threshold
SOLID_LINK_SNR_DB: float = 20.0

# =============================================================================
# Operational Cycle Timing
# =============================================================================

# 20 frames x 50 ms = one transmission per second
CYCLE_LENGTH_FRAMES: int = 20
WAKE_START_FRAME: int = 14
TX_START_FRAME: int = 16
RX_START_FRAME: int = 19

WAKE_SIGNAL_STRENGTH: float = 0.3
RX_SIGNAL_STRENGTH: float = 0.2
TX_ENVELOPE_RATE: float = 1.0  # radians per frame

CLOCK_TICK_RATE_HZ: float = 20.0

# =============================================================================
# Parameter Ranges (control limits)
# =============================================================================

# (min, max) for each ParameterSet field
PARAMETER_RANGES: dict[str, tuple[float, float]] = {
    "ground_conductivity": (0.05, 2.0),
    "carrier_frequency": (5_000.0, 50_000.0),
    "tx_current": (0.1, 2.0),
    "distance": (0.5, 3.0),
    "bit_rate": (50.0, 2_000.0),
    "tx_loop_diameter": (10.0, 50.0),
    "rx_loop_diameter": (10.0, 60.0),
    "tx_turns": (5, 40),
    "rx_turns": (10, 60),
    "battery_mah": (500.0, 10_000.0),
}
