"""
Link Budget Module - Magnetic Induction Through Muck

Implements the near-field link model between a battery-powered transmit loop
on the TBM cutterhead and a stationary receive loop on the shield, separated
by a gap of conductive muck. This is the core physics engine of the bench.

Mathematical Foundation
-----------------------
With omega = 2*pi*f and mu_0 = 4*pi*1e-7:

Skin depth of the lossy medium:

    delta = sqrt(2 / (omega * mu_0 * sigma))

Near-field dipole of the transmit loop, attenuated by the muck:

    m    = N_tx * I_tx * A_tx
    H    = m / (2 * pi * d^3)
    H_rx = H * exp(-d / delta)
    B_rx = mu_0 * H_rx

Faraday's law at the receive loop, boosted by its tuned tank:

    V_ind = N_rx * A_rx * omega * B_rx
    V_res = V_ind * min(Q_rx, 150)

Air-core loop inductance (single-layer approximation):

    L = mu_0 * N^2 * r * (ln(8 * r / a) - 2)

where a is the wire radius.

Unit Convention
---------------
- Loop diameters: cm (at API boundary), metres internally
- Currents: A for the loop, uA / mA in the power budget
- Voltages: V internally; DerivedMetrics.to_display_dict() rescales
- Battery capacity: mAh

Preconditions
-------------
Conductivity, frequency and distance appear in denominators. evaluate()
rejects non-positive physical inputs with ValueError instead of letting
inf or NaN propagate into the metrics.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

import numpy as np

from .constants import (
    BATTERY_CAPACITY_MAH,
    CARRIER_FREQUENCY_HZ,
    COPPER_CONDUCTIVITY_S_M,
    DEFAULT_WIRE_GAUGE_AWG,
    HOURS_PER_YEAR,
    MAX_EFFECTIVE_Q,
    MIN_DECODE_SNR_DB,
    MUCK_CONDUCTIVITY_S_M,
    NOISE_FLOOR_V,
    RX_LOOP_DIAMETER_CM,
    RX_TURNS,
    SEPARATION_DISTANCE_M,
    SLEEP_CURRENT_UA,
    SNR_FLOOR_LINEAR,
    SOLID_LINK_SNR_DB,
    TARGET_BIT_RATE_BPS,
    TX_CURRENT_A,
    TX_DUTY_CYCLE,
    TX_LOOP_DIAMETER_CM,
    TX_TURNS,
    VACUUM_PERMEABILITY_H_M,
)
from .wire_table import lookup

log = logging.getLogger(__name__)

# Fields that must be strictly positive for the formulas to be defined
_POSITIVE_FIELDS = (
    "ground_conductivity",
    "carrier_frequency",
    "tx_current",
    "distance",
    "tx_loop_diameter",
    "rx_loop_diameter",
    "tx_turns",
    "rx_turns",
    "battery_mah",
)


# =============================================================================
# Data Model
# =============================================================================


@dataclass(frozen=True)
class ParameterSet:
    """
    Immutable snapshot of every physical and geometric input of the link.

    Replaced wholesale on every edit; being frozen and hashable it doubles as
    the cache key for LinkBudgetCache.

    Attributes
    ----------
    ground_conductivity : float
        Muck conductivity in S/m.
    carrier_frequency : float
        Carrier frequency in Hz.
    tx_current : float
        Transmit loop current amplitude in A. Also used as the proxy for
        transmit power draw in the power budget.
    distance : float
        Loop separation through the muck in m.
    bit_rate : float
        Target bit rate in bit/s. Informational; no metric depends on it.
    tx_loop_diameter, rx_loop_diameter : float
        Loop diameters in cm.
    tx_turns, rx_turns : int
        Number of turns on each loop.
    wire_gauge : int
        AWG code shared by both loops.
    battery_mah : float
        Node battery capacity in mAh.
    """

    ground_conductivity: float = MUCK_CONDUCTIVITY_S_M
    carrier_frequency: float = CARRIER_FREQUENCY_HZ
    tx_current: float = TX_CURRENT_A
    distance: float = SEPARATION_DISTANCE_M
    bit_rate: float = TARGET_BIT_RATE_BPS
    tx_loop_diameter: float = TX_LOOP_DIAMETER_CM
    rx_loop_diameter: float = RX_LOOP_DIAMETER_CM
    tx_turns: int = TX_TURNS
    rx_turns: int = RX_TURNS
    wire_gauge: int = DEFAULT_WIRE_GAUGE_AWG
    battery_mah: float = BATTERY_CAPACITY_MAH

    @property
    def omega(self) -> float:
        """Angular carrier frequency in rad/s."""
        return 2.0 * np.pi * self.carrier_frequency

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class LinkStatus(Enum):
    """Link quality band derived from the SNR."""

    FAIL = "fail"
    MARGINAL = "marginal"
    SOLID = "solid"


@dataclass(frozen=True)
class LoopMetrics:
    """
    Electrical model of one air-core loop antenna.

    Attributes
    ----------
    radius_m : float
        Loop radius in m.
    area_m2 : float
        Enclosed area in m^2.
    wire_length_m : float
        Total conductor length in m.
    r_dc_ohm : float
        DC resistance in ohm.
    skin_factor : float
        AC/DC resistance ratio (1.0 when skin effect is negligible).
    r_ac_ohm : float
        AC resistance at the carrier in ohm.
    inductance_h : float
        Self-inductance in H.
    quality_factor : float
        Unloaded Q = omega * L / R_ac.
    capacitance_f : float
        Tuning capacitance that resonates the loop at the carrier, in F.
    """

    radius_m: float
    area_m2: float
    wire_length_m: float
    r_dc_ohm: float
    skin_factor: float
    r_ac_ohm: float
    inductance_h: float
    quality_factor: float
    capacitance_f: float


@dataclass(frozen=True)
class DerivedMetrics:
    """
    Every intermediate and final quantity of one link-budget evaluation.

    All values are in SI base units (V, A/m, T, H, F, ohm) except the power
    budget (uA, hours, years) and the dB figures.
    """

    omega: float
    skin_depth_m: float
    attenuation_factor: float
    attenuation_db: float
    tx_loop: LoopMetrics
    rx_loop: LoopMetrics
    magnetic_moment_am2: float
    h_field_a_m: float
    h_rx_a_m: float
    b_rx_t: float
    v_induced_v: float
    effective_q: float
    v_resonant_v: float
    avg_current_ua: float
    battery_life_hours: float
    battery_life_years: float
    snr_linear: float
    snr_db: float
    link_margin_db: float
    status: LinkStatus

    @property
    def is_viable(self) -> bool:
        """True if the SNR clears the decode threshold."""
        return self.snr_db >= MIN_DECODE_SNR_DB

    def to_display_dict(self) -> dict[str, float | str]:
        """
        Return the headline metrics rescaled to display units.

        Returns
        -------
        dict
            Keys carry their unit suffix (e.g. "tx_inductance_uh").
        """
        return {
            "skin_depth_m": self.skin_depth_m,
            "attenuation_db": self.attenuation_db,
            "tx_area_cm2": self.tx_loop.area_m2 * 1e4,
            "tx_inductance_uh": self.tx_loop.inductance_h * 1e6,
            "tx_r_ac_mohm": self.tx_loop.r_ac_ohm * 1e3,
            "tx_q": self.tx_loop.quality_factor,
            "rx_area_cm2": self.rx_loop.area_m2 * 1e4,
            "rx_inductance_uh": self.rx_loop.inductance_h * 1e6,
            "rx_r_ac_mohm": self.rx_loop.r_ac_ohm * 1e3,
            "rx_q": self.rx_loop.quality_factor,
            "rx_capacitance_nf": self.rx_loop.capacitance_f * 1e9,
            "effective_q": self.effective_q,
            "magnetic_moment_am2": self.magnetic_moment_am2,
            "h_rx_ua_m": self.h_rx_a_m * 1e6,
            "v_induced_uv": self.v_induced_v * 1e6,
            "v_resonant_mv": self.v_resonant_v * 1e3,
            "noise_floor_uv": NOISE_FLOOR_V * 1e6,
            "avg_current_ua": self.avg_current_ua,
            "battery_life_years": self.battery_life_years,
            "snr_db": self.snr_db,
            "link_margin_db": self.link_margin_db,
            "status": self.status.value,
        }


# =============================================================================
# Propagation
# =============================================================================


def compute_skin_depth(
    frequency_hz: float | np.ndarray,
    conductivity_s_m: float | np.ndarray,
    permeability_h_m: float = VACUUM_PERMEABILITY_H_M,
) -> float | np.ndarray:
    """
    Compute the electromagnetic skin depth of a conductive medium.

        delta = sqrt(2 / (omega * mu * sigma))

    Parameters
    ----------
    frequency_hz : float or np.ndarray
        Frequency in Hz. Must be positive.
    conductivity_s_m : float or np.ndarray
        Conductivity in S/m. Must be positive.
    permeability_h_m : float, optional
        Permeability in H/m. Default is mu_0.

    Returns
    -------
    float or np.ndarray
        Skin depth in metres.

    Raises
    ------
    ValueError
        If any frequency or conductivity is not positive.

    Examples
    --------
    >>> round(compute_skin_depth(25000.0, 0.5), 2)
    4.5
    """
    if np.any(np.asarray(frequency_hz) <= 0) or np.any(np.asarray(conductivity_s_m) <= 0):
        raise ValueError("Frequency and conductivity must be positive")

    omega = 2.0 * np.pi * np.asarray(frequency_hz, dtype=np.float64)
    depth = np.sqrt(2.0 / (omega * permeability_h_m * conductivity_s_m))

    if np.ndim(depth) == 0:
        return float(depth)
    return depth


def compute_attenuation(
    distance_m: float | np.ndarray,
    skin_depth_m: float,
) -> tuple[float | np.ndarray, float | np.ndarray]:
    """
    Compute the exponential field loss through the medium.

    Parameters
    ----------
    distance_m : float or np.ndarray
        Path length in m (>= 0).
    skin_depth_m : float
        Skin depth of the medium in m.

    Returns
    -------
    factor : float or np.ndarray
        exp(-d / delta), in (0, 1].
    attenuation_db : float or np.ndarray
        20 * log10(factor), always <= 0.

    Examples
    --------
    >>> compute_attenuation(0.0, 4.5)
    (1.0, 0.0)
    """
    if np.any(np.asarray(distance_m) < 0):
        raise ValueError("Distance must be non-negative")

    factor = np.exp(-np.asarray(distance_m, dtype=np.float64) / skin_depth_m)
    attenuation_db = 20.0 * np.log10(factor)

    if np.ndim(factor) == 0:
        return float(factor), float(attenuation_db)
    return factor, attenuation_db


# =============================================================================
# Loop Antennas
# =============================================================================


def compute_loop_metrics(
    diameter_cm: float,
    turns: int,
    wire_gauge: int,
    omega: float,
) -> LoopMetrics:
    """
    Compute the electrical model of a single-layer air-core loop.

    The transmit and receive loops go through the same model with their own
    diameter and turns, sharing the wire gauge.

    Parameters
    ----------
    diameter_cm : float
        Loop diameter in cm.
    turns : int
        Number of turns.
    wire_gauge : int
        AWG code (unknown codes fall back to AWG 18).
    omega : float
        Angular carrier frequency in rad/s.

    Returns
    -------
    LoopMetrics
        Geometry, resistance, inductance, Q and resonating capacitance.

    Notes
    -----
    Skin effect in the conductor uses copper conductivity. When the wire is
    thicker than two copper skin depths the AC resistance scales by
    d_wire / (2 * delta_cu); otherwise it equals the DC resistance.
    """
    wire = lookup(wire_gauge)

    radius = (diameter_cm / 100.0) / 2.0
    area = np.pi * radius**2

    wire_length = turns * 2.0 * np.pi * radius
    r_dc = wire_length * wire.resistance_per_m

    skin_depth_cu = np.sqrt(2.0 / (omega * VACUUM_PERMEABILITY_H_M * COPPER_CONDUCTIVITY_S_M))
    if wire.diameter_m > 2.0 * skin_depth_cu:
        skin_factor = wire.diameter_m / (2.0 * skin_depth_cu)
    else:
        skin_factor = 1.0
    r_ac = r_dc * skin_factor

    inductance = (
        VACUUM_PERMEABILITY_H_M * turns**2 * radius
        * (np.log(8.0 * radius / wire.radius_m) - 2.0)
    )
    quality_factor = omega * inductance / r_ac
    capacitance = 1.0 / (omega**2 * inductance)

    return LoopMetrics(
        radius_m=float(radius),
        area_m2=float(area),
        wire_length_m=float(wire_length),
        r_dc_ohm=float(r_dc),
        skin_factor=float(skin_factor),
        r_ac_ohm=float(r_ac),
        inductance_h=float(inductance),
        quality_factor=float(quality_factor),
        capacitance_f=float(capacitance),
    )


def effective_q(quality_factor: float, ceiling: float = MAX_EFFECTIVE_Q) -> float:
    """
    Clamp a raw tank Q to the practically achievable ceiling.

    Examples
    --------
    >>> effective_q(212.0)
    150.0
    >>> effective_q(80.0)
    80.0
    """
    return float(min(quality_factor, ceiling))


# =============================================================================
# Coupling
# =============================================================================


def compute_dipole_field(magnetic_moment_am2: float, distance_m: float) -> float:
    """
    Near-field on-axis magnetic field of a loop dipole, ignoring medium loss.

        H = m / (2 * pi * d^3)
    """
    if distance_m <= 0:
        raise ValueError("Distance must be positive")
    return float(magnetic_moment_am2 / (2.0 * np.pi * distance_m**3))


def compute_induced_voltage(
    turns: int,
    area_m2: float,
    omega: float,
    flux_density_t: float,
) -> float:
    """Peak EMF of a loop in a sinusoidal field (Faraday's law)."""
    return float(turns * area_m2 * omega * flux_density_t)


# =============================================================================
# Power Budget and Link Quality
# =============================================================================


def compute_power_budget(
    tx_current_a: float,
    battery_mah: float,
    sleep_current_ua: float = SLEEP_CURRENT_UA,
    duty_cycle: float = TX_DUTY_CYCLE,
) -> tuple[float, float, float]:
    """
    Compute average current draw and projected battery life.

    The loop drive current stands in for the transmit supply draw
    (I_tx in A -> mA x 1000), blended with the sleep floor by duty cycle.

    Parameters
    ----------
    tx_current_a : float
        Transmit loop current amplitude in A.
    battery_mah : float
        Battery capacity in mAh.
    sleep_current_ua : float, optional
        Sleep current in uA. Default is 4 uA.
    duty_cycle : float, optional
        Fraction of time transmitting. Default is 0.01.

    Returns
    -------
    avg_current_ua : float
        Average current in uA.
    life_hours : float
        Battery life in hours.
    life_years : float
        Battery life in years.

    Examples
    --------
    >>> avg, hours, years = compute_power_budget(0.5, 3500.0)
    >>> round(avg, 2)
    5003.96
    """
    tx_current_ma = tx_current_a * 1000.0
    avg_current_ua = (
        sleep_current_ua * (1.0 - duty_cycle)
        + tx_current_ma * 1000.0 * duty_cycle
    )
    life_hours = (battery_mah * 1000.0) / avg_current_ua
    life_years = life_hours / HOURS_PER_YEAR

    return float(avg_current_ua), float(life_hours), float(life_years)


def compute_snr_db(
    signal_v: float,
    noise_floor_v: float = NOISE_FLOOR_V,
    floor: float = SNR_FLOOR_LINEAR,
) -> tuple[float, float]:
    """
    Compute the voltage SNR, clamped so the dB value is always finite.

    Returns
    -------
    snr_linear : float
        max(signal / noise, floor).
    snr_db : float
        20 * log10(snr_linear).

    Examples
    --------
    >>> compute_snr_db(0.0)
    (1e-09, -180.0)
    """
    snr_linear = max(signal_v / noise_floor_v, floor)
    return float(snr_linear), float(20.0 * np.log10(snr_linear))


def classify_link(snr_db: float) -> LinkStatus:
    """
    Map an SNR to its link quality band.

    Below 12 dB the FSK link fails to decode; 12-20 dB is marginal;
    20 dB and above is solid.
    """
    if snr_db < MIN_DECODE_SNR_DB:
        return LinkStatus.FAIL
    if snr_db < SOLID_LINK_SNR_DB:
        return LinkStatus.MARGINAL
    return LinkStatus.SOLID


# =============================================================================
# Engine
# =============================================================================


def check_domain(params: ParameterSet) -> None:
    """
    Reject inputs outside the domain of the link formulas.

    Raises
    ------
    ValueError
        If any physical input is zero, negative or not finite.
    """
    for name in _POSITIVE_FIELDS:
        value = getattr(params, name)
        if not np.isfinite(value) or value <= 0:
            raise ValueError(f"{name} must be positive and finite, got {value!r}")


def evaluate(params: ParameterSet) -> DerivedMetrics:
    """
    Evaluate the full link budget for one parameter set.

    Pure and deterministic: identical ParameterSet values always produce
    identical DerivedMetrics.

    Parameters
    ----------
    params : ParameterSet
        Link inputs. Physical inputs must be strictly positive.

    Returns
    -------
    DerivedMetrics
        Every intermediate and final quantity of the budget.

    Raises
    ------
    ValueError
        If a physical input is outside its domain (see check_domain).

    Examples
    --------
    >>> metrics = evaluate(ParameterSet())
    >>> round(metrics.skin_depth_m, 2)
    4.5
    >>> metrics.effective_q
    150.0
    """
    check_domain(params)

    omega = params.omega

    # Step 1: Medium
    skin_depth = compute_skin_depth(params.carrier_frequency, params.ground_conductivity)

    # Step 2: Loops
    tx_loop = compute_loop_metrics(
        params.tx_loop_diameter, params.tx_turns, params.wire_gauge, omega
    )
    rx_loop = compute_loop_metrics(
        params.rx_loop_diameter, params.rx_turns, params.wire_gauge, omega
    )

    # Step 3: Near-field coupling
    moment = params.tx_turns * params.tx_current * tx_loop.area_m2
    h_field = compute_dipole_field(moment, params.distance)

    # Step 4: Muck loss
    attenuation_factor, attenuation_db = compute_attenuation(params.distance, skin_depth)
    h_rx = h_field * attenuation_factor
    b_rx = VACUUM_PERMEABILITY_H_M * h_rx

    # Step 5-6: Receive EMF and resonant gain
    v_induced = compute_induced_voltage(params.rx_turns, rx_loop.area_m2, omega, b_rx)
    q_eff = effective_q(rx_loop.quality_factor)
    v_resonant = v_induced * q_eff

    # Step 7: Power
    avg_current, life_hours, life_years = compute_power_budget(
        params.tx_current, params.battery_mah
    )

    # Step 8: Link quality
    snr_linear, snr_db = compute_snr_db(v_resonant)
    link_margin = snr_db - MIN_DECODE_SNR_DB

    return DerivedMetrics(
        omega=float(omega),
        skin_depth_m=skin_depth,
        attenuation_factor=attenuation_factor,
        attenuation_db=attenuation_db,
        tx_loop=tx_loop,
        rx_loop=rx_loop,
        magnetic_moment_am2=float(moment),
        h_field_a_m=h_field,
        h_rx_a_m=float(h_rx),
        b_rx_t=float(b_rx),
        v_induced_v=v_induced,
        effective_q=q_eff,
        v_resonant_v=float(v_resonant),
        avg_current_ua=avg_current,
        battery_life_hours=life_hours,
        battery_life_years=life_years,
        snr_linear=snr_linear,
        snr_db=snr_db,
        link_margin_db=float(link_margin),
        status=classify_link(snr_db),
    )


class LinkBudgetCache:
    """
    Single-entry cache of the last evaluation, keyed by the full ParameterSet.

    The control layer replaces the ParameterSet on every edit; the cache
    recomputes only when the new set differs from the cached one.

    Examples
    --------
    >>> cache = LinkBudgetCache()
    >>> m1 = cache.get(ParameterSet())
    >>> m2 = cache.get(ParameterSet())
    >>> m1 is m2
    True
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._key: ParameterSet | None = None
        self._value: DerivedMetrics | None = None
        self.hits = 0
        self.misses = 0

    def get(self, params: ParameterSet) -> DerivedMetrics:
        with self._lock:
            if self._value is not None and self._key == params:
                self.hits += 1
                return self._value

        metrics = evaluate(params)

        with self._lock:
            self.misses += 1
            misses = self.misses
            self._key = params
            self._value = metrics
        log.debug("Link budget recomputed (misses=%d)", misses)
        return metrics

    def invalidate(self) -> None:
        with self._lock:
            self._key = None
            self._value = None

    def __repr__(self) -> str:
        with self._lock:
            hits, misses = self.hits, self.misses
        return f"LinkBudgetCache(hits={hits}, misses={misses})"
