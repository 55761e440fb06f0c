"""
Wire Table - AWG Copper Magnet Wire Properties

Static lookup of resistance per metre and bare conductor diameter for the
gauges the loop antennas can be wound with. Unknown gauges resolve to AWG 18
so a bad configuration degrades to a reasonable loop instead of failing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType

from .constants import DEFAULT_WIRE_GAUGE_AWG

log = logging.getLogger(__name__)

RESISTANCE_PER_M = MappingProxyType({
    14: 0.00828,
    16: 0.0132,
    18: 0.0210,
    20: 0.0333,
    22: 0.0530,
    24: 0.0842,
})

DIAMETER_MM = MappingProxyType({
    14: 1.63,
    16: 1.29,
    18: 1.02,
    20: 0.81,
    22: 0.64,
    24: 0.51,
})

SUPPORTED_GAUGES: tuple[int, ...] = tuple(sorted(RESISTANCE_PER_M))


@dataclass(frozen=True)
class WireSpec:
    """Copper wire properties for one gauge.

    Attributes
    ----------
    gauge : int
        AWG code the values belong to (18 after a fallback).
    resistance_per_m : float
        DC resistance in ohm/m.
    diameter_m : float
        Bare conductor diameter in metres.
    """

    gauge: int
    resistance_per_m: float
    diameter_m: float

    @property
    def radius_m(self) -> float:
        return self.diameter_m / 2.0


def is_supported_gauge(gauge: int) -> bool:
    return gauge in RESISTANCE_PER_M


def lookup(gauge: int) -> WireSpec:
    """
    Look up wire properties for an AWG code.

    Parameters
    ----------
    gauge : int
        AWG code. Anything outside SUPPORTED_GAUGES resolves to AWG 18.

    Returns
    -------
    WireSpec
        Resistance per metre and diameter for the gauge.

    Examples
    --------
    >>> lookup(18).resistance_per_m
    0.021
    >>> lookup(99) == lookup(18)
    True
    """
    if not is_supported_gauge(gauge):
        log.debug("Unknown wire gauge %r, using AWG %d", gauge, DEFAULT_WIRE_GAUGE_AWG)
        gauge = DEFAULT_WIRE_GAUGE_AWG

    return WireSpec(
        gauge=gauge,
        resistance_per_m=RESISTANCE_PER_M[gauge],
        diameter_m=DIAMETER_MM[gauge] / 1000.0,
    )
