"""
Parameter Sweeps

Vectorised curves built on the link-budget formulas: skin depth against
frequency, muck loss against distance, the receive tank's resonance around
the carrier, and SNR against separation. These are the data series behind
the physics charts; plotting them is left to the caller.
"""

from __future__ import annotations

from dataclasses import replace

import numpy as np

from .link_budget import ParameterSet, compute_attenuation, compute_skin_depth, evaluate


def skin_depth_vs_frequency(
    conductivity_s_m: float,
    frequencies_hz: np.ndarray | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Sweep skin depth across carrier frequency.

    Parameters
    ----------
    conductivity_s_m : float
        Muck conductivity in S/m.
    frequencies_hz : np.ndarray, optional
        Frequencies to evaluate. Default is 1-25 kHz in 1 kHz steps.

    Returns
    -------
    frequencies : np.ndarray
        Frequencies in Hz, shape (n,).
    depths : np.ndarray
        Skin depth in m, shape (n,).
    """
    if frequencies_hz is None:
        frequencies_hz = np.arange(1, 26) * 1000.0
    frequencies_hz = np.asarray(frequencies_hz, dtype=np.float64)

    depths = compute_skin_depth(frequencies_hz, conductivity_s_m)
    return frequencies_hz, np.asarray(depths)


def attenuation_vs_distance(
    skin_depth_m: float,
    distances_m: np.ndarray | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Sweep muck loss in dB across separation distance.

    Parameters
    ----------
    skin_depth_m : float
        Skin depth of the medium in m.
    distances_m : np.ndarray, optional
        Distances to evaluate. Default is 0-4.9 m in 0.1 m steps.

    Returns
    -------
    distances : np.ndarray
        Distances in m, shape (n,).
    attenuation_db : np.ndarray
        Loss in dB (<= 0), shape (n,).
    """
    if distances_m is None:
        distances_m = np.arange(50) * 0.1
    distances_m = np.asarray(distances_m, dtype=np.float64)

    _, attenuation_db = compute_attenuation(distances_m, skin_depth_m)
    return distances_m, np.asarray(attenuation_db)


def lc_tank_response(
    carrier_hz: float,
    quality_factor: float,
    offsets_hz: np.ndarray | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Normalised magnitude response of a tank tuned to the carrier.

        |H(f)| = 1 / sqrt(1 + Q^2 * (w/w0 - w0/w)^2)

    Parameters
    ----------
    carrier_hz : float
        Resonant (carrier) frequency in Hz.
    quality_factor : float
        Tank Q.
    offsets_hz : np.ndarray, optional
        Offsets from the carrier. Default is -7200 to +7000 Hz in 200 Hz steps.

    Returns
    -------
    frequencies : np.ndarray
        Absolute frequencies in Hz.
    response : np.ndarray
        Normalised magnitude in (0, 1], equal to 1 at the carrier.

    Raises
    ------
    ValueError
        If any swept frequency is not positive.
    """
    if offsets_hz is None:
        offsets_hz = (np.arange(72) - 36) * 200.0
    frequencies = carrier_hz + np.asarray(offsets_hz, dtype=np.float64)

    if np.any(frequencies <= 0):
        raise ValueError("Swept frequencies must be positive; narrow the offsets")

    ratio = frequencies / carrier_hz
    detuning = ratio - 1.0 / ratio
    response = 1.0 / np.sqrt(1.0 + quality_factor**2 * detuning**2)

    return frequencies, response


def snr_vs_distance(
    params: ParameterSet,
    distances_m: np.ndarray,
) -> np.ndarray:
    """
    Re-evaluate the link SNR at each separation, all else held fixed.

    Parameters
    ----------
    params : ParameterSet
        Base parameters.
    distances_m : np.ndarray
        Positive distances in m.

    Returns
    -------
    np.ndarray
        SNR in dB at each distance.
    """
    return np.array([
        evaluate(replace(params, distance=float(d))).snr_db
        for d in np.asarray(distances_m, dtype=np.float64)
    ])
