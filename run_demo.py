#!/usr/bin/env python
"""
TBM Link Bench - One-Shot Demo

Evaluates the through-muck link budget for a preset (or a YAML config) and
replays a few seconds of the cutterhead node's operational cycle.

Usage:
    python run_demo.py
    python run_demo.py --preset saline_muck --seconds 2
    python run_demo.py --config configs/default_link.yaml
    python run_demo.py --config default_link

Requirements:
    pip install -e .
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from tbm_link.config import (
    get_config_path,
    get_default_config,
    parameters_from_config,
    simulation_settings,
)
from tbm_link.physics import evaluate
from tbm_link.physics.constants import CYCLE_LENGTH_FRAMES, MIN_DECODE_SNR_DB
from tbm_link.presets import get_preset, list_presets
from tbm_link.simulation import SimulationClock, state_current_draw
from tbm_link.validation import validate_config_file, validate_parameters


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="TBM magnetic induction link demo")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--preset", default="baseline_clay", choices=list_presets())
    source.add_argument("--config", help="YAML config file to load instead of a preset")
    parser.add_argument("--seconds", type=int, default=1, help="Cycles of the node to replay")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def print_link_summary(params, metrics) -> None:
    display = metrics.to_display_dict()

    print("=" * 60)
    print("  TBM MAGNETIC INDUCTION LINK")
    print(f"  {params.carrier_frequency / 1000:.0f} kHz | Air-Core Loops")
    print("=" * 60)

    print("\n[Medium]")
    print(f"  sigma = {params.ground_conductivity} S/m, gap = {params.distance} m")
    print(f"  Skin depth:   {display['skin_depth_m']:.2f} m")
    print(f"  Muck loss:    {display['attenuation_db']:.1f} dB")

    print("\n[Loops]")
    print(f"  TX: {params.tx_turns}T x {params.tx_loop_diameter:.0f}cm  "
          f"L={display['tx_inductance_uh']:.1f}uH  Q={display['tx_q']:.0f}")
    print(f"  RX: {params.rx_turns}T x {params.rx_loop_diameter:.0f}cm  "
          f"L={display['rx_inductance_uh']:.1f}uH  Q={display['rx_q']:.0f}  "
          f"C={display['rx_capacitance_nf']:.0f}nF")

    print("\n[Signal]")
    print(f"  V_induced:    {display['v_induced_uv']:.1f} uV")
    print(f"  V_resonance:  {display['v_resonant_mv']:.2f} mV (Q_eff={display['effective_q']:.0f})")
    print(f"  SNR:          {display['snr_db']:.1f} dB")
    print(f"  Link margin:  {display['link_margin_db']:.1f} dB "
          f"({params.bit_rate:.0f} bps, threshold {MIN_DECODE_SNR_DB:.0f} dB)")
    print(f"  Status:       {display['status'].upper()}")

    print("\n[Power]")
    print(f"  Avg current:  {display['avg_current_ua']:.1f} uA")
    print(f"  Battery life: {display['battery_life_years']:.2f} years "
          f"({params.battery_mah:.0f} mAh)")


def print_cycle(params, clock: SimulationClock, seconds: int) -> None:
    if not clock.is_running:
        print("\n[Operational Cycle] paused (simulation.start_running is false)")
        return

    print("\n[Operational Cycle]")
    for frame in clock.run_frames(seconds * CYCLE_LENGTH_FRAMES):
        bar = "#" * int(round(frame.signal_strength * 20))
        draw_ma = state_current_draw(frame.state, params.tx_current)
        print(f"  frame {frame.frame_index:4d}  {frame.state.value:<5s} "
              f"{draw_ma:8.3f} mA  |{bar:<20s}|")


def resolve_config(value: str) -> Path:
    """Accept a file path, or a bare name under configs/ (e.g. 'default_link')."""
    path = Path(value)
    if path.exists():
        return path
    return get_config_path(value)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.config:
        config_result = validate_config_file(resolve_config(args.config))
        for warning in config_result.warnings:
            print(f"WARNING: {warning}")
        if not config_result.is_valid:
            for error in config_result.errors:
                print(f"ERROR: {error}")
            for suggestion in config_result.recovery_suggestions:
                print(f"  -> {suggestion}")
            return 1
        config = config_result.config
        params = parameters_from_config(config)
    else:
        config = get_default_config()
        params = get_preset(args.preset)

    settings = simulation_settings(config)
    result = validate_parameters(params, clamp=settings["clamp_parameters"])
    for warning in result.warnings:
        print(f"WARNING: {warning}")
    if not result.is_valid:
        for error in result.errors:
            print(f"ERROR: {error}")
        return 1

    metrics = evaluate(result.parameters)
    print_link_summary(result.parameters, metrics)
    print_cycle(result.parameters, SimulationClock.from_config(config), args.seconds)
    print("\n" + "=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
