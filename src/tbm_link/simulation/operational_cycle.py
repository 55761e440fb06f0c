"""
Operational Cycle - Duty-Cycled Cutterhead Node

The transmitting node spends most of each one-second cycle asleep, wakes its
MCU and PLL, sends a short burst with a smooth envelope, then listens briefly
before sleeping again. At 20 frames per second one cycle is 20 frames:

    frame % 20   state      signal strength
    [0, 14)      sleep      0.0
    [14, 16)     wake       0.3
    [16, 19)     tx         sin(cycle - 16) * 0.5 + 0.5
    [19, 20)     rx         0.2

The state is a pure function of the frame index, so replaying from frame 0
reproduces the identical sequence.
"""

from __future__ import annotations

import math
from enum import Enum

from tbm_link.physics.constants import (
    ACTIVE_CURRENT_MA,
    CYCLE_LENGTH_FRAMES,
    RX_SIGNAL_STRENGTH,
    RX_START_FRAME,
    SLEEP_CURRENT_UA,
    TX_DRAW_MA_PER_A,
    TX_ENVELOPE_RATE,
    TX_START_FRAME,
    WAKE_SIGNAL_STRENGTH,
    WAKE_START_FRAME,
)


class NodeState(Enum):
    """Operating state of the cutterhead node."""

    SLEEP = "sleep"
    WAKE = "wake"
    TRANSMIT = "tx"
    RECEIVE = "rx"


def cycle_schedule() -> list[tuple[int, int, NodeState]]:
    """
    Return the cycle as ordered (start_frame, end_frame, state) spans.

    Examples
    --------
    >>> cycle_schedule()[0]
    (0, 14, <NodeState.SLEEP: 'sleep'>)
    """
    return [
        (0, WAKE_START_FRAME, NodeState.SLEEP),
        (WAKE_START_FRAME, TX_START_FRAME, NodeState.WAKE),
        (TX_START_FRAME, RX_START_FRAME, NodeState.TRANSMIT),
        (RX_START_FRAME, CYCLE_LENGTH_FRAMES, NodeState.RECEIVE),
    ]


def phase(frame_index: int) -> tuple[NodeState, float]:
    """
    Compute the node state and signal strength for a frame.

    Parameters
    ----------
    frame_index : int
        Non-negative frame counter supplied by the clock.

    Returns
    -------
    state : NodeState
        Node state during the frame.
    signal_strength : float
        Indicator level in [0, 1].

    Raises
    ------
    ValueError
        If frame_index is negative.

    Examples
    --------
    >>> phase(0)
    (<NodeState.SLEEP: 'sleep'>, 0.0)
    >>> phase(16)
    (<NodeState.TRANSMIT: 'tx'>, 0.5)
    """
    if frame_index < 0:
        raise ValueError(f"frame_index must be non-negative, got {frame_index}")

    cycle = frame_index % CYCLE_LENGTH_FRAMES

    if cycle < WAKE_START_FRAME:
        return NodeState.SLEEP, 0.0
    if cycle < TX_START_FRAME:
        return NodeState.WAKE, WAKE_SIGNAL_STRENGTH
    if cycle < RX_START_FRAME:
        envelope = math.sin((cycle - TX_START_FRAME) * TX_ENVELOPE_RATE)
        return NodeState.TRANSMIT, envelope * 0.5 + 0.5
    return NodeState.RECEIVE, RX_SIGNAL_STRENGTH


def is_active(state: NodeState) -> bool:
    """True for every state in which the MCU is awake."""
    return state is not NodeState.SLEEP


def state_current_draw(state: NodeState, tx_current_a: float) -> float:
    """
    Instantaneous supply current of the node in a given state.

    Parameters
    ----------
    state : NodeState
        Node state.
    tx_current_a : float
        Loop drive current in A; sets the H-bridge draw while transmitting.

    Returns
    -------
    float
        Supply current in mA.
    """
    if state is NodeState.SLEEP:
        return SLEEP_CURRENT_UA / 1000.0
    if state is NodeState.TRANSMIT:
        return tx_current_a * TX_DRAW_MA_PER_A
    return ACTIVE_CURRENT_MA
