"""
Simulation Clock - Fixed-Rate Frame Driver

Owns the frame counter that drives the operational cycle. Each tick advances
the counter by one and recomputes the node state; pausing retains the current
frame and resuming continues from it. Missed ticks are never replayed.

Usage:
    from tbm_link.simulation.clock import SimulationClock

    clock = SimulationClock()
    clock.add_listener(lambda frame: print(frame.state, frame.signal_strength))
    clock.start()      # 20 Hz background thread
    clock.pause()
    clock.resume()
    clock.stop()

    # Or step manually (tests, offline replay)
    frame = clock.tick()
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from tbm_link.physics.constants import CLOCK_TICK_RATE_HZ
from tbm_link.simulation.operational_cycle import NodeState, phase

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleFrame:
    """
    One clock frame of the operational cycle.

    Attributes
    ----------
    frame_index : int
        Frame counter value.
    state : NodeState
        Node state during the frame.
    signal_strength : float
        Indicator level in [0, 1].
    """

    frame_index: int
    state: NodeState
    signal_strength: float

    @classmethod
    def at(cls, frame_index: int) -> "CycleFrame":
        state, strength = phase(frame_index)
        return cls(frame_index=frame_index, state=state, signal_strength=strength)


FrameListener = Callable[[CycleFrame], None]


class SimulationClock:
    """
    Advances the frame index at a fixed rate with pause and resume.

    Parameters
    ----------
    tick_rate_hz : float, optional
        Nominal tick rate of the background thread. Default is 20 Hz.
    running : bool, optional
        Initial run state. Default is True (the simulation starts playing).

    Attributes
    ----------
    frame_index : int
        Current frame counter.
    is_running : bool
        False while paused.
    """

    def __init__(
        self,
        tick_rate_hz: float = CLOCK_TICK_RATE_HZ,
        running: bool = True,
    ) -> None:
        if tick_rate_hz <= 0:
            raise ValueError(f"tick_rate_hz must be positive, got {tick_rate_hz}")

        self.tick_rate_hz = tick_rate_hz
        self._lock = threading.Lock()
        self._frame_index = 0
        self._running = running
        self._listeners: list[FrameListener] = []

        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "SimulationClock":
        """
        Build a clock from the `simulation` section of a config dict.

        Uses tick_rate_hz and start_running; missing or invalid values fall
        back to the defaults.
        """
        from tbm_link.config import simulation_settings

        settings = simulation_settings(config)
        return cls(
            tick_rate_hz=settings["tick_rate_hz"],
            running=settings["start_running"],
        )

    # -- State -------------------------------------------------------------

    @property
    def frame_index(self) -> int:
        with self._lock:
            return self._frame_index

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._running

    @property
    def tick_interval_s(self) -> float:
        return 1.0 / self.tick_rate_hz

    def current_frame(self) -> CycleFrame:
        """Return the frame for the current counter without advancing."""
        return CycleFrame.at(self.frame_index)

    # -- Control -----------------------------------------------------------

    def pause(self) -> None:
        with self._lock:
            self._running = False
        log.debug("Clock paused at frame %d", self.frame_index)

    def resume(self) -> None:
        with self._lock:
            self._running = True
        log.debug("Clock resumed at frame %d", self.frame_index)

    def toggle(self) -> bool:
        """Flip between running and paused; return the new run state."""
        with self._lock:
            self._running = not self._running
            return self._running

    def reset(self) -> None:
        """Return to frame 0 without changing the run state."""
        with self._lock:
            self._frame_index = 0

    def add_listener(self, listener: FrameListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: FrameListener) -> None:
        self._listeners.remove(listener)

    # -- Ticking -----------------------------------------------------------

    def tick(self) -> CycleFrame:
        """
        Advance one frame if running and notify listeners.

        Returns
        -------
        CycleFrame
            The new frame, or the retained frame when paused (listeners are
            not notified in that case).
        """
        with self._lock:
            if not self._running:
                return CycleFrame.at(self._frame_index)
            self._frame_index += 1
            frame_index = self._frame_index

        frame = CycleFrame.at(frame_index)
        for listener in list(self._listeners):
            try:
                listener(frame)
            except Exception:
                log.exception("Frame listener %r failed on frame %d", listener, frame_index)
        return frame

    def run_frames(self, n_frames: int) -> list[CycleFrame]:
        """
        Tick n_frames times synchronously.

        Returns
        -------
        list[CycleFrame]
            Frame returned by each tick.
        """
        return [self.tick() for _ in range(n_frames)]

    # -- Lifecycle ---------------------------------------------------------

    def start(self) -> None:
        """Start the background tick thread (no-op if already started)."""
        if self._thread is not None and self._thread.is_alive():
            if self._stop_event.is_set():
                log.warning("Clock thread is still stopping; start() ignored")
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._tick_loop, name="link-clock", daemon=True
        )
        self._thread.start()

    @property
    def is_ticking(self) -> bool:
        """True while the background thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def stop(self, timeout: float = 2.0) -> None:
        """
        Stop the background thread; the frame counter is retained.

        If the thread does not exit within `timeout` the handle is kept, so a
        later start() will not launch a second tick thread while it drains.
        """
        self._stop_event.set()
        if self._thread is None:
            return
        self._thread.join(timeout=timeout)
        if self._thread.is_alive():
            log.warning("Clock thread still running %.2fs after stop", timeout)
            return
        self._thread = None

    def _tick_loop(self) -> None:
        interval = self.tick_interval_s
        next_deadline = time.monotonic() + interval
        while not self._stop_event.wait(max(0.0, next_deadline - time.monotonic())):
            self.tick()
            next_deadline += interval
            now = time.monotonic()
            if next_deadline < now:
                # Overran: drop missed ticks
                next_deadline = now + interval

    def __repr__(self) -> str:
        state = "running" if self.is_running else "paused"
        return (
            f"SimulationClock("
            f"frame={self.frame_index}, "
            f"{state}, "
            f"rate={self.tick_rate_hz:.0f}Hz)"
        )
