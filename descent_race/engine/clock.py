from __future__ import annotations

import math
from typing import Optional

from .data_models import Phase, SimulationState

MS_PER_SECOND = 1000.0


class SimulationClock:
    """
    Pausable elapsed-time clock fed by frame timestamps in milliseconds.

    Elapsed time only accumulates while running. The first frame after
    start/resume is a baseline and contributes no time, so wall-clock time
    spent paused never leaks into the simulation.
    """

    def __init__(self, speed_multiplier: float = 1.0) -> None:
        self.state = SimulationState()
        if not self.set_speed_multiplier(speed_multiplier):
            raise ValueError(f"Speed multiplier must be positive, got {speed_multiplier!r}")

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def elapsed(self) -> float:
        return self.state.accumulated_elapsed

    @property
    def is_complete(self) -> bool:
        return self.state.is_complete

    @property
    def speed_multiplier(self) -> float:
        return self.state.speed_multiplier

    def set_speed_multiplier(self, value: float) -> bool:
        try:
            speed = float(value)
        except (TypeError, ValueError):
            return False
        if not math.isfinite(speed) or speed <= 0.0:
            return False
        self.state.speed_multiplier = speed
        return True

    def start(self) -> None:
        self.state.phase = Phase.RUNNING
        self.state.accumulated_elapsed = 0.0
        self.state.last_frame_timestamp = None
        self.state.is_complete = False

    def pause(self) -> bool:
        if self.state.phase is not Phase.RUNNING:
            return False
        self.state.phase = Phase.PAUSED
        return True

    def resume(self) -> bool:
        if self.state.phase is not Phase.PAUSED:
            return False
        self.state.phase = Phase.RUNNING
        self.state.last_frame_timestamp = None
        return True

    def reset(self) -> None:
        self.state.phase = Phase.IDLE
        self.state.accumulated_elapsed = 0.0
        self.state.last_frame_timestamp = None
        self.state.is_complete = False

    def finish(self) -> None:
        """Stop at the current elapsed time and flag the run as complete."""
        self.state.phase = Phase.IDLE
        self.state.last_frame_timestamp = None
        self.state.is_complete = True

    def advance(self, timestamp: float) -> float:
        if self.state.phase is not Phase.RUNNING:
            return self.state.accumulated_elapsed

        last: Optional[float] = self.state.last_frame_timestamp
        self.state.last_frame_timestamp = timestamp
        if last is None:
            return self.state.accumulated_elapsed

        # Clocks moving backwards contribute nothing.
        delta_ms = max(0.0, timestamp - last)
        self.state.accumulated_elapsed += delta_ms * self.state.speed_multiplier / MS_PER_SECOND
        return self.state.accumulated_elapsed
