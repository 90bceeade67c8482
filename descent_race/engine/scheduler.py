from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional

FrameCallback = Callable[[float], None]


class FrameScheduler:
    """
    Schedules one-shot frame callbacks that receive a timestamp in ms.

    Implementations return an opaque handle from `schedule()` which can be
    passed to `cancel()`; cancelling an already fired or unknown handle is
    a no-op.
    """

    def schedule(self, callback: FrameCallback) -> Any:
        raise NotImplementedError

    def cancel(self, handle: Any) -> None:
        raise NotImplementedError


class ManualFrameScheduler(FrameScheduler):
    """Test/headless scheduler; frames fire only when `fire()` is called."""

    def __init__(self) -> None:
        self._pending: Dict[int, FrameCallback] = {}
        self._next_handle = 1

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def schedule(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: Any) -> None:
        self._pending.pop(handle, None)

    def fire(self, timestamp: float) -> int:
        """Runs every callback pending at call time; returns how many ran."""
        due = sorted(self._pending.items())
        self._pending.clear()
        for _, callback in due:
            callback(timestamp)
        return len(due)


class MatplotlibFrameScheduler(FrameScheduler):
    """Drives frame callbacks from a matplotlib canvas timer."""

    def __init__(
        self,
        figure: Any,
        fps: int = 60,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        if fps <= 0:
            raise ValueError("fps must be positive")
        self.figure = figure
        self.interval_ms = max(1, int(round(1000 / fps)))
        self._clock = clock
        self._timers: Dict[int, Any] = {}
        self._next_handle = 1

    def _now_ms(self) -> float:
        return self._clock() * 1000.0

    def schedule(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1

        def _fire() -> None:
            timer = self._timers.pop(handle, None)
            if timer is None:
                return
            callback(self._now_ms())

        timer = self.figure.canvas.new_timer(interval=self.interval_ms)
        timer.single_shot = True
        timer.add_callback(_fire)
        self._timers[handle] = timer
        timer.start()
        return handle

    def cancel(self, handle: Any) -> None:
        timer: Optional[Any] = self._timers.pop(handle, None)
        if timer is not None:
            timer.stop()
