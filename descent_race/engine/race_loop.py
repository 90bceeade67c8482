from __future__ import annotations

import math
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from descent_race.config import env_float, get_config

from .clock import MS_PER_SECOND, SimulationClock
from .curves import SHAPE_MAX, SHAPE_MIN, build_curves
from .data_models import Curve, DisplayMetric, MetricKind, Phase, RaceFrame, RankDelta, RankingSnapshot
from .ranking import RankingEngine, compute_rank_deltas
from .scheduler import FrameScheduler, ManualFrameScheduler
from .telemetry import TelemetryCollector, TelemetryFrame, TelemetryRacerFrame

SPEED_MIN = float(get_config("simulation.speed_min", 0.1))
SPEED_MAX = float(get_config("simulation.speed_max", 2.0))
DEFAULT_SPEED_MULTIPLIER = min(
    SPEED_MAX,
    max(SPEED_MIN, env_float("DESCENT_SPEED", get_config("simulation.speed_multiplier", 0.5))),
)
DEFAULT_SHAPE_PARAMETER = min(
    SHAPE_MAX,
    max(SHAPE_MIN, env_float("DESCENT_SHAPE", get_config("simulation.shape_parameter", 0.2))),
)
DEFAULT_FPS = int(get_config("simulation.fps", 60))
DEFAULT_MAX_TIME = float(get_config("simulation.max_time", 120.0))

CurveBuilder = Callable[[float], Sequence[Curve]]


def _in_range(value: Any, low: float, high: float) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < low or number > high:
        return None
    return number


class AnimationController:
    """
    Frame-driven race between descent curves.

    Each tick advances the clock, ranks the curves and pushes a `RaceFrame`
    to the renderer. At most one tick is pending at any time; reset and
    close cancel it, and a callback that fires anyway after a reset is
    ignored.
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        renderer: Optional[Any] = None,
        shape_parameter: Optional[float] = None,
        speed_multiplier: Optional[float] = None,
        telemetry: Optional[TelemetryCollector] = None,
        curve_builder: CurveBuilder = build_curves,
        verbose: bool = False,
    ) -> None:
        self.scheduler = scheduler
        self.renderer = renderer
        self.telemetry = telemetry
        self.verbose = verbose
        self._curve_builder = curve_builder

        self.clock = SimulationClock()
        self.ranking = RankingEngine()
        self._snapshot: Optional[RankingSnapshot] = None
        self._frame: Optional[RaceFrame] = None
        self._pending_handle: Any = None
        self._generation = 0
        self._tick_index = 0

        speed = DEFAULT_SPEED_MULTIPLIER if speed_multiplier is None else speed_multiplier
        if not self.set_speed_multiplier(speed):
            raise ValueError(f"Speed multiplier must be within [{SPEED_MIN}, {SPEED_MAX}], got {speed!r}")

        shape = DEFAULT_SHAPE_PARAMETER if shape_parameter is None else shape_parameter
        self._shape_parameter = 0.0
        self._curves: Tuple[Curve, ...] = ()
        if _in_range(shape, SHAPE_MIN, SHAPE_MAX) is None:
            raise ValueError(f"Shape parameter must be within [{SHAPE_MIN}, {SHAPE_MAX}], got {shape!r}")
        self._rebuild_curves(float(shape))

    # ---------- read model ----------
    @property
    def phase(self) -> Phase:
        return self.clock.phase

    @property
    def is_complete(self) -> bool:
        return self.clock.is_complete

    @property
    def elapsed(self) -> float:
        return self.clock.elapsed

    @property
    def curves(self) -> Tuple[Curve, ...]:
        return self._curves

    @property
    def shape_parameter(self) -> float:
        return self._shape_parameter

    @property
    def speed_multiplier(self) -> float:
        return self.clock.speed_multiplier

    @property
    def snapshot(self) -> Optional[RankingSnapshot]:
        return self._snapshot

    @property
    def frame(self) -> Optional[RaceFrame]:
        return self._frame

    @property
    def has_pending_tick(self) -> bool:
        return self._pending_handle is not None

    # ---------- control ----------
    def start(self) -> None:
        self._cancel_tick()
        self.clock.start()
        self.ranking.reset()
        self._snapshot = None
        self._tick_index = 0
        if self.telemetry is not None:
            self.telemetry.clear()
        self._log("started")
        self._schedule_tick()

    def pause(self) -> bool:
        if not self.clock.pause():
            return False
        self._cancel_tick()
        self._log(f"paused at {self.clock.elapsed:.2f}s")
        self._refresh()
        return True

    def resume(self) -> bool:
        if not self.clock.resume():
            return False
        self._log(f"resumed at {self.clock.elapsed:.2f}s")
        self._schedule_tick()
        return True

    def reset(self) -> None:
        self._cancel_tick()
        self.clock.reset()
        self.ranking.reset()
        self._snapshot = None
        self._tick_index = 0
        self._log("reset")
        self._refresh()

    def close(self) -> None:
        """Cancels any pending tick; call when the view goes away."""
        self._cancel_tick()

    # ---------- configuration ----------
    def set_speed_multiplier(self, value: float) -> bool:
        speed = _in_range(value, SPEED_MIN, SPEED_MAX)
        if speed is None:
            return False
        return self.clock.set_speed_multiplier(speed)

    def set_shape_parameter(self, value: float) -> bool:
        shape = _in_range(value, SHAPE_MIN, SHAPE_MAX)
        if shape is None:
            return False
        self._rebuild_curves(shape)
        if self.clock.phase is not Phase.RUNNING:
            self._refresh()
        return True

    def _rebuild_curves(self, shape: float) -> None:
        curves = tuple(self._curve_builder(shape))
        labels = [curve.label for curve in curves]
        if len(set(labels)) != len(labels):
            raise ValueError(f"Curve labels must be unique, got {labels}")
        self._curves = curves
        self._shape_parameter = shape

    # ---------- frame loop ----------
    def tick(self, timestamp: float) -> Optional[RaceFrame]:
        if self.clock.phase is not Phase.RUNNING:
            return None

        elapsed = self.clock.advance(timestamp)
        snapshot = self.ranking.evaluate(elapsed, self._curves)
        if snapshot.is_complete:
            self.clock.finish()
            self._log(f"complete at {elapsed:.2f}s")

        frame = self._publish(snapshot, timestamp)
        if not snapshot.is_complete:
            self._schedule_tick()
        return frame

    def run_until_complete(
        self,
        fps: Optional[int] = None,
        max_time: Optional[float] = None,
        on_frame: Optional[Callable[[RaceFrame], None]] = None,
    ) -> List[RaceFrame]:
        """
        Runs the race headlessly at a fixed frame spacing.

        Requires a `ManualFrameScheduler`. `max_time` bounds the wall-clock
        frame time in seconds, so a slow speed multiplier may stop before
        completion.
        """
        if not isinstance(self.scheduler, ManualFrameScheduler):
            raise ValueError("run_until_complete requires a ManualFrameScheduler")
        fps = DEFAULT_FPS if fps is None else fps
        if fps <= 0:
            raise ValueError("fps must be positive")
        max_time = DEFAULT_MAX_TIME if max_time is None else max_time

        if self.clock.phase is Phase.PAUSED:
            self.resume()
        elif self.clock.phase is not Phase.RUNNING:
            self.start()

        frame_ms = 1000.0 / fps
        frames: List[RaceFrame] = []
        max_frames = int(max_time * fps) + 1
        for idx in range(max_frames):
            if not self.scheduler.fire(idx * frame_ms):
                break
            if self._frame is not None:
                frames.append(self._frame)
                if on_frame:
                    on_frame(self._frame)
            if self.clock.is_complete:
                break
        return frames

    def _schedule_tick(self) -> None:
        if self._pending_handle is not None:
            return
        generation = self._generation

        def _on_frame(timestamp: float) -> None:
            if generation != self._generation:
                return
            self._pending_handle = None
            self.tick(timestamp)

        self._pending_handle = self.scheduler.schedule(_on_frame)

    def _cancel_tick(self) -> None:
        self._generation += 1
        if self._pending_handle is not None:
            self.scheduler.cancel(self._pending_handle)
            self._pending_handle = None

    # ---------- publishing ----------
    def _refresh(self) -> None:
        """Pushes one frame reflecting the current non-running state."""
        if self.clock.phase is Phase.PAUSED:
            snapshot = self.ranking.evaluate(self.clock.elapsed, self._curves)
            if not snapshot.is_complete:
                self._publish(snapshot)
                return
            # Completing while paused still ends the recorded run.
            timestamp = self.clock.state.last_frame_timestamp
            if timestamp is None:
                timestamp = snapshot.elapsed * MS_PER_SECOND
            self.clock.finish()
            self._log(f"complete at {snapshot.elapsed:.2f}s")
            self._publish(snapshot, timestamp)
        elif self.clock.is_complete and self._snapshot is not None:
            self._publish(self._snapshot, record=False)
        elif self.clock.phase is Phase.IDLE:
            # Start-line preview; not retained as the run's snapshot.
            preview = RankingEngine().evaluate(0.0, self._curves)
            self._push(self._build_frame(preview))

    def _publish(
        self,
        snapshot: RankingSnapshot,
        timestamp: Optional[float] = None,
        record: bool = True,
    ) -> RaceFrame:
        self._snapshot = snapshot
        frame = self._build_frame(snapshot)
        if record and timestamp is not None and self.telemetry is not None:
            self._record(frame, snapshot, timestamp)
        self._push(frame)
        return frame

    def _push(self, frame: RaceFrame) -> None:
        self._frame = frame
        if self.renderer is not None:
            self.renderer.draw(frame)

    def _build_frame(self, snapshot: RankingSnapshot) -> RaceFrame:
        complete = snapshot.is_complete
        if complete:
            rank_delta: Dict[str, RankDelta] = {label: RankDelta.NONE for label in snapshot.rankings}
        else:
            rank_delta = compute_rank_deltas(snapshot.previous_rankings, snapshot.rankings)

        display_metric: Dict[str, DisplayMetric] = {}
        for label in snapshot.rankings:
            if complete:
                final_time = snapshot.frozen_time_by_label.get(label, 0.0)
                display_metric[label] = DisplayMetric(MetricKind.FINAL_TIME, final_time)
            else:
                display_metric[label] = DisplayMetric(MetricKind.DISTANCE, snapshot.distance_by_label[label])

        return RaceFrame(
            elapsed=snapshot.elapsed,
            phase=self.clock.phase,
            is_complete=complete,
            curves=self._curves,
            positions=dict(snapshot.position_by_label),
            rankings=snapshot.rankings,
            rank_delta=rank_delta,
            display_metric=display_metric,
        )

    def _record(self, frame: RaceFrame, snapshot: RankingSnapshot, timestamp: float) -> None:
        racers = [
            TelemetryRacerFrame(
                label=label,
                progress=snapshot.progress_by_label[label],
                position=snapshot.position_by_label[label],
                distance=snapshot.distance_by_label[label],
                rank=snapshot.rank_of(label),
                rank_delta=frame.rank_delta.get(label, RankDelta.NONE).value,
            )
            for label in snapshot.rankings
        ]
        self.telemetry.record_frame(
            TelemetryFrame(
                tick=self._tick_index,
                time=snapshot.elapsed,
                timestamp=timestamp,
                phase=frame.phase.value,
                is_complete=frame.is_complete,
                racers=racers,
                shape_parameter=self._shape_parameter,
                final_times=dict(snapshot.frozen_time_by_label),
            )
        )
        self._tick_index += 1

    def _log(self, message: str) -> None:
        if self.verbose:
            print(f"[race] {message}")
