from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional, Sequence, Tuple

Point = Tuple[float, float]
PathLaw = Callable[[float], Point]


class Phase(Enum):
    """Simulation phases shared by the clock and the controller."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class MetricKind(Enum):
    """What a leaderboard row shows for a label."""

    DISTANCE = "distance"
    FINAL_TIME = "final_time"


class RankDelta(Enum):
    """Rank movement of a label between two published orderings."""

    UP = "up"
    DOWN = "down"
    NONE = "none"

    @classmethod
    def from_offset(cls, offset: int) -> "RankDelta":
        if offset > 0:
            return cls.UP
        if offset < 0:
            return cls.DOWN
        return cls.NONE


@dataclass(frozen=True)
class Curve:
    """A racer's fixed path from (0, 0) to (1, 1) and its traversal time."""

    label: str
    color: str
    law: PathLaw = field(compare=False, repr=False)
    total_time: float
    shape_parameter: float = 0.0

    def position(self, progress: float) -> Point:
        clamped = max(0.0, min(1.0, progress))
        return self.law(clamped)

    def progress_at(self, elapsed: float) -> float:
        """Progress in [0, 1]; a degenerate total time counts as complete."""
        if not self.total_time > 0.0 or not math.isfinite(self.total_time):
            return 1.0
        return max(0.0, min(elapsed / self.total_time, 1.0))


@dataclass
class SimulationState:
    """Mutable clock state; only `SimulationClock` writes to it."""

    phase: Phase = Phase.IDLE
    accumulated_elapsed: float = 0.0
    last_frame_timestamp: Optional[float] = None
    speed_multiplier: float = 1.0
    is_complete: bool = False


@dataclass
class RankingSnapshot:
    elapsed: float
    progress_by_label: Dict[str, float] = field(default_factory=dict)
    position_by_label: Dict[str, Point] = field(default_factory=dict)
    distance_by_label: Dict[str, float] = field(default_factory=dict)
    rankings: Tuple[str, ...] = ()
    previous_rankings: Tuple[str, ...] = ()
    frozen_time_by_label: Dict[str, float] = field(default_factory=dict)
    is_complete: bool = False

    def rank_of(self, label: str) -> Optional[int]:
        try:
            return self.rankings.index(label) + 1
        except ValueError:
            return None


@dataclass(frozen=True)
class DisplayMetric:
    """Either a live distance-to-goal or a frozen final time."""

    kind: MetricKind
    value: float

    @property
    def text(self) -> str:
        if self.kind is MetricKind.FINAL_TIME:
            return f"{self.value:.2f}s"
        return f"{self.value:.3f}"


@dataclass
class RaceFrame:
    """Read model pushed to the renderer once per published tick."""

    elapsed: float
    phase: Phase
    is_complete: bool
    curves: Sequence[Curve] = field(default_factory=tuple)
    positions: Dict[str, Point] = field(default_factory=dict)
    rankings: Tuple[str, ...] = ()
    rank_delta: Dict[str, RankDelta] = field(default_factory=dict)
    display_metric: Dict[str, DisplayMetric] = field(default_factory=dict)
