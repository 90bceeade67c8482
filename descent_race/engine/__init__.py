"""
Race engine package for the descent-curve comparison.

The package is split into data models, curve laws, the pausable clock,
the ranking engine and frame scheduling. `AnimationController` composes
these pieces into the per-frame race loop.
"""

from .clock import SimulationClock  # noqa: F401
from .curves import CURVE_LABELS, build_curves  # noqa: F401
from .data_models import (  # noqa: F401
    Curve,
    DisplayMetric,
    MetricKind,
    Phase,
    RaceFrame,
    RankDelta,
    RankingSnapshot,
    SimulationState,
)
from .geometry import distance_to_goal, path_length, sample_path  # noqa: F401
from .ranking import RankingEngine, compute_rank_deltas  # noqa: F401
from .scheduler import FrameScheduler, ManualFrameScheduler, MatplotlibFrameScheduler  # noqa: F401
from .telemetry import TelemetryCollector, TelemetryFrame, TelemetryRacerFrame  # noqa: F401
from .race_loop import AnimationController  # noqa: F401

__all__ = [
    "SimulationClock",
    "CURVE_LABELS",
    "build_curves",
    "Curve",
    "DisplayMetric",
    "MetricKind",
    "Phase",
    "RaceFrame",
    "RankDelta",
    "RankingSnapshot",
    "SimulationState",
    "distance_to_goal",
    "path_length",
    "sample_path",
    "RankingEngine",
    "compute_rank_deltas",
    "FrameScheduler",
    "ManualFrameScheduler",
    "MatplotlibFrameScheduler",
    "TelemetryCollector",
    "TelemetryFrame",
    "TelemetryRacerFrame",
    "AnimationController",
]
