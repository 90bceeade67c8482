from __future__ import annotations

import math
from typing import List

import numpy as np

from .data_models import Curve, Point

GOAL: Point = (1.0, 1.0)
DEFAULT_PATH_SAMPLES = 101


def distance_to_goal(point: Point, goal: Point = GOAL) -> float:
    """Euclidean distance from `point` to the shared end point."""
    return math.hypot(goal[0] - point[0], goal[1] - point[1])


def sample_path(curve: Curve, count: int = DEFAULT_PATH_SAMPLES) -> List[Point]:
    """Positions at `count` evenly spaced progress values, endpoints included."""
    if count < 2:
        raise ValueError("Sample count must be at least 2")
    return [curve.position(float(t)) for t in np.linspace(0.0, 1.0, count)]


def path_length(curve: Curve, count: int = DEFAULT_PATH_SAMPLES) -> float:
    """Arc length of the sampled polyline."""
    steps = np.diff(np.asarray(sample_path(curve, count)), axis=0)
    return float(np.hypot(steps[:, 0], steps[:, 1]).sum())
