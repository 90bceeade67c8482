from __future__ import annotations

import math
from functools import partial
from typing import Dict, Optional, Tuple

from descent_race.config import get_config

from .data_models import Curve, Point

BRACHISTOCHRONE = "Brachistochrone"
STRAIGHT_LINE = "Straight Line"
PARABOLA = "Parabola"
PARAMETRIC_CYCLOID = "Parametric Cycloid"

# Catalogue order doubles as the initial ranking order.
CURVE_LABELS = (BRACHISTOCHRONE, STRAIGHT_LINE, PARABOLA, PARAMETRIC_CYCLOID)

DEFAULT_CURVE_STYLE: Dict[str, Tuple[str, float]] = {
    BRACHISTOCHRONE: ("#3b82f6", 2.0),
    STRAIGHT_LINE: ("#ef4444", 2.5),
    PARABOLA: ("#8b5cf6", 2.1),
    PARAMETRIC_CYCLOID: ("#f59e0b", 2.0),
}

SHAPE_MIN = 0.0
SHAPE_MAX = 1.0


def brachistochrone(t: float) -> Point:
    theta = t * math.pi
    return ((theta - math.sin(theta)) / math.pi, (1.0 - math.cos(theta)) / 2.0)


def straight_line(t: float) -> Point:
    return (t, t)


def parabola(t: float) -> Point:
    return (t, t * (2.0 - t))


def parametric_cycloid(t: float, shape: float) -> Point:
    """Cycloid-like path whose sag grows with `shape` (E in [0, 1])."""
    angle = math.pi * t
    x, y = brachistochrone(t)
    return (x, y + shape * math.sin(angle) ** 2)


def _curve_style(label: str, config: Optional[dict] = None) -> Tuple[str, float]:
    default_color, default_time = DEFAULT_CURVE_STYLE[label]
    entry = get_config(f"curves.{label}", {}, config=config) or {}
    if not isinstance(entry, dict):
        return default_color, default_time
    color = str(entry.get("color", default_color))
    try:
        base_time = float(entry.get("base_time", default_time))
    except (TypeError, ValueError):
        base_time = default_time
    if not math.isfinite(base_time) or base_time <= 0.0:
        print(f"Warning: Ignoring base_time {base_time!r} for {label}; using {default_time}")
        base_time = default_time
    return color, base_time


def cycloid_total_time(base_time: float, shape: float) -> float:
    return base_time * (1.0 + shape)


def build_curves(
    shape_parameter: float,
    base_times: Optional[Dict[str, float]] = None,
) -> Tuple[Curve, ...]:
    """
    Rebuilds the full curve set for a shape parameter.

    Curves are immutable, so a shape change always produces a new tuple
    rather than mutating the previous one. `base_times` overrides the
    configured per-label base times (mainly for tests and tooling).
    """
    shape = max(SHAPE_MIN, min(SHAPE_MAX, float(shape_parameter)))
    overrides = base_times or {}

    curves = []
    for label in CURVE_LABELS:
        color, base_time = _curve_style(label)
        base_time = float(overrides.get(label, base_time))
        if label == BRACHISTOCHRONE:
            curves.append(Curve(label=label, color=color, law=brachistochrone, total_time=base_time))
        elif label == STRAIGHT_LINE:
            curves.append(Curve(label=label, color=color, law=straight_line, total_time=base_time))
        elif label == PARABOLA:
            curves.append(Curve(label=label, color=color, law=parabola, total_time=base_time))
        else:
            curves.append(
                Curve(
                    label=label,
                    color=color,
                    law=partial(parametric_cycloid, shape=shape),
                    total_time=cycloid_total_time(base_time, shape),
                    shape_parameter=shape,
                )
            )
    return tuple(curves)
