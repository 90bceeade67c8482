from __future__ import annotations

import math
from typing import Dict, Sequence, Tuple

from .data_models import Curve, RankDelta, RankingSnapshot
from .geometry import distance_to_goal


def compute_rank_deltas(previous: Sequence[str], current: Sequence[str]) -> Dict[str, RankDelta]:
    """
    Compares two published orderings.

    Positive offsets (previous index minus current index) mean the label
    moved towards the front. Labels missing from either ordering get no
    indicator.
    """
    previous_index = {label: idx for idx, label in enumerate(previous)}
    deltas: Dict[str, RankDelta] = {}
    for idx, label in enumerate(current):
        before = previous_index.get(label)
        deltas[label] = RankDelta.NONE if before is None else RankDelta.from_offset(before - idx)
    return deltas


def _finish_time(curve: Curve) -> float:
    # Degenerate times finish immediately, matching Curve.progress_at.
    if not curve.total_time > 0.0 or not math.isfinite(curve.total_time):
        return 0.0
    return curve.total_time


class RankingEngine:
    """Turns elapsed time into per-curve progress, distances and an ordering."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._published: Tuple[str, ...] = ()
        self._previous: Tuple[str, ...] = ()
        self._frozen_times: Dict[str, float] = {}
        self.is_complete = False

    @property
    def rankings(self) -> Tuple[str, ...]:
        return self._published

    @property
    def previous_rankings(self) -> Tuple[str, ...]:
        return self._previous

    def evaluate(self, elapsed: float, curves: Sequence[Curve]) -> RankingSnapshot:
        elapsed = max(0.0, elapsed)
        snapshot = RankingSnapshot(elapsed=elapsed)

        for curve in curves:
            progress = curve.progress_at(elapsed)
            position = curve.position(progress)
            snapshot.progress_by_label[curve.label] = progress
            snapshot.position_by_label[curve.label] = position
            snapshot.distance_by_label[curve.label] = distance_to_goal(position)

        ordered = self._order_labels(curves, snapshot.distance_by_label)
        if ordered != self._published:
            self._previous = self._published
            self._published = ordered
        snapshot.rankings = self._published
        snapshot.previous_rankings = self._previous

        finish_time = max((_finish_time(curve) for curve in curves), default=0.0)
        if elapsed >= finish_time:
            self.is_complete = True
            for curve in curves:
                self._frozen_times.setdefault(curve.label, _finish_time(curve))

        snapshot.frozen_time_by_label = dict(self._frozen_times)
        snapshot.is_complete = self.is_complete
        return snapshot

    def _order_labels(self, curves: Sequence[Curve], distances: Dict[str, float]) -> Tuple[str, ...]:
        # Seed with the last published order so the stable sort keeps ties in place.
        published_index = {label: idx for idx, label in enumerate(self._published)}
        fallback = len(published_index)
        seeded = sorted(
            (curve.label for curve in curves),
            key=lambda label: published_index.get(label, fallback),
        )
        return tuple(sorted(seeded, key=lambda label: distances[label]))
