from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from descent_race.config import get_config
from descent_race.engine.data_models import Curve, RaceFrame, RankDelta
from descent_race.engine.geometry import sample_path

RANK_ARROWS = {RankDelta.UP: "▲", RankDelta.DOWN: "▼", RankDelta.NONE: ""}
MARKER_SIZE = 120


def format_ranking_rows(frame: RaceFrame) -> List[str]:
    """Leaderboard lines: position, label, distance or final time, arrow."""
    rows: List[str] = []
    for idx, label in enumerate(frame.rankings, start=1):
        metric = frame.display_metric.get(label)
        metric_text = metric.text if metric else ("0.00s" if frame.is_complete else "-")
        arrow = RANK_ARROWS[frame.rank_delta.get(label, RankDelta.NONE)]
        rows.append(f"{idx}. {label:<20} {metric_text:>7} {arrow}".rstrip())
    return rows


def format_status(frame: RaceFrame) -> str:
    status = "complete" if frame.is_complete else frame.phase.value
    return f"t={frame.elapsed:.2f}s  {status}"


class MatplotlibRenderer:
    """Draws curves, racers and the live leaderboard into a matplotlib figure."""

    def __init__(self, figure: Optional[Any] = None, path_samples: Optional[int] = None) -> None:
        import matplotlib.pyplot as plt

        if figure is None:
            size = (float(get_config("render.width", 9.0)), float(get_config("render.height", 5.0)))
            figure = plt.figure(figsize=size)
        self.figure = figure
        self.path_samples = int(path_samples or get_config("render.path_samples", 101))
        self.track_ax, self.board_ax = figure.subplots(1, 2, gridspec_kw={"width_ratios": [3, 1]})

        self._drawn_curves: Tuple[Curve, ...] = ()
        self._path_lines: Dict[str, Any] = {}
        self._markers: Dict[str, Any] = {}
        self._setup_axes()
        self.status_text = self.track_ax.text(0.02, 0.02, "", transform=self.track_ax.transAxes, fontsize=10)
        self.board_text = self.board_ax.text(
            0.0, 1.0, "", transform=self.board_ax.transAxes, fontsize=9, va="top", family="monospace"
        )

    def _setup_axes(self) -> None:
        ax = self.track_ax
        ax.set_xlim(-0.05, 1.05)
        # Height is measured downwards from the start point.
        ax.set_ylim(1.6, -0.05)
        ax.set_xticks([idx / 10 for idx in range(11)])
        ax.grid(True, color="#e2e8f0", linewidth=1.0)
        ax.set_xlabel("Horizontal distance")
        ax.set_ylabel("Height")
        ax.set_title("Brachistochrone Race")
        self.board_ax.set_axis_off()
        self.board_ax.set_title("Live Rankings")

    def _draw_paths(self, curves: Sequence[Curve]) -> None:
        for line in self._path_lines.values():
            line.remove()
        self._path_lines.clear()
        for curve in curves:
            xs, ys = zip(*sample_path(curve, self.path_samples))
            (line,) = self.track_ax.plot(xs, ys, color=curve.color, linewidth=2.0, label=curve.label)
            self._path_lines[curve.label] = line
            if curve.label not in self._markers:
                self._markers[curve.label] = self.track_ax.scatter(
                    [0.0], [0.0], s=MARKER_SIZE, color=curve.color, edgecolors="white", linewidths=2.0, zorder=3
                )
        self.track_ax.legend(loc="upper right", fontsize=8)
        self._drawn_curves = tuple(curves)

    def draw(self, frame: RaceFrame) -> None:
        if tuple(frame.curves) != self._drawn_curves:
            self._draw_paths(frame.curves)

        for label, marker in self._markers.items():
            position = frame.positions.get(label)
            marker.set_visible(position is not None)
            if position is not None:
                marker.set_offsets([position])

        self.status_text.set_text(format_status(frame))
        self.board_text.set_text("\n".join(format_ranking_rows(frame)))
        self.figure.canvas.draw_idle()
