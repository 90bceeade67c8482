"""
Render telemetry dumps from scripts/run_race.py into lightweight replays.

Examples:
    # Record a race, then render it as a GIF
    python scripts/run_race.py --dump replays/race.json --silent
    python scripts/replay_race.py replays/race.json --animate replays/race.gif

    # MP4 output needs ffmpeg on PATH
    python scripts/replay_race.py replays/race.json --animate replays/race.mp4 --fps 30
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.append(str(REPO_ROOT))

from descent_race.config import env_float  # noqa: E402
from descent_race.engine.curves import build_curves  # noqa: E402
from descent_race.engine.data_models import Curve  # noqa: E402
from descent_race.engine.geometry import sample_path  # noqa: E402
from descent_race.engine.telemetry import TelemetryFrame, load_frames  # noqa: E402


def _every_nth(frames: Sequence[TelemetryFrame], step: int) -> List[TelemetryFrame]:
    if step <= 1:
        return list(frames)
    picked = list(frames[::step])
    if picked[-1] is not frames[-1]:
        picked.append(frames[-1])
    return picked


def _recorded_shape(frames: Sequence[TelemetryFrame], fallback: float) -> float:
    """Shape parameter of the last frame that carries one; `fallback` for older dumps."""
    for frame in reversed(frames):
        if frame.shape_parameter is not None:
            return frame.shape_parameter
    return fallback


def _recorded_final_times(frames: Sequence[TelemetryFrame], curves: Sequence[Curve]) -> Dict[str, float]:
    for frame in reversed(frames):
        if frame.final_times:
            return dict(frame.final_times)
    return {curve.label: curve.total_time for curve in curves}


def _board_text(frame: TelemetryFrame, final_times: Dict[str, float]) -> str:
    arrows = {"up": "▲", "down": "▼"}
    ordered = sorted(frame.racers, key=lambda r: r.rank if r.rank is not None else len(frame.racers) + 1)
    times = frame.final_times or final_times
    lines = []
    for idx, racer in enumerate(ordered, start=1):
        if frame.is_complete:
            metric, arrow = f"{times.get(racer.label, 0.0):.2f}s", ""
        else:
            metric, arrow = f"{racer.distance:.3f}", arrows.get(racer.rank_delta, "")
        lines.append(f"{idx}. {racer.label:<20} {metric:>7} {arrow}".rstrip())
    return "\n".join(lines)


def animate_frames(
    frames: Sequence[TelemetryFrame],
    output_path: Path,
    shape_parameter: float = 0.2,
    fps: int = 30,
    stride: int = 1,
) -> None:
    """
    Renders `frames` to `output_path`.

    Paths and final times come from the dump itself; `shape_parameter` is
    only used for dumps that did not record one.
    """
    if not frames:
        raise RuntimeError("No telemetry frames to render.")

    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    from matplotlib.animation import FuncAnimation, PillowWriter

    curves = build_curves(_recorded_shape(frames, shape_parameter))
    color_map: Dict[str, str] = {curve.label: curve.color for curve in curves}
    final_times = _recorded_final_times(frames, curves)
    selected = _every_nth(frames, stride)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig, (ax, board) = plt.subplots(1, 2, figsize=(11, 5), gridspec_kw={"width_ratios": [3, 1]})
    ax.set_xlim(-0.05, 1.05)
    ax.set_ylim(1.6, -0.05)
    ax.grid(True, color="#e2e8f0")
    ax.set_title("Race Replay")
    ax.set_xlabel("Horizontal distance")
    ax.set_ylabel("Height")
    board.set_axis_off()

    for curve in curves:
        xs, ys = zip(*sample_path(curve))
        ax.plot(xs, ys, color=curve.color, linewidth=1.5, label=curve.label)
    ax.legend(loc="upper right", fontsize=8)

    labels = sorted({racer.label for frame in selected for racer in frame.racers})
    markers = {
        label: ax.scatter([0.0], [0.0], s=120, color=color_map.get(label, "tab:blue"), edgecolors="white", zorder=3)
        for label in labels
    }
    time_text = ax.text(0.02, 0.02, "", transform=ax.transAxes, fontsize=10)
    board_text = board.text(0.0, 1.0, "", transform=board.transAxes, fontsize=9, va="top", family="monospace")

    def init():
        time_text.set_text("")
        board_text.set_text("")
        return (*markers.values(), time_text, board_text)

    def update(frame: TelemetryFrame):
        for racer in frame.racers:
            marker = markers.get(racer.label)
            if marker is not None:
                marker.set_offsets([racer.position])
        status = "complete" if frame.is_complete else frame.phase
        time_text.set_text(f"t={frame.time:.2f}s  {status}  tick={frame.tick}")
        board_text.set_text(_board_text(frame, final_times))
        return (*markers.values(), time_text, board_text)

    animation = FuncAnimation(fig, update, frames=selected, init_func=init, interval=1000 / fps, blit=False)

    writer: Optional[object] = None
    if output_path.suffix.lower() in {".gif"}:
        writer = PillowWriter(fps=fps)
    kwargs = {"writer": writer} if writer else {}
    try:
        animation.save(str(output_path), fps=fps, **kwargs)
    except (OSError, RuntimeError, ValueError) as exc:
        raise RuntimeError(f"Unable to save animation to {output_path}: {exc}") from exc
    finally:
        plt.close(fig)
    print(f"[replay] saved animation to {output_path}")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Replay descent race telemetry.")
    parser.add_argument("telemetry", type=Path, help="JSON file written by run_race.py --dump.")
    parser.add_argument("--animate", type=Path, help="MP4/GIF output path (default: next to the telemetry file).")
    parser.add_argument(
        "--shape",
        type=float,
        default=env_float("DESCENT_SHAPE", 0.2),
        help="Shape parameter for dumps that did not record one (default: DESCENT_SHAPE or 0.2).",
    )
    parser.add_argument("--fps", type=int, default=30, help="Frames per second for animation output (default: 30).")
    parser.add_argument("--stride", type=int, default=2, help="Render every Nth telemetry frame (default: 2).")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    frames = load_frames(args.telemetry)
    print(f"[replay] loaded {len(frames)} frames from {args.telemetry}")
    output = args.animate or args.telemetry.with_suffix(".gif")
    animate_frames(frames, output, shape_parameter=args.shape, fps=args.fps, stride=args.stride)


if __name__ == "__main__":
    main()
