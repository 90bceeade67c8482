"""
Utility script to run a single descent race headlessly.

Usage:
    python scripts/run_race.py --speed 1.0 --shape 0.2
    python scripts/run_race.py --dump replays/race.json --silent

Frames are driven at a fixed spacing, so two runs with the same arguments
produce identical telemetry.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

# Ensure repo root is on sys.path when script is executed from anywhere
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.append(REPO_ROOT)

from descent_race.engine import AnimationController, ManualFrameScheduler, TelemetryCollector, path_length  # noqa: E402
from descent_race.engine.race_loop import DEFAULT_FPS, DEFAULT_MAX_TIME  # noqa: E402
from descent_race.engine.telemetry import dump_frames  # noqa: E402
from descent_race.render import format_ranking_rows  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a descent curve race.")
    parser.add_argument("--speed", type=float, default=None, help="Speed multiplier (default from config).")
    parser.add_argument("--shape", type=float, default=None, help="Cycloid shape parameter in [0, 1].")
    parser.add_argument("--fps", type=int, default=DEFAULT_FPS, help=f"Frame rate (default: {DEFAULT_FPS}).")
    parser.add_argument(
        "--max-time",
        type=float,
        default=DEFAULT_MAX_TIME,
        help=f"Wall-clock seconds before giving up (default: {DEFAULT_MAX_TIME:g}).",
    )
    parser.add_argument("--dump", type=Path, help="Optional JSON file to dump telemetry frames.")
    parser.add_argument("--silent", action="store_true", help="Only print the final standings.")
    args = parser.parse_args()

    telemetry = TelemetryCollector()
    try:
        controller = AnimationController(
            ManualFrameScheduler(),
            shape_parameter=args.shape,
            speed_multiplier=args.speed,
            telemetry=telemetry,
            verbose=not args.silent,
        )
        frames = controller.run_until_complete(fps=args.fps, max_time=args.max_time)
    except ValueError as exc:
        parser.error(str(exc))

    if not args.silent:
        print("\nCurves:")
        for curve in controller.curves:
            print(f"  {curve.label:<20} time={curve.total_time:.2f}s  length={path_length(curve):.3f}")

    if not frames:
        print("[run] no frames were produced.")
        return

    final = frames[-1]
    status = "Final Standings" if final.is_complete else f"Standings at t={final.elapsed:.2f}s (incomplete)"
    print(f"\n{status}:")
    for row in format_ranking_rows(final):
        print(row)

    if args.dump:
        dump_frames(telemetry.export(), args.dump)
        print(f"[run] wrote {len(telemetry.frames)} frames to {args.dump}")


if __name__ == "__main__":
    main()
