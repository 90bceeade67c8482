"""
Open a live matplotlib window and race the descent curves.

Keys:
    space   start / pause / resume
    r       reset
    + / -   speed multiplier up / down by 0.1
    ] / [   shape parameter up / down by 0.1

Usage:
    python scripts/watch_race.py --speed 0.5 --shape 0.2
"""

from __future__ import annotations

import argparse
import os
import sys

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.append(REPO_ROOT)

from descent_race.engine import AnimationController, MatplotlibFrameScheduler, Phase  # noqa: E402
from descent_race.engine.race_loop import DEFAULT_FPS  # noqa: E402
from descent_race.render import MatplotlibRenderer  # noqa: E402

STEP = 0.1


def _on_key(controller: AnimationController, key: str) -> None:
    if key == " ":
        if controller.phase is Phase.RUNNING:
            controller.pause()
        elif controller.phase is Phase.PAUSED:
            controller.resume()
        else:
            controller.start()
    elif key == "r":
        controller.reset()
    elif key in ("+", "="):
        if controller.set_speed_multiplier(round(controller.speed_multiplier + STEP, 1)):
            print(f"[watch] speed {controller.speed_multiplier:.1f}x")
    elif key == "-":
        if controller.set_speed_multiplier(round(controller.speed_multiplier - STEP, 1)):
            print(f"[watch] speed {controller.speed_multiplier:.1f}x")
    elif key == "]":
        if controller.set_shape_parameter(round(controller.shape_parameter + STEP, 1)):
            print(f"[watch] shape {controller.shape_parameter:.1f}")
    elif key == "[":
        if controller.set_shape_parameter(round(controller.shape_parameter - STEP, 1)):
            print(f"[watch] shape {controller.shape_parameter:.1f}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Watch descent curves race live.")
    parser.add_argument("--speed", type=float, default=None, help="Speed multiplier (default from config).")
    parser.add_argument("--shape", type=float, default=None, help="Cycloid shape parameter in [0, 1].")
    parser.add_argument("--fps", type=int, default=DEFAULT_FPS, help=f"Frame rate (default: {DEFAULT_FPS}).")
    parser.add_argument("--verbose", action="store_true", help="Print state transitions.")
    args = parser.parse_args()

    import matplotlib.pyplot as plt

    renderer = MatplotlibRenderer()
    try:
        controller = AnimationController(
            MatplotlibFrameScheduler(renderer.figure, fps=args.fps),
            renderer=renderer,
            shape_parameter=args.shape,
            speed_multiplier=args.speed,
            verbose=args.verbose,
        )
    except ValueError as exc:
        parser.error(str(exc))

    renderer.figure.canvas.mpl_connect("key_press_event", lambda event: _on_key(controller, event.key))
    renderer.figure.canvas.mpl_connect("close_event", lambda event: controller.close())
    controller.reset()
    print("[watch] space=start/pause/resume  r=reset  +/-=speed  [/]=shape")
    plt.show()


if __name__ == "__main__":
    main()
