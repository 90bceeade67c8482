from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple


@dataclass
class TelemetryRacerFrame:
    label: str
    progress: float
    position: Tuple[float, float]
    distance: float
    rank: Optional[int]
    rank_delta: str


@dataclass
class TelemetryFrame:
    """
    One published tick.

    `final_times` is filled once the run is complete. Dumps that predate
    `shape_parameter` load it as None.
    """

    tick: int
    time: float
    timestamp: float
    phase: str
    is_complete: bool
    racers: List[TelemetryRacerFrame] = field(default_factory=list)
    shape_parameter: Optional[float] = None
    final_times: Dict[str, float] = field(default_factory=dict)


class TelemetryCollector:
    def __init__(self) -> None:
        self.frames: List[TelemetryFrame] = []

    def record_frame(self, frame: TelemetryFrame) -> None:
        self.frames.append(frame)

    def export(self) -> Sequence[TelemetryFrame]:
        return tuple(self.frames)

    def clear(self) -> None:
        self.frames.clear()


def frames_to_dicts(frames: Sequence[TelemetryFrame]) -> List[Dict[str, Any]]:
    return [asdict(frame) for frame in frames]


def dump_frames(frames: Sequence[TelemetryFrame], output_path: Path) -> None:
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as fh:
            json.dump(frames_to_dicts(frames), fh, indent=2)
    except OSError as exc:
        raise RuntimeError(f"Unable to write telemetry to {output_path}: {exc}") from exc


def load_frames(input_path: Path) -> List[TelemetryFrame]:
    input_path = Path(input_path)
    try:
        with input_path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise RuntimeError(f"Unable to read telemetry from {input_path}: {exc}") from exc

    if not isinstance(payload, list):
        raise RuntimeError(f"Telemetry file {input_path} must contain a list of frames")

    try:
        return [_frame_from_dict(entry, idx) for idx, entry in enumerate(payload)]
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise RuntimeError(f"Malformed telemetry frame in {input_path}: {exc}") from exc


def _frame_from_dict(entry: Dict[str, Any], index: int) -> TelemetryFrame:
    shape = entry.get("shape_parameter")
    racers = [
        TelemetryRacerFrame(
            label=racer["label"],
            progress=float(racer.get("progress", 0.0)),
            position=tuple(racer.get("position") or (0.0, 0.0)),
            distance=float(racer.get("distance", 0.0)),
            rank=racer.get("rank"),
            rank_delta=racer.get("rank_delta", "none"),
        )
        for racer in entry.get("racers", [])
    ]
    return TelemetryFrame(
        tick=int(entry.get("tick", index)),
        time=float(entry.get("time", 0.0)),
        timestamp=float(entry.get("timestamp", 0.0)),
        phase=entry.get("phase", "running"),
        is_complete=bool(entry.get("is_complete", False)),
        racers=racers,
        shape_parameter=None if shape is None else float(shape),
        final_times={str(label): float(value) for label, value in (entry.get("final_times") or {}).items()},
    )
