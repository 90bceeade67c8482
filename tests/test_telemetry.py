import json

import pytest

from descent_race.engine import TelemetryCollector, TelemetryFrame, TelemetryRacerFrame
from descent_race.engine.telemetry import dump_frames, frames_to_dicts, load_frames


def _frame(tick: int = 0) -> TelemetryFrame:
    return TelemetryFrame(
        tick=tick,
        time=0.25 * tick,
        timestamp=16.0 * tick,
        phase="running",
        is_complete=False,
        racers=[
            TelemetryRacerFrame(
                label="Straight Line",
                progress=0.1,
                position=(0.1, 0.1),
                distance=1.2728,
                rank=1,
                rank_delta="up",
            )
        ],
    )


def test_collector_records_exports_and_clears():
    collector = TelemetryCollector()
    collector.record_frame(_frame(0))
    collector.record_frame(_frame(1))

    exported = collector.export()
    assert isinstance(exported, tuple)
    assert [frame.tick for frame in exported] == [0, 1]

    collector.clear()
    assert collector.export() == ()


def test_frames_to_dicts_is_json_ready():
    payload = frames_to_dicts([_frame(2)])
    assert payload[0]["racers"][0]["label"] == "Straight Line"
    json.dumps(payload)


def test_dump_and_load(tmp_path):
    path = tmp_path / "nested" / "race.json"
    frames = [_frame(0), _frame(1)]
    dump_frames(frames, path)
    assert load_frames(path) == frames


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(RuntimeError):
        load_frames(tmp_path / "missing.json")


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        '{"tick": 0}',
        "[1, 2]",
        '[{"racers": [{"progress": 0.5}]}]',
        '[{"time": "soon"}]',
        '[{"final_times": {"Parabola": "late"}}]',
        '[{"shape_parameter": "wide"}]',
    ],
)
def test_load_malformed_file_raises(tmp_path, content):
    path = tmp_path / "broken.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(RuntimeError):
        load_frames(path)


def test_dump_keeps_shape_and_final_times(tmp_path):
    frame = _frame(3)
    frame.is_complete = True
    frame.shape_parameter = 0.8
    frame.final_times = {"Straight Line": 2.5, "Parametric Cycloid": 3.6}
    path = tmp_path / "race.json"
    dump_frames([frame], path)

    loaded = load_frames(path)[0]
    assert loaded.shape_parameter == 0.8
    assert loaded.final_times == {"Straight Line": 2.5, "Parametric Cycloid": 3.6}


def test_dumps_without_shape_load_with_defaults(tmp_path):
    path = tmp_path / "old.json"
    path.write_text('[{"tick": 0, "time": 0.0, "racers": []}]', encoding="utf-8")

    loaded = load_frames(path)[0]
    assert loaded.shape_parameter is None
    assert loaded.final_times == {}
