from descent_race.config import RACE_CONFIG, env_float, get_config, load_config


def test_get_config_walks_dot_paths():
    config = {"simulation": {"fps": 30}}
    assert get_config("simulation.fps", config=config) == 30


def test_get_config_missing_key_returns_default(capsys):
    config = {"simulation": {"fps": 30}}
    assert get_config("simulation.missing", 7, config=config) == 7
    assert "Warning" in capsys.readouterr().out
    assert get_config("simulation.fps.deeper", 1, config=config) == 1


def test_shipped_config_values():
    assert RACE_CONFIG is not None
    assert get_config("simulation.speed_multiplier") == 0.5
    assert get_config("simulation.shape_parameter") == 0.2
    assert get_config("curves.Straight Line.base_time") == 2.5
    assert get_config("curves.Parametric Cycloid.color") == "#f59e0b"
    assert get_config("render.path_samples") == 101


def test_env_float_overrides(monkeypatch):
    monkeypatch.delenv("DESCENT_TEST_VALUE", raising=False)
    assert env_float("DESCENT_TEST_VALUE", 0.3) == 0.3

    monkeypatch.setenv("DESCENT_TEST_VALUE", "0.7")
    assert env_float("DESCENT_TEST_VALUE", 0.3) == 0.7

    for raw in ("fast", "inf", "nan", "  "):
        monkeypatch.setenv("DESCENT_TEST_VALUE", raw)
        assert env_float("DESCENT_TEST_VALUE", 0.3) == 0.3


def test_load_config_missing_or_broken(tmp_path, capsys):
    assert load_config(tmp_path / "missing.json") is None
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_config(broken) is None
    assert "ERROR" in capsys.readouterr().out


def test_load_config_reads_file(tmp_path):
    path = tmp_path / "race.json"
    path.write_text('{"simulation": {"fps": 24}}', encoding="utf-8")
    assert get_config("simulation.fps", config=load_config(path)) == 24
