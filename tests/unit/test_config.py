import json
from unittest.mock import patch

import pytest

from heic2jpg.config_data import ConvertConfig
from heic2jpg.errors import ConfigError


def test_defaults():
    cfg = ConvertConfig()
    assert cfg.output_dir == "."
    assert cfg.quality == 100
    assert cfg.verbose is False
    assert cfg.max_workers is None


def test_from_dict_and_json():
    cfg = ConvertConfig.from_json('{"output_dir": "out", "quality": 80, "verbose": true, "max_workers": 3}')
    assert cfg == ConvertConfig(output_dir="out", quality=80, verbose=True, max_workers=3)

    assert ConvertConfig.from_dict({}) == ConvertConfig()


def test_from_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"quality": 55}))

    cfg = ConvertConfig.from_file(path)

    assert cfg.quality == 55
    assert cfg.output_dir == "."


def test_from_file_missing(tmp_path):
    with pytest.raises(ConfigError):
        ConvertConfig.from_file(tmp_path / "nope.json")


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"quality": "high"}'])
def test_from_file_invalid(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content)
    with pytest.raises(ConfigError):
        ConvertConfig.from_file(path)


def test_resolve_max_workers():
    assert ConvertConfig(max_workers=5).resolve_max_workers() == 5
    with patch("heic2jpg.batch.os.cpu_count", return_value=4):
        assert ConvertConfig().resolve_max_workers() == 8


@pytest.mark.parametrize("workers", [0, -2])
def test_resolve_max_workers_rejects_non_positive(workers):
    # 0 must not silently fall back to the default
    with pytest.raises(ValueError):
        ConvertConfig(max_workers=workers).resolve_max_workers()


@pytest.mark.parametrize("data", [
    {"max_workers": -2},
    {"max_workers": 0},
    {"max_workers": "many"},
    {"max_workers": True},
    {"verbose": "false"},
    {"verbose": 1},
    {"quality": "high"},
    {"quality": 90.5},
    {"output_dir": 5},
])
def test_from_dict_rejects_bad_values(data):
    with pytest.raises(ValueError):
        ConvertConfig.from_dict(data)


def test_from_file_reports_bad_values(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"max_workers": -2}))

    with pytest.raises(ConfigError) as exc_info:
        ConvertConfig.from_file(path)
    assert "max_workers" in str(exc_info.value)


@pytest.mark.parametrize("value", [None, ""])
def test_from_dict_empty_output_dir_is_default(value):
    assert ConvertConfig.from_dict({"output_dir": value}).output_dir == "."


def test_from_dict_accepts_valid_values():
    cfg = ConvertConfig.from_dict({"max_workers": None, "verbose": False, "quality": 1})
    assert cfg.max_workers is None
    assert cfg.verbose is False
    assert cfg.quality == 1


def test_ensure_output_dir_creates_parents(tmp_path):
    out = tmp_path / "a" / "b" / "c"
    ConvertConfig(output_dir=str(out)).ensure_output_dir()
    assert out.is_dir()

    # Existing directory is fine
    ConvertConfig(output_dir=str(out)).ensure_output_dir()


def test_ensure_output_dir_default_is_noop(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    ConvertConfig().ensure_output_dir()
    assert list(tmp_path.iterdir()) == []


def test_ensure_output_dir_fails_on_file(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(OSError):
        ConvertConfig(output_dir=str(blocker / "sub")).ensure_output_dir()
