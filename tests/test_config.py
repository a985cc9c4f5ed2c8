"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from svg2pts.configs.loader import (
    DEFAULTS_PATH,
    ConfigError,
    ConversionConfig,
    load_config,
    resolve_accuracy,
)
from svg2pts.resample.policies import ResampleMode


@pytest.fixture
def write_yaml(tmp_path: Path):
    def _write(text: str) -> Path:
        path = tmp_path / "cfg.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    return _write


class TestDefaults:
    def test_shipped_defaults_match_builtin(self) -> None:
        assert DEFAULTS_PATH.exists()
        assert load_config() == ConversionConfig()

    def test_default_values(self) -> None:
        cfg = load_config()
        assert cfg.distance == 0.0
        assert cfg.accuracy is None
        assert cfg.points == 0
        assert cfg.mode is ResampleMode.EXACT
        assert cfg.buffer_size == 8192
        assert cfg.logging.level == "WARNING"
        assert cfg.logging.json is False
        assert cfg.logging.file is None

    def test_empty_file_uses_builtin_defaults(self, write_yaml) -> None:
        assert load_config(write_yaml("")) == ConversionConfig()


class TestOverrides:
    def test_overrides_win(self, write_yaml) -> None:
        path = write_yaml("resample:\n  distance: 2.0\n  mode: even-split\n")
        cfg = load_config(path, {"distance": 0.5, "log_level": "debug"})
        assert cfg.distance == 0.5
        assert cfg.mode is ResampleMode.EVEN_SPLIT
        assert cfg.logging.level == "DEBUG"

    def test_none_values_ignored(self, write_yaml) -> None:
        path = write_yaml("resample:\n  points: 300\n")
        cfg = load_config(path, {"points": None, "accuracy": None})
        assert cfg.points == 300
        assert cfg.accuracy is None

    def test_partial_sections(self, write_yaml) -> None:
        cfg = load_config(write_yaml("output:\n  buffer_size: 1024\nlogging:\n  json: true\n"))
        assert cfg.buffer_size == 1024
        assert cfg.logging.json is True
        assert cfg.distance == 0.0


class TestValidation:
    @pytest.mark.parametrize(
        "overrides, match",
        [
            ({"distance": -1.0}, "distance"),
            ({"distance": float("nan")}, "distance"),
            ({"distance": "far"}, "distance"),
            ({"accuracy": 0.0}, "accuracy"),
            ({"accuracy": -0.1}, "accuracy"),
            ({"points": -5}, "points"),
            ({"points": 2.5}, "points"),
            ({"points": True}, "points"),
            ({"mode": "wobbly"}, "mode"),
            ({"buffer_size": 10}, "buffer_size"),
            ({"log_level": "LOUD"}, "log level"),
        ],
    )
    def test_invalid_override(self, overrides: dict, match: str) -> None:
        with pytest.raises(ConfigError, match=match):
            load_config(None, overrides)

    def test_root_must_be_mapping(self, write_yaml) -> None:
        with pytest.raises(ConfigError, match="mapping"):
            load_config(write_yaml("- a\n- b\n"))

    def test_section_must_be_mapping(self, write_yaml) -> None:
        with pytest.raises(ConfigError, match="resample"):
            load_config(write_yaml("resample: 3\n"))

    def test_malformed_yaml(self, write_yaml) -> None:
        with pytest.raises(ConfigError):
            load_config(write_yaml("resample: [unclosed\n"))

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")


class TestResolveAccuracy:
    def test_passthrough_default(self) -> None:
        assert resolve_accuracy(0.0, None) == 0.05

    def test_spaced_default(self) -> None:
        assert resolve_accuracy(5.0, None) == pytest.approx(0.2)

    def test_explicit_wins(self) -> None:
        assert resolve_accuracy(5.0, 0.3) == 0.3
        assert resolve_accuracy(0.0, 0.3) == 0.3
