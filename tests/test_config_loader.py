"""Tests for config loading and validation."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from core.config_loader import ConfigValidationError, configure_logging, load_config

REPO_ROOT = Path(__file__).resolve().parents[1]


def _config_text(log_level: str = "info") -> str:
    return (
        "simulation: minmax_game\n"
        "params:\n"
        "  canvas_width: 120\n"
        "  canvas_height: 90\n"
        "run:\n"
        "  steps: 3\n"
        "  random_seed: 1\n"
        "logging:\n"
        "  log_interval: 2\n"
        f"  log_level: {log_level}\n"
        "  experiment_name: demo\n"
    )


def test_shipped_config_loads() -> None:
    config = load_config(REPO_ROOT / "configs" / "minmax_game.yaml")

    assert config["simulation"] == "minmax_game"
    assert config["seed"] == 42
    assert config["simulation_config"]["canvas_width"] == 800
    assert config["simulation_config"]["loss_history_limit"] == 100


def test_defaults_are_merged_and_level_normalized(tmp_path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(_config_text(), encoding="utf-8")

    config = load_config(path)

    assert config["logging_config"]["log_level"] == "INFO"
    assert config["run_config"] == {"steps": 3, "random_seed": 1}
    params = config["simulation_config"]
    assert params["resolution"] == 5
    assert params["smoothing_temperature"] == pytest.approx(0.2)


def test_missing_file_is_reported(tmp_path) -> None:
    with pytest.raises(ConfigValidationError, match="not found"):
        load_config(tmp_path / "absent.yaml")


def test_malformed_yaml_is_reported(tmp_path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("simulation: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigValidationError, match="Failed to parse YAML"):
        load_config(path)


def test_unknown_top_level_section_is_rejected(tmp_path) -> None:
    path = tmp_path / "extra.yaml"
    path.write_text(_config_text() + "evolution:\n  population_size: 4\n", encoding="utf-8")

    with pytest.raises(ConfigValidationError, match="Unknown top-level"):
        load_config(path)


def test_unknown_log_level_is_rejected(tmp_path) -> None:
    path = tmp_path / "level.yaml"
    path.write_text(_config_text("chatty"), encoding="utf-8")

    with pytest.raises(ConfigValidationError, match="log_level"):
        load_config(path)


def test_configure_logging_sets_root_level(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, int] = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))

    configure_logging({"log_level": "warning"})

    assert captured["level"] == logging.WARNING
