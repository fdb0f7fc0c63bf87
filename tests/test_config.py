"""Tests for YAML configuration loading."""

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).parent.parent / "src"))

from landmark_registration.acceleration import ParallelExecutor
from landmark_registration.registration import FrameCorrelator
from landmark_registration.utils.config import AppConfig, build_executor, load_config


def test_model_defaults():
    cfg = AppConfig()

    assert cfg.registration.overlap_threshold == 12
    assert cfg.registration.anchor_id == 0
    assert cfg.parallel.enabled is False
    assert cfg.parallel.n_workers is None
    assert cfg.logging.level == "INFO"
    assert cfg.logging.file is None


def test_default_yaml_matches_model_defaults():
    cfg = load_config(None)  # Load default.yaml
    assert cfg == AppConfig()


def test_parallel_profile():
    cfg = load_config("config/profiles/parallel.yaml")

    assert cfg.parallel.enabled is True
    assert cfg.parallel.n_workers == 4
    assert cfg.registration.overlap_threshold == 12


def test_debug_profile():
    cfg = load_config("config/profiles/debug.yaml")
    assert cfg.logging.level == "DEBUG"


def test_partial_yaml_keeps_other_defaults(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("registration:\n  overlap_threshold: 6\n", encoding="utf-8")

    cfg = load_config(path)

    assert cfg.registration.overlap_threshold == 6
    assert cfg.registration.anchor_id == 0
    assert cfg.parallel.enabled is False


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == AppConfig()


@pytest.mark.parametrize(
    "body",
    [
        "registration:\n  overlap_threshold: 1\n",
        "registration:\n  anchor_id: -3\n",
        "logging:\n  level: LOUD\n",
    ],
)
def test_invalid_values_raise_value_error(tmp_path, body):
    path = tmp_path / "bad.yaml"
    path.write_text(body, encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(path)


def test_missing_file(tmp_path):
    missing = tmp_path / "nope.yaml"
    assert load_config(missing) == AppConfig()
    with pytest.raises(FileNotFoundError):
        load_config(missing, allow_missing=False)


def test_build_executor_follows_parallel_settings():
    cfg = AppConfig()
    assert build_executor(cfg) is None

    cfg.parallel.enabled = True
    cfg.parallel.n_workers = 3
    executor = build_executor(cfg)
    assert isinstance(executor, ParallelExecutor)
    assert executor.n_workers == 3


def test_correlator_from_config(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("registration:\n  overlap_threshold: 8\n  anchor_id: 2\n", encoding="utf-8")

    correlator = FrameCorrelator.from_config(load_config(path))

    assert correlator.threshold == 8
    assert correlator.anchor_id == 2
