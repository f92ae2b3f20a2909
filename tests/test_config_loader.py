"""Tests for YAML configuration helpers."""

from __future__ import annotations

import pytest

from pnc_simulator.utils import load_config, save_config, update_config


def test_packaged_config_loads() -> None:
    config = load_config()
    assert config["population"]["n_subjects"] == 50000
    assert "received_comprehensive_pnc" in config["variables"]


def test_missing_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yml")


def test_update_config_merges_nested_without_mutating() -> None:
    config = {"population": {"n_subjects": 10, "provider_ratio": 5}, "random_seed": 1}

    merged = update_config(config, {"population": {"n_subjects": 20}})

    assert merged["population"] == {"n_subjects": 20, "provider_ratio": 5}
    assert config["population"]["n_subjects"] == 10


def test_save_and_reload(tmp_path) -> None:
    config = {"population": {"n_subjects": 3}, "output": {"columns": ["subject_id"]}}
    path = tmp_path / "nested" / "config.yml"

    save_config(config, path)

    assert load_config(path) == config
