"""
Test configuration defaults, validation and YAML loading.
"""

import tempfile
from pathlib import Path

import pytest

from lanemap.config import (
    ConfigError,
    LaneMapConfig,
    load_config,
    save_config,
)


def test_defaults():
    config = LaneMapConfig()
    assert config.max_terms == 800
    assert config.lane_sim_threshold == 0.28
    assert config.k == 2
    assert config.edge_min_weight == 0.35
    assert config.chronological is True


def test_invalid_values_rejected():
    with pytest.raises(ConfigError):
        LaneMapConfig(k=0)
    with pytest.raises(ConfigError):
        LaneMapConfig(max_terms=-5)
    # ConfigError is also a ValueError
    with pytest.raises(ValueError):
        LaneMapConfig(k=-1)


def test_unreachable_threshold_is_allowed():
    assert LaneMapConfig(lane_sim_threshold=1.5).lane_sim_threshold == 1.5


def test_from_dict_ignores_unknown_keys():
    config = LaneMapConfig.from_dict({"k": 4, "layout_width": 980})
    assert config.k == 4


def test_load_config_file_and_overrides():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "lanemap.yaml"
        path.write_text("k: 3\nlane_sim_threshold: 0.5\nmax_terms: 100\n")

        config = load_config(path, max_terms=50, k=None)
        assert config.k == 3
        assert config.lane_sim_threshold == 0.5
        assert config.max_terms == 50


def test_load_config_missing_file_uses_defaults():
    assert load_config("/nonexistent/lanemap.yaml") == LaneMapConfig()
    assert load_config() == LaneMapConfig()


def test_load_config_rejects_non_mapping():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "bad.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError):
            load_config(path)


def test_save_then_load():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "config.yaml"
        config = LaneMapConfig(k=5, chronological=False)
        save_config(config, path)
        assert load_config(path) == config
