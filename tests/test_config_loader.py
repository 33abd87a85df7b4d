from __future__ import annotations

from pathlib import Path
import json

import pytest

from optregime.runner.config.loader import load_config
from optregime.runner.config.models import AnalysisConfig


def test_load_config_yaml(tmp_path: Path):
    cfg_path = tmp_path / "cfg.yaml"
    cfg_path.write_text(
        """
name: test_run
symbol: ABC
price_history: data/prices.csv
catalog: /abs/catalog.yaml
current_price: 101.5
risk_free_rate: 0.03
as_of: "2024-01-02T16:00:00Z"
save:
  directory: out
"""
    )
    cfg = load_config(cfg_path)
    assert isinstance(cfg, AnalysisConfig)
    assert cfg.name == "test_run"
    assert cfg.symbol == "ABC"
    assert cfg.price_history == str(tmp_path / "data" / "prices.csv")
    assert cfg.catalog == "/abs/catalog.yaml"
    assert cfg.current_price == 101.5
    assert cfg.risk_free_rate == 0.03
    assert cfg.as_of.year == 2024 and cfg.as_of.tzinfo is not None
    assert cfg.save.directory == "out"
    assert cfg.save.filename == "regime_analysis.json"


def test_load_config_json_defaults(tmp_path: Path):
    cfg_path = tmp_path / "cfg.json"
    cfg_path.write_text(json.dumps({"name": "abc"}))
    cfg = load_config(cfg_path)
    assert cfg.name == "abc"
    assert cfg.price_history is None
    assert cfg.catalog is None
    assert cfg.risk_free_rate == 0.05
    assert cfg.save.directory is None


def test_load_config_errors(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")

    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(ValueError, match="Failed to parse"):
        load_config(bad)

    invalid = tmp_path / "invalid.json"
    invalid.write_text(json.dumps({"current_price": -1}))
    with pytest.raises(ValueError, match="Invalid AnalysisConfig"):
        load_config(invalid)

    extra_save = tmp_path / "extra.json"
    extra_save.write_text(json.dumps({"save": {"directory": "x", "format": "csv"}}))
    with pytest.raises(ValueError):
        load_config(extra_save)
