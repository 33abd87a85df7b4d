from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from optregime.runner.config.models import AnalysisConfig


def load_config(path: str | Path) -> AnalysisConfig:
    """
    Load an AnalysisConfig from YAML or JSON.

    Relative data paths (price_history, catalog) are resolved against the
    config file's directory. Validates using Pydantic v2.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    text = path.read_text()

    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            raw = yaml.safe_load(text)
        elif path.suffix.lower() == ".json":
            raw = json.loads(text)
        else:
            raise ValueError("Config path must be YAML or JSON.")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ValueError(f"Failed to parse config: {e}") from e

    try:
        cfg = AnalysisConfig.model_validate(raw or {})
    except ValidationError as e:
        raise ValueError(f"Invalid AnalysisConfig: {e}") from e

    for field in ("price_history", "catalog"):
        value = getattr(cfg, field)
        if value is not None and not Path(value).is_absolute():
            setattr(cfg, field, str(path.parent / value))

    return cfg
