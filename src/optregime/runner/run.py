from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List

import pandas as pd

from optregime.data.schemas.market import PricePoint
from optregime.data.validation.validators import PRICE_COLUMNS, coerce_price_history
from optregime.regime.pipeline import perform_regime_analysis
from optregime.regime.schemas import RegimeAnalysis
from optregime.runner.config.loader import load_config
from optregime.runner.config.models import AnalysisConfig
from optregime.strategies.catalog import default_catalog, load_catalog
from optregime.strategies.schemas import Strategy

LOGGER = logging.getLogger(__name__)


# ======================================================================
# Load price history
# ======================================================================


def _load_price_history(path: str | Path) -> List[PricePoint]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Price history path does not exist: {path}")

    df = pd.read_csv(path)

    missing = PRICE_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(
            f"CSV missing required columns: {missing}\nPresent: {df.columns.tolist()}"
        )

    df["timestamp"] = pd.to_datetime(df["timestamp"], errors="raise", utc=True)
    df = df.sort_values("timestamp").reset_index(drop=True)
    return coerce_price_history(df)


def _valuation_time(cfg: AnalysisConfig) -> datetime:
    """One UTC instant shared by catalog expiries and time-to-expiry."""
    as_of = cfg.as_of or datetime.now(timezone.utc)
    if as_of.tzinfo is None:
        return as_of.replace(tzinfo=timezone.utc)
    return as_of.astimezone(timezone.utc)


def _load_strategies(cfg: AnalysisConfig, as_of: datetime) -> List[Strategy]:
    if cfg.catalog is None:
        LOGGER.info("No catalog configured, using built-in strategies")
        return default_catalog(as_of.date())
    return load_catalog(cfg.catalog)


# ======================================================================
# Main entrypoint
# ======================================================================


def run_analysis(cfg: AnalysisConfig) -> RegimeAnalysis:
    if cfg.price_history is None:
        raise ValueError("Config must provide `price_history`")

    LOGGER.info("Loading price history: %s", cfg.price_history)
    points = _load_price_history(cfg.price_history)

    current_price = cfg.current_price
    if current_price is None:
        current_price = points[-1].close
        LOGGER.info("Using last close as current price: %s", current_price)

    as_of = _valuation_time(cfg)
    strategies = _load_strategies(cfg, as_of)

    analysis = perform_regime_analysis(
        points,
        current_price,
        strategies,
        risk_free_rate=cfg.risk_free_rate,
        as_of=as_of,
    )

    if cfg.save.directory:
        _persist_results(cfg, analysis)

    return analysis


def run_from_config(
    path: str | Path,
    save_dir: str | Path | None = None,
) -> RegimeAnalysis:
    LOGGER.info("Loading config: %s", path)
    cfg = load_config(path)

    if save_dir is not None:
        cfg.save.directory = str(save_dir)

    return run_analysis(cfg)


# ======================================================================
# Save outputs
# ======================================================================


def _persist_results(cfg: AnalysisConfig, analysis: RegimeAnalysis) -> Path:
    out_dir = Path(cfg.save.directory)
    out_dir.mkdir(parents=True, exist_ok=True)

    out_path = out_dir / cfg.save.filename
    LOGGER.info("Saving analysis to: %s", out_path)

    payload = {
        "name": cfg.name,
        "symbol": cfg.symbol,
        "analysis": analysis.model_dump(by_alias=True, mode="json"),
    }
    with open(out_path, "w") as f:
        json.dump(payload, f, indent=2)

    return out_path
