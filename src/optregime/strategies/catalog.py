# src/optregime/strategies/catalog.py
from __future__ import annotations

import json
import logging
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from optregime.strategies.schemas import Strategy

LOGGER = logging.getLogger(__name__)


def _leg(leg_id, option_type, strike, days, action, price, quantity=1):
    return {
        "id": leg_id,
        "type": option_type,
        "strike": strike,
        "days": days,
        "action": action,
        "quantity": quantity,
        "price": price,
    }


# ============================================================
# Built-in regime-tagged strategies
# Leg expirations are offsets in days from the valuation date.
# ============================================================

_DEFAULT_STRATEGIES: List[Dict[str, Any]] = [
    # ---------------- short-term (1-7 days) ----------------
    {
        "id": "short-term-momentum-call",
        "name": "Momentum Call",
        "description": "Quick directional play on short-term bullish momentum",
        "regime": "short-term",
        "market_condition": "bullish",
        "time_decay": "negative",
        "volatility_bias": "neutral",
        "complexity": "beginner",
        "legs": [_leg("1", "call", 180, 3, "buy", 2.50)],
        "max_profit": "Unlimited",
        "max_loss": 250,
        "break_even": [182.50],
    },
    {
        "id": "short-term-scalp-straddle",
        "name": "Scalp Straddle",
        "description": "Profit from short-term volatility spikes",
        "regime": "short-term",
        "market_condition": "volatile",
        "time_decay": "negative",
        "volatility_bias": "long",
        "complexity": "intermediate",
        "legs": [
            _leg("1a", "call", 175, 2, "buy", 3.20),
            _leg("1b", "put", 175, 2, "buy", 2.80),
        ],
        "max_profit": "Unlimited",
        "max_loss": 600,
        "break_even": [169, 181],
    },
    {
        "id": "short-term-bear-put",
        "name": "Quick Bear Put",
        "description": "Short-term bearish directional play",
        "regime": "short-term",
        "market_condition": "bearish",
        "time_decay": "negative",
        "volatility_bias": "neutral",
        "complexity": "beginner",
        "legs": [_leg("1", "put", 170, 5, "buy", 3.10)],
        "max_profit": 16690,
        "max_loss": 310,
        "break_even": [166.90],
    },
    # ---------------- medium-term (1-8 weeks) ----------------
    {
        "id": "swing-bull-call-spread",
        "name": "Swing Bull Call Spread",
        "description": "Moderate bullish play for swing trading timeframe",
        "regime": "medium-term",
        "market_condition": "bullish",
        "time_decay": "neutral",
        "volatility_bias": "short",
        "complexity": "intermediate",
        "legs": [
            _leg("1a", "call", 175, 21, "buy", 6.50),
            _leg("1b", "call", 185, 21, "sell", 2.30),
        ],
        "max_profit": 580,
        "max_loss": 420,
        "break_even": [179.20],
    },
    {
        "id": "swing-iron-condor",
        "name": "Swing Iron Condor",
        "description": "Range-bound strategy for sideways markets",
        "regime": "medium-term",
        "market_condition": "neutral",
        "time_decay": "positive",
        "volatility_bias": "short",
        "complexity": "advanced",
        "legs": [
            _leg("1a", "call", 185, 28, "sell", 3.20),
            _leg("1b", "call", 190, 28, "buy", 1.50),
            _leg("1c", "put", 165, 28, "sell", 2.80),
            _leg("1d", "put", 160, 28, "buy", 1.20),
        ],
        "max_profit": 330,
        "max_loss": 170,
        "break_even": [161.70, 188.30],
    },
    {
        "id": "swing-bear-put-spread",
        "name": "Swing Bear Put Spread",
        "description": "Medium-term bearish strategy with defined risk",
        "regime": "medium-term",
        "market_condition": "bearish",
        "time_decay": "neutral",
        "volatility_bias": "short",
        "complexity": "intermediate",
        "legs": [
            _leg("1a", "put", 175, 35, "buy", 5.80),
            _leg("1b", "put", 165, 35, "sell", 2.90),
        ],
        "max_profit": 710,
        "max_loss": 290,
        "break_even": [172.10],
    },
    # ---------------- long-term (2-12 months) ----------------
    {
        "id": "long-term-leap-call",
        "name": "LEAP Call",
        "description": "Long-term bullish position with high leverage",
        "regime": "long-term",
        "market_condition": "bullish",
        "time_decay": "negative",
        "volatility_bias": "long",
        "complexity": "beginner",
        "legs": [_leg("1", "call", 180, 180, "buy", 12.50)],
        "max_profit": "Unlimited",
        "max_loss": 1250,
        "break_even": [192.50],
    },
    {
        "id": "long-term-diagonal-spread",
        "name": "Diagonal Calendar Spread",
        "description": "Long-term position with income generation",
        "regime": "long-term",
        "market_condition": "neutral",
        "time_decay": "positive",
        "volatility_bias": "neutral",
        "complexity": "advanced",
        "legs": [
            _leg("1a", "call", 175, 21, "sell", 6.20),
            _leg("1b", "call", 180, 120, "buy", 9.80),
        ],
        "max_profit": 860,
        "max_loss": 360,
        "break_even": [183.60],
    },
    {
        "id": "long-term-protective-put",
        "name": "Protective Put (Long-term)",
        "description": "Long-term stock protection strategy",
        "regime": "long-term",
        "market_condition": "neutral",
        "time_decay": "negative",
        "volatility_bias": "long",
        "complexity": "beginner",
        "legs": [_leg("1", "put", 165, 90, "buy", 4.50)],
        "max_profit": "Unlimited",
        "max_loss": 450,
        "break_even": [160.50],
    },
    {
        "id": "long-term-covered-call",
        "name": "Covered Call (Long-term)",
        "description": "Income generation on long stock position",
        "regime": "long-term",
        "market_condition": "neutral",
        "time_decay": "positive",
        "volatility_bias": "short",
        "complexity": "beginner",
        "legs": [_leg("1", "call", 185, 60, "sell", 4.80)],
        # assumes the stock was bought at 175
        "max_profit": 1480,
        "max_loss": "Substantial",
        "break_even": [170.20],
    },
]


def default_catalog(as_of: Optional[date] = None) -> List[Strategy]:
    """
    Built-in strategy catalog with expirations relative to as_of (default: today in UTC).
    """
    as_of = as_of or datetime.now(timezone.utc).date()

    strategies = []
    for raw in _DEFAULT_STRATEGIES:
        legs = []
        for leg in raw["legs"]:
            leg = dict(leg)
            leg["expiration"] = as_of + timedelta(days=leg.pop("days"))
            legs.append(leg)
        strategies.append(Strategy.model_validate({**raw, "legs": legs}))
    return strategies


def load_catalog(path: str | Path) -> List[Strategy]:
    """
    Load a strategy catalog from YAML or JSON.

    The file holds either a list of strategies or a mapping with a
    'strategies' key. Keys may be snake_case or camelCase.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Catalog file does not exist: {path}")

    text = path.read_text()

    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            raw = yaml.safe_load(text)
        elif path.suffix.lower() == ".json":
            raw = json.loads(text)
        else:
            raise ValueError("Catalog path must be YAML or JSON.")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ValueError(f"Failed to parse catalog {path}: {e}") from e

    if isinstance(raw, dict):
        raw = raw.get("strategies")
    if not isinstance(raw, list):
        raise ValueError(
            f"Catalog {path} must be a list of strategies or have a 'strategies' list."
        )

    strategies = []
    for i, item in enumerate(raw):
        try:
            strategies.append(Strategy.model_validate(item))
        except ValidationError as e:
            raise ValueError(f"Invalid strategy #{i} in {path}: {e}") from e

    LOGGER.info("Loaded %s strategies from %s", len(strategies), path)
    return strategies
