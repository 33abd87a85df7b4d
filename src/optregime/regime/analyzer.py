# src/optregime/regime/analyzer.py
"""
Heuristic market-regime classification.

The trailing price series is cut into three overlapping windows (last 5,
20 and 60 bars). Each window gets a strength score

    strength = 0.7 * trend_consistency + 0.3 * volume_confirmation

and the strongest window becomes the dominant regime. Its momentum and
annualised volatility are then bucketed into trend / volatility labels.
Thresholds are fixed; they are part of the observable output.
"""
from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np

from optregime.data.schemas.market import PricePoint
from optregime.data.validation.validators import coerce_price_history
from optregime.options.models.option_base import require_positive
from optregime.regime.enums import RegimeType, Trend, VolatilityLevel
from optregime.regime.schemas import MarketRegime, WindowStats

LOGGER = logging.getLogger(__name__)

TRADING_DAYS = 252

WINDOWS = (
    (RegimeType.SHORT_TERM, 5),
    (RegimeType.MEDIUM_TERM, 20),
    (RegimeType.LONG_TERM, 60),
)

CONSISTENCY_WEIGHT = 0.7
VOLUME_WEIGHT = 0.3

BULLISH_MOMENTUM = 10.0
BEARISH_MOMENTUM = -10.0
HIGH_VOLATILITY = 0.30
MEDIUM_VOLATILITY = 0.15
MAX_CONFIDENCE = 95.0


# ---------------------------------------------------------------------------
# Window statistics
# ---------------------------------------------------------------------------


def calculate_returns(points: Sequence[PricePoint]) -> np.ndarray:
    """Simple close-to-close returns; empty for fewer than two points."""
    closes = np.array([p.close for p in points], dtype=float)
    if closes.size < 2:
        return np.empty(0, dtype=float)
    return np.diff(closes) / closes[:-1]


def calculate_volatility(returns: np.ndarray) -> float:
    """Annualised population standard deviation of returns (0 if empty)."""
    returns = np.asarray(returns, dtype=float)
    if returns.size == 0:
        return 0.0
    variance = np.mean((returns - returns.mean()) ** 2)
    return float(np.sqrt(variance * TRADING_DAYS))


def calculate_momentum(points: Sequence[PricePoint]) -> float:
    """Percent change from the first to the last close of the window."""
    if len(points) < 2:
        return 0.0
    start = points[0].close
    end = points[-1].close
    return float((end - start) / start * 100.0)


def calculate_trend_consistency(returns: np.ndarray) -> float:
    """Share of returns agreeing with the majority direction (0 if empty)."""
    returns = np.asarray(returns, dtype=float)
    if returns.size == 0:
        return 0.0
    positive = int(np.count_nonzero(returns > 0))
    negative = int(np.count_nonzero(returns < 0))
    return max(positive, negative) / returns.size


def calculate_volume_confirmation(points: Sequence[PricePoint]) -> float:
    """Last bar's volume relative to the window average, capped at 1."""
    if len(points) < 2:
        return 0.5
    avg_volume = float(np.mean([p.volume for p in points]))
    if avg_volume <= 0.0:
        return 0.0
    return min(1.0, points[-1].volume / avg_volume)


def compute_window_stats(
    points: Sequence[PricePoint], regime_type: RegimeType
) -> WindowStats:
    returns = calculate_returns(points)
    consistency = calculate_trend_consistency(returns)
    volume = calculate_volume_confirmation(points)

    return WindowStats(
        type=regime_type,
        n_points=len(points),
        volatility=calculate_volatility(returns),
        momentum=calculate_momentum(points),
        trend_consistency=consistency,
        volume_confirmation=volume,
        strength=consistency * CONSISTENCY_WEIGHT + volume * VOLUME_WEIGHT,
    )


def compute_all_windows(points: Sequence[PricePoint]) -> List[WindowStats]:
    return [
        compute_window_stats(points[-size:], regime_type)
        for regime_type, size in WINDOWS
    ]


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


def classify_trend(momentum: float) -> Trend:
    if momentum > BULLISH_MOMENTUM:
        return Trend.BULLISH
    if momentum < BEARISH_MOMENTUM:
        return Trend.BEARISH
    return Trend.NEUTRAL


def classify_volatility(volatility: float) -> VolatilityLevel:
    if volatility > HIGH_VOLATILITY:
        return VolatilityLevel.HIGH
    if volatility > MEDIUM_VOLATILITY:
        return VolatilityLevel.MEDIUM
    return VolatilityLevel.LOW


def select_dominant_window(windows: Sequence[WindowStats]) -> WindowStats:
    """Highest strength wins; ties keep the shorter window."""
    dominant = windows[0]
    for w in windows[1:]:
        if w.strength > dominant.strength:
            dominant = w
    return dominant


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def analyze_regime(price_series, current_price: float) -> MarketRegime:
    """
    Classify the price history into a MarketRegime.

    Parameters
    ----------
    price_series : sequence of PricePoint, dicts, or pd.DataFrame
        Chronological OHLCV bars. At least 60 bars give full resolution;
        shorter histories degrade to neutral statistics per window.
    current_price : float
        Latest traded price of the underlying (> 0).
    """
    require_positive(current_price=current_price)
    points = coerce_price_history(price_series)

    windows = compute_all_windows(points)
    for w in windows:
        LOGGER.debug(
            "window=%s n=%s vol=%.4f momentum=%.3f strength=%.4f",
            w.type.value,
            w.n_points,
            w.volatility,
            w.momentum,
            w.strength,
        )

    dominant = select_dominant_window(windows)

    return MarketRegime(
        type=dominant.type,
        trend=classify_trend(dominant.momentum),
        volatility=classify_volatility(dominant.volatility),
        momentum=dominant.momentum,
        confidence=min(MAX_CONFIDENCE, dominant.strength * 100.0),
        timeframe=dominant.type.timeframe,
    )
