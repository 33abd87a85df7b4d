# src/optregime/regime/pipeline.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from optregime.data.schemas.market import PricePoint
from optregime.data.validation.validators import coerce_price_history
from optregime.regime.analyzer import (
    analyze_regime,
    calculate_returns,
    calculate_volatility,
)
from optregime.regime.enums import RegimeType, VolatilityLevel
from optregime.regime.recommendations import get_strategy_recommendations
from optregime.regime.schemas import MarketRegime, RegimeAnalysis
from optregime.strategies.schemas import Strategy

LOGGER = logging.getLogger(__name__)

STRONG_MOMENTUM = 20.0
HIGH_CONFIDENCE = 80.0
LOW_CONFIDENCE = 70.0
VOLATILITY_SPIKE = 0.5
EXTREME_SHORT_TERM_MOMENTUM = 30.0
RECENT_WINDOW = 5


def generate_market_insights(regime: MarketRegime) -> List[str]:
    insights = [
        f"Market is in a {regime.type.value} {regime.trend.value} regime "
        f"with {regime.volatility.value} volatility"
    ]

    if regime.momentum > STRONG_MOMENTUM:
        insights.append("Strong upward momentum suggests continuation of bullish trend")
    elif regime.momentum < -STRONG_MOMENTUM:
        insights.append("Strong downward momentum indicates bearish pressure")

    if regime.volatility is VolatilityLevel.HIGH:
        insights.append(
            "High volatility creates opportunities for premium sellers and straddle buyers"
        )

    if regime.confidence > HIGH_CONFIDENCE:
        insights.append(
            "High confidence in regime analysis - signals are clear and consistent"
        )

    return insights


def identify_risk_factors(
    regime: MarketRegime, points: Sequence[PricePoint]
) -> List[str]:
    risks = []

    if regime.confidence < LOW_CONFIDENCE:
        risks.append("Low confidence in regime analysis - market signals are mixed")

    if regime.volatility is VolatilityLevel.HIGH:
        risks.append("High volatility increases risk of sudden price movements")

    recent_volatility = calculate_volatility(
        calculate_returns(points[-RECENT_WINDOW:])
    )
    if recent_volatility > VOLATILITY_SPIKE:
        risks.append("Recent volatility spike may indicate unstable market conditions")

    if (
        regime.type is RegimeType.SHORT_TERM
        and regime.momentum > EXTREME_SHORT_TERM_MOMENTUM
    ):
        risks.append("Extreme short-term momentum may lead to reversal")

    return risks


def perform_regime_analysis(
    price_series,
    current_price: float,
    catalog: Sequence[Strategy],
    risk_free_rate: float = 0.05,
    as_of: Optional[datetime] = None,
) -> RegimeAnalysis:
    """
    Full analysis pass: regime -> ranked recommendations -> insights/risks.

    Insights and risk factors describe the whole regime and do not depend
    on which strategies are in the catalog.
    """
    points = coerce_price_history(price_series)

    LOGGER.info("Analysing regime over %s bars (price=%s)", len(points), current_price)
    regime = analyze_regime(points, current_price)
    LOGGER.info(
        "Dominant regime: %s %s, %s volatility, confidence %.1f",
        regime.type.value,
        regime.trend.value,
        regime.volatility.value,
        regime.confidence,
    )

    recommendations = get_strategy_recommendations(
        regime,
        current_price,
        catalog,
        risk_free_rate=risk_free_rate,
        as_of=as_of,
    )

    return RegimeAnalysis(
        current_regime=regime,
        recommendations=recommendations,
        market_insights=generate_market_insights(regime),
        risk_factors=identify_risk_factors(regime, points),
    )
