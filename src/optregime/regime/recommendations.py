# src/optregime/regime/recommendations.py
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import List, Optional, Sequence

from optregime.data.validation.validators import ValidationError
from optregime.options.models.black_scholes import bs_greeks, bs_price
from optregime.options.models.option_base import require_positive
from optregime.options.schemas import Greeks
from optregime.regime.enums import (
    MarketCondition,
    TimeDecay,
    Trend,
    VolatilityBias,
    VolatilityLevel,
)
from optregime.regime.schemas import (
    BlackScholesAnalysis,
    MarketRegime,
    OptimalEntry,
    RiskReward,
    StrategyRecommendation,
)
from optregime.strategies.schemas import Strategy

LOGGER = logging.getLogger(__name__)

MIN_TIME_TO_EXPIRY = 0.001
SECONDS_PER_YEAR = 365 * 24 * 3600

BASE_CONFIDENCE = 50.0
MIN_RECOMMENDED_CONFIDENCE = 60.0
MAX_RECOMMENDATIONS = 3

FALLBACK_MAX_PROFIT = 1000.0
FALLBACK_MAX_LOSS = 500.0
BASE_PROBABILITY = 50.0
MAX_PROBABILITY = 85.0

NOTABLE_THETA = 0.1
OVERPRICED_EDGE = -0.5


def _resolve_as_of(as_of: Optional[datetime]) -> datetime:
    as_of = as_of or datetime.now(timezone.utc)
    if as_of.tzinfo is None:
        as_of = as_of.replace(tzinfo=timezone.utc)
    return as_of


def time_to_expiry(expiration: date, as_of: Optional[datetime] = None) -> float:
    """
    Years from as_of to expiry midnight UTC, floored at 0.001 so already
    expired legs still price.
    """
    as_of = _resolve_as_of(as_of)
    expiry = datetime(
        expiration.year, expiration.month, expiration.day, tzinfo=timezone.utc
    )
    years = (expiry - as_of).total_seconds() / SECONDS_PER_YEAR
    return max(MIN_TIME_TO_EXPIRY, years)


def _regime_matches(strategy: Strategy, regime: MarketRegime) -> bool:
    return strategy.regime is not None and strategy.regime is regime.type


def _trend_matches(strategy: Strategy, regime: MarketRegime) -> bool:
    return strategy.market_condition is not None and strategy.market_condition.matches(
        regime.trend
    )


def _as_amount(value, fallback: float) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return fallback


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def calculate_strategy_confidence(
    strategy: Strategy,
    regime: MarketRegime,
    edge: float,
    greeks: Greeks,
) -> float:
    confidence = BASE_CONFIDENCE

    if _regime_matches(strategy, regime):
        confidence += 20
    if _trend_matches(strategy, regime):
        confidence += 15

    if edge > 0:
        confidence += min(20.0, edge * 100)
    else:
        confidence += max(-20.0, edge * 100)

    if (
        strategy.volatility_bias is VolatilityBias.LONG
        and regime.volatility is VolatilityLevel.HIGH
    ):
        confidence += 10
    if (
        strategy.volatility_bias is VolatilityBias.SHORT
        and regime.volatility is VolatilityLevel.LOW
    ):
        confidence += 10

    if strategy.time_decay is TimeDecay.POSITIVE and abs(greeks.theta) > NOTABLE_THETA:
        confidence += 5

    return max(0.0, min(100.0, confidence))


def calculate_risk_reward(strategy: Strategy, regime: MarketRegime) -> RiskReward:
    probability = BASE_PROBABILITY
    if _regime_matches(strategy, regime):
        probability += 15
    if _trend_matches(strategy, regime):
        probability += 10

    return RiskReward(
        max_profit=_as_amount(strategy.max_profit, FALLBACK_MAX_PROFIT),
        max_loss=_as_amount(strategy.max_loss, FALLBACK_MAX_LOSS),
        probability_of_profit=min(MAX_PROBABILITY, probability),
    )


def generate_reasoning(
    strategy: Strategy,
    regime: MarketRegime,
    edge: float,
    greeks: Greeks,
) -> List[str]:
    reasoning = [
        f"{regime.type.value} regime detected with {regime.confidence:.0f}% confidence"
    ]

    if _regime_matches(strategy, regime):
        reasoning.append(
            f"Strategy perfectly aligned with current {regime.type.value} market regime"
        )

    if edge > 0:
        reasoning.append(
            f"Options appear underpriced by ${edge:.2f} based on Black-Scholes model"
        )
    elif edge < OVERPRICED_EDGE:
        reasoning.append(
            f"Options may be overpriced by ${abs(edge):.2f} - consider waiting"
        )

    if (
        regime.trend is Trend.BULLISH
        and strategy.market_condition is MarketCondition.BULLISH
    ):
        reasoning.append(
            f"Bullish strategy matches current upward momentum of {regime.momentum:.1f}%"
        )

    if abs(greeks.theta) > NOTABLE_THETA:
        direction = "working against" if greeks.theta < 0 else "working for"
        reasoning.append(
            f"High time decay ({greeks.theta:.3f}) - time is {direction} this position"
        )

    if (
        regime.volatility is VolatilityLevel.HIGH
        and strategy.volatility_bias is VolatilityBias.LONG
    ):
        reasoning.append("High volatility environment favors volatility-long strategies")

    return reasoning


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def analyze_strategy(
    strategy: Strategy,
    stock_price: float,
    regime: MarketRegime,
    risk_free_rate: float = 0.05,
    as_of: Optional[datetime] = None,
) -> StrategyRecommendation:
    """
    Score one strategy against the regime.

    Only the first leg is priced. Its volatility is not solved from the
    quote but assumed from the regime's volatility label
    (low 0.15, medium 0.25, high 0.40).
    """
    require_positive(stock_price=stock_price)
    if not strategy.legs:
        raise ValidationError(f"strategy '{strategy.id}' has no legs")

    leg = strategy.primary_leg
    T = time_to_expiry(leg.expiration, as_of)
    sigma = regime.volatility.assumed_iv

    theoretical_price = bs_price(stock_price, leg.strike, risk_free_rate, sigma, T, leg.type)
    greeks = bs_greeks(stock_price, leg.strike, risk_free_rate, sigma, T, leg.type)
    edge = theoretical_price - leg.price

    confidence = calculate_strategy_confidence(strategy, regime, edge, greeks)
    LOGGER.debug(
        "strategy=%s T=%.4f sigma=%.2f theo=%.4f market=%.4f edge=%.4f confidence=%.1f",
        strategy.id,
        T,
        sigma,
        theoretical_price,
        leg.price,
        edge,
        confidence,
    )

    return StrategyRecommendation(
        strategy=strategy,
        confidence=confidence,
        reasoning=generate_reasoning(strategy, regime, edge, greeks),
        optimal_entry=OptimalEntry(
            price=theoretical_price,
            implied_volatility=sigma,
            time_to_expiry=T,
        ),
        risk_reward=calculate_risk_reward(strategy, regime),
        black_scholes_analysis=BlackScholesAnalysis(
            theoretical_price=theoretical_price,
            market_price=leg.price,
            edge=edge,
            greeks=greeks,
        ),
    )


def filter_strategies(
    regime: MarketRegime, catalog: Sequence[Strategy]
) -> List[Strategy]:
    """Same regime type, and a market condition equal to the trend or neutral."""
    return [
        s
        for s in catalog
        if _regime_matches(s, regime)
        and (_trend_matches(s, regime) or s.market_condition is MarketCondition.NEUTRAL)
    ]


def get_strategy_recommendations(
    regime: MarketRegime,
    stock_price: float,
    catalog: Sequence[Strategy],
    risk_free_rate: float = 0.05,
    as_of: Optional[datetime] = None,
) -> List[StrategyRecommendation]:
    """
    Rank catalog strategies for the regime; at most three, best first.

    Strategies scoring 60 or less are dropped. Ranking key is
    0.6 * confidence + 0.4 * probability_of_profit.
    """
    as_of = _resolve_as_of(as_of)
    candidates = filter_strategies(regime, catalog)

    recommendations = []
    for strategy in candidates:
        rec = analyze_strategy(strategy, stock_price, regime, risk_free_rate, as_of)
        if rec.confidence > MIN_RECOMMENDED_CONFIDENCE:
            recommendations.append(rec)

    ranked = sorted(recommendations, key=lambda r: r.ranking_score, reverse=True)

    LOGGER.info(
        "Regime %s/%s: %s of %s strategies matched, %s above confidence cut",
        regime.type.value,
        regime.trend.value,
        len(candidates),
        len(catalog),
        len(recommendations),
    )
    return ranked[:MAX_RECOMMENDATIONS]
