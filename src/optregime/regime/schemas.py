# src/optregime/regime/schemas.py
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from optregime.options.schemas import Greeks
from optregime.regime.enums import RegimeType, Trend, VolatilityLevel
from optregime.strategies.schemas import Strategy

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WindowStats(BaseModel):
    """
    Statistics for one trailing window of the price series.
    """

    model_config = _CAMEL

    type: RegimeType
    n_points: int = Field(..., ge=0)
    volatility: float = Field(..., ge=0.0, description="Annualised, sqrt(252).")
    momentum: float = Field(..., description="Percent change first -> last close.")
    trend_consistency: float = Field(..., ge=0.0, le=1.0)
    volume_confirmation: float = Field(..., ge=0.0, le=1.0)
    strength: float = Field(
        ..., ge=0.0, description="0.7*consistency + 0.3*volume."
    )


class MarketRegime(BaseModel):
    """
    Snapshot classification of the dominant regime window.
    """

    model_config = _CAMEL

    type: RegimeType
    trend: Trend
    volatility: VolatilityLevel
    momentum: float = Field(..., description="Percent.")
    confidence: float = Field(..., ge=0.0, le=100.0)
    timeframe: str


class OptimalEntry(BaseModel):
    model_config = _CAMEL

    price: float
    implied_volatility: float
    time_to_expiry: float


class RiskReward(BaseModel):
    model_config = _CAMEL

    max_profit: float
    max_loss: float
    probability_of_profit: float = Field(..., ge=0.0, le=85.0)


class BlackScholesAnalysis(BaseModel):
    model_config = _CAMEL

    theoretical_price: float
    market_price: float
    edge: float = Field(..., description="theoretical - market; > 0 is underpriced.")
    greeks: Greeks


class StrategyRecommendation(BaseModel):
    model_config = _CAMEL

    strategy: Strategy
    confidence: float = Field(..., ge=0.0, le=100.0)
    reasoning: List[str] = Field(default_factory=list)
    optimal_entry: OptimalEntry
    risk_reward: RiskReward
    black_scholes_analysis: BlackScholesAnalysis

    @property
    def ranking_score(self) -> float:
        return self.confidence * 0.6 + self.risk_reward.probability_of_profit * 0.4


class RegimeAnalysis(BaseModel):
    """
    Top-level result of one analysis pass.
    """

    model_config = _CAMEL

    current_regime: MarketRegime
    recommendations: List[StrategyRecommendation] = Field(
        default_factory=list, max_length=3
    )
    market_insights: List[str] = Field(default_factory=list)
    risk_factors: List[str] = Field(default_factory=list)
