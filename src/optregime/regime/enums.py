from __future__ import annotations

from enum import Enum


class RegimeType(str, Enum):
    """Time-scale of the dominant regime window."""

    SHORT_TERM = "short-term"
    MEDIUM_TERM = "medium-term"
    LONG_TERM = "long-term"

    @property
    def timeframe(self) -> str:
        if self is RegimeType.SHORT_TERM:
            return "1-7 days"
        if self is RegimeType.MEDIUM_TERM:
            return "1-8 weeks"
        if self is RegimeType.LONG_TERM:
            return "2-12 months"
        raise ValueError(f"Unhandled regime type: {self}")


class Trend(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class VolatilityLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def assumed_iv(self) -> float:
        """Implied volatility assumed when pricing a leg in this regime."""
        if self is VolatilityLevel.LOW:
            return 0.15
        if self is VolatilityLevel.MEDIUM:
            return 0.25
        if self is VolatilityLevel.HIGH:
            return 0.40
        raise ValueError(f"Unhandled volatility level: {self}")


class MarketCondition(str, Enum):
    """Market view a strategy is built for."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"
    VOLATILE = "volatile"

    def matches(self, trend: Trend) -> bool:
        return self.value == trend.value


class VolatilityBias(str, Enum):
    LONG = "long"
    SHORT = "short"
    NEUTRAL = "neutral"


class TimeDecay(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Complexity(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class LegAction(str, Enum):
    BUY = "buy"
    SELL = "sell"

