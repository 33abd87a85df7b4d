# src/optregime/strategies/schemas.py
from __future__ import annotations

from datetime import date
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from optregime.options.models.option_base import OptionType
from optregime.regime.enums import (
    Complexity,
    LegAction,
    MarketCondition,
    RegimeType,
    TimeDecay,
    VolatilityBias,
)

# Numeric amount or a label such as "Unlimited" / "Substantial".
ProfitOrLoss = Union[float, str]


class StrategyLeg(BaseModel):
    """
    A single option position inside a strategy.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    type: OptionType
    strike: float = Field(..., gt=0.0)
    expiration: date = Field(..., description="Expiry date (ISO yyyy-mm-dd).")
    action: LegAction
    quantity: int = Field(1, ge=1)
    price: float = Field(..., ge=0.0, description="Quoted premium per share.")


class Strategy(BaseModel):
    """
    Catalog entry scored by the regime analyzer. Never mutated.

    Only legs[0] is priced when scoring; the other legs are descriptive.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    id: str
    name: str
    description: Optional[str] = None

    regime: Optional[RegimeType] = None
    market_condition: Optional[MarketCondition] = None
    time_decay: Optional[TimeDecay] = None
    volatility_bias: Optional[VolatilityBias] = None
    complexity: Optional[Complexity] = None

    legs: List[StrategyLeg] = Field(..., min_length=1)

    max_profit: Optional[ProfitOrLoss] = None
    max_loss: Optional[ProfitOrLoss] = None
    break_even: List[float] = Field(default_factory=list)

    @property
    def primary_leg(self) -> StrategyLeg:
        return self.legs[0]
