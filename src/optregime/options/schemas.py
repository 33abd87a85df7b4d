from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Greeks(BaseModel):
    """
    Option sensitivities for one (S, K, r, sigma, T, type) input.

    theta is decay per calendar day, vega is per one volatility point.
    """

    model_config = ConfigDict(frozen=True)

    delta: float
    gamma: float
    theta: float
    vega: float


class ImpliedVolResult(BaseModel):
    """
    Outcome of the Newton-Raphson implied volatility search.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    implied_volatility: float = Field(..., description="Last sigma estimate.")
    iterations: int = Field(..., ge=0, description="Newton steps taken.")
    converged: bool = Field(
        ..., description="True if |market - model| fell below tolerance."
    )
    final_difference: float = Field(
        ..., description="market_price - model_price at the last evaluated sigma."
    )


class ArbitrageResult(BaseModel):
    """
    Put-call parity check for one call/put pair.

    difference = C + K*exp(-rT) - (P + S); positive means the call side is rich.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    has_arbitrage: bool
    put_call_parity: float = Field(
        ..., description="Present value of the strike, K*exp(-rT)."
    )
    difference: float
    strategy: str
