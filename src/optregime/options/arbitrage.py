# src/optregime/options/arbitrage.py
from __future__ import annotations

import logging
import math
from datetime import date, datetime, timezone
from typing import Optional

import numpy as np
import polars as pl

from optregime.data.validation.validators import ValidationError
from optregime.options.models.option_base import (
    InvalidOptionInputError,
    require_finite,
    require_positive,
)
from optregime.options.schemas import ArbitrageResult

LOGGER = logging.getLogger(__name__)

# Parity residual (currency units) below which no trade is suggested.
ARBITRAGE_THRESHOLD = 0.05

SELL_CALL_SIDE = "Sell Call, Buy Put, Buy Stock, Borrow PV(K)"
BUY_CALL_SIDE = "Buy Call, Sell Put, Sell Stock, Lend PV(K)"
NO_ARBITRAGE = "No arbitrage opportunity"

REQUIRED_CHAIN_COLUMNS = {"strike", "expiry", "option_type", "last", "volume"}

_OPPORTUNITY_SCHEMA = {
    "strike": pl.Float64,
    "expiry": pl.Date,
    "call_price": pl.Float64,
    "put_price": pl.Float64,
    "stock_price": pl.Float64,
    "difference": pl.Float64,
    "volume": pl.Int64,
    "strategy": pl.Utf8,
}


def find_arbitrage_opportunity(
    call_price: float,
    put_price: float,
    S: float,
    K: float,
    r: float,
    T: float,
) -> ArbitrageResult:
    """
    Put-call parity check: C + K*exp(-rT) = P + S.

    A residual strictly greater than ARBITRAGE_THRESHOLD in absolute value is
    reported as an opportunity. The sign picks the side: a positive residual
    means the call is rich relative to the put.
    """
    require_positive(S=S, K=K, T=T)
    require_finite(r=r, call_price=call_price, put_price=put_price)
    if call_price < 0:
        raise InvalidOptionInputError("call_price", call_price, "must be >= 0")
    if put_price < 0:
        raise InvalidOptionInputError("put_price", put_price, "must be >= 0")

    pv_strike = K * math.exp(-r * T)
    difference = call_price + pv_strike - (put_price + S)

    if difference > ARBITRAGE_THRESHOLD:
        strategy = SELL_CALL_SIDE
    elif difference < -ARBITRAGE_THRESHOLD:
        strategy = BUY_CALL_SIDE
    else:
        strategy = NO_ARBITRAGE

    return ArbitrageResult(
        has_arbitrage=abs(difference) > ARBITRAGE_THRESHOLD,
        put_call_parity=pv_strike,
        difference=difference,
        strategy=strategy,
    )


def _as_date(v) -> date:
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, str):
        try:
            return date.fromisoformat(v)
        except ValueError as e:
            raise ValidationError(f"Unparseable expiry: {v!r}") from e
    raise ValidationError(f"Unsupported expiry value: {v!r}")


def _days_to_expiry(expiry: date, as_of: datetime) -> int:
    """Whole days from as_of to expiry midnight (UTC), floored."""
    expiry_dt = datetime(expiry.year, expiry.month, expiry.day, tzinfo=timezone.utc)
    seconds = (expiry_dt - as_of).total_seconds()
    return int(np.floor(seconds / 86_400.0))


def scan_chain_for_arbitrage(
    chain: pl.DataFrame,
    stock_price: float,
    risk_free_rate: float = 0.05,
    min_volume: int = 1000,
    as_of: Optional[datetime] = None,
) -> pl.DataFrame:
    """
    Scan an options chain for put-call parity violations.

    Parameters
    ----------
    chain : pl.DataFrame
        Columns: strike, expiry, option_type ('call'/'put'), last, volume.
    stock_price : float
        Spot price of the underlying.
    risk_free_rate : float
        Continuously compounded rate used to discount the strike.
    min_volume : int
        Both the call and the put must trade at least this many contracts.
    as_of : datetime, optional
        Valuation time (UTC); defaults to now.

    Returns
    -------
    pl.DataFrame
        One row per opportunity, sorted by difference (descending).
    """
    missing = REQUIRED_CHAIN_COLUMNS - set(chain.columns)
    if missing:
        raise ValidationError(
            f"Options chain missing required columns: {sorted(missing)}"
        )
    require_positive(stock_price=stock_price)

    as_of = as_of or datetime.now(timezone.utc)
    if as_of.tzinfo is None:
        as_of = as_of.replace(tzinfo=timezone.utc)

    # blank volume means the contract did not trade
    normalized = chain.filter(pl.col("last").is_not_null()).with_columns(
        [
            pl.col("option_type").cast(pl.Utf8).str.to_lowercase(),
            pl.col("volume").fill_null(0),
        ]
    )
    calls = normalized.filter(pl.col("option_type") == "call").select(
        [
            pl.col("strike"),
            pl.col("expiry"),
            pl.col("last").alias("call_price"),
            pl.col("volume").alias("call_volume"),
        ]
    )
    puts = normalized.filter(pl.col("option_type") == "put").select(
        [
            pl.col("strike"),
            pl.col("expiry"),
            pl.col("last").alias("put_price"),
            pl.col("volume").alias("put_volume"),
        ]
    )
    pairs = calls.join(puts, on=["strike", "expiry"], how="inner")

    records = []
    for row in pairs.iter_rows(named=True):
        if row["call_volume"] < min_volume or row["put_volume"] < min_volume:
            continue

        expiry = _as_date(row["expiry"])
        days = _days_to_expiry(expiry, as_of)
        if days <= 0:
            LOGGER.debug("Skipping expired pair K=%s expiry=%s", row["strike"], expiry)
            continue

        result = find_arbitrage_opportunity(
            float(row["call_price"]),
            float(row["put_price"]),
            stock_price,
            float(row["strike"]),
            risk_free_rate,
            days / 365.0,
        )
        if not result.has_arbitrage:
            continue

        records.append(
            {
                "strike": float(row["strike"]),
                "expiry": expiry,
                "call_price": float(row["call_price"]),
                "put_price": float(row["put_price"]),
                "stock_price": float(stock_price),
                "difference": result.difference,
                "volume": int(min(row["call_volume"], row["put_volume"])),
                "strategy": result.strategy,
            }
        )

    LOGGER.info(
        "Scanned %s call/put pairs, found %s parity violations",
        pairs.height,
        len(records),
    )
    return pl.DataFrame(records, schema=_OPPORTUNITY_SCHEMA).sort(
        "difference", descending=True
    )
