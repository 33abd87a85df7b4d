# src/optregime/data/validation/validators.py
from __future__ import annotations

from typing import Any, Iterable, List

import pandas as pd

from optregime.data.schemas.market import PricePoint

PRICE_COLUMNS = {"timestamp", "open", "high", "low", "close", "volume"}


class ValidationError(ValueError):
    """Custom validation exception."""

    pass


def validate_price_history(points: List[PricePoint]) -> None:
    """
    Domain-level validation for a price series.
    Raises ValidationError if the series cannot be analysed.
    """
    if len(points) == 0:
        raise ValidationError("price history is empty")
    for p in points:
        if p.high < p.low:
            raise ValidationError(
                f"bar at {p.timestamp} has high {p.high} < low {p.low}"
            )


def _frame_to_records(df: pd.DataFrame) -> list[dict[str, Any]]:
    if "timestamp" not in df.columns and df.index.name == "timestamp":
        df = df.reset_index()

    missing = PRICE_COLUMNS - set(df.columns)
    if missing:
        raise ValidationError(
            f"price history missing required columns: {sorted(missing)}"
        )

    df = df.copy()
    df["timestamp"] = pd.to_datetime(df["timestamp"], errors="raise", utc=True)
    return [
        {**row, "timestamp": row["timestamp"].to_pydatetime()}
        for row in df[sorted(PRICE_COLUMNS)].to_dict(orient="records")
    ]


def coerce_price_history(data: Iterable[Any] | pd.DataFrame) -> List[PricePoint]:
    """
    Normalise PricePoints, plain dicts or an OHLCV DataFrame into a
    chronologically ordered list of PricePoint.
    """
    if isinstance(data, pd.DataFrame):
        data = _frame_to_records(data)

    points: List[PricePoint] = []
    for item in data:
        if isinstance(item, PricePoint):
            points.append(item)
        elif isinstance(item, dict):
            points.append(PricePoint.model_validate(item))
        else:
            raise ValidationError(f"Unsupported price record type: {type(item)!r}")

    points.sort(key=lambda p: p.timestamp)
    validate_price_history(points)
    return points
