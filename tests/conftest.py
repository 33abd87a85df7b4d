from datetime import datetime, timedelta, timezone

import pytest

from optregime.data.schemas.market import PricePoint

AS_OF = datetime(2024, 1, 2, 16, 0, tzinfo=timezone.utc)


def _points(closes, volumes=None):
    start = AS_OF - timedelta(days=len(closes))
    volumes = volumes if volumes is not None else [1_000_000.0] * len(closes)
    return [
        PricePoint(
            timestamp=start + timedelta(days=i),
            open=c,
            high=c * 1.01,
            low=c * 0.99,
            close=c,
            volume=v,
        )
        for i, (c, v) in enumerate(zip(closes, volumes))
    ]


@pytest.fixture
def make_points():
    return _points


@pytest.fixture
def as_of():
    return AS_OF


@pytest.fixture
def long_term_bullish_points():
    """
    90 bars rising linearly 150 -> 200 with a volume pickup over the last
    20 bars; the 60-bar window has the highest strength.
    """
    closes = [150.0 + 50.0 * i / 89 for i in range(90)]
    volumes = [1_000_000.0] * 70 + [3_000_000.0] * 19 + [1_500_000.0]
    return _points(closes, volumes)
