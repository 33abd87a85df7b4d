import numpy as np
import pandas as pd
import pytest

from optregime.data.validation.validators import ValidationError
from optregime.options.models.option_base import InvalidOptionInputError
from optregime.regime.analyzer import (
    analyze_regime,
    calculate_momentum,
    calculate_returns,
    calculate_trend_consistency,
    calculate_volatility,
    calculate_volume_confirmation,
    classify_trend,
    classify_volatility,
    compute_all_windows,
)
from optregime.regime.enums import RegimeType, Trend, VolatilityLevel


def test_window_statistics(make_points):
    points = make_points([100.0, 110.0, 99.0, 108.9])
    returns = calculate_returns(points)

    assert np.allclose(returns, [0.1, -0.1, 0.1])
    assert calculate_momentum(points) == pytest.approx(8.9)
    assert calculate_trend_consistency(returns) == pytest.approx(2 / 3)

    expected_vol = np.std(returns) * np.sqrt(252)
    assert calculate_volatility(returns) == pytest.approx(expected_vol)


def test_degenerate_windows(make_points):
    one = make_points([100.0])
    assert calculate_returns(one).size == 0
    assert calculate_volatility(calculate_returns(one)) == 0.0
    assert calculate_momentum(one) == 0.0
    assert calculate_trend_consistency(calculate_returns(one)) == 0.0
    assert calculate_volume_confirmation(one) == 0.5

    no_volume = make_points([100.0, 101.0], volumes=[0.0, 0.0])
    assert calculate_volume_confirmation(no_volume) == 0.0


def test_volume_confirmation_is_capped(make_points):
    points = make_points([100.0, 101.0, 102.0], volumes=[1.0, 1.0, 10.0])
    assert calculate_volume_confirmation(points) == 1.0

    points = make_points([100.0, 101.0], volumes=[3.0, 1.0])
    assert calculate_volume_confirmation(points) == pytest.approx(0.5)


def test_classification_thresholds():
    assert classify_trend(10.0) is Trend.NEUTRAL
    assert classify_trend(10.01) is Trend.BULLISH
    assert classify_trend(-10.0) is Trend.NEUTRAL
    assert classify_trend(-10.01) is Trend.BEARISH

    assert classify_volatility(0.30) is VolatilityLevel.MEDIUM
    assert classify_volatility(0.31) is VolatilityLevel.HIGH
    assert classify_volatility(0.15) is VolatilityLevel.LOW
    assert classify_volatility(0.16) is VolatilityLevel.MEDIUM


def test_single_point_history_is_neutral(make_points):
    regime = analyze_regime(make_points([100.0]), current_price=100.0)

    assert regime.type is RegimeType.SHORT_TERM
    assert regime.trend is Trend.NEUTRAL
    assert regime.volatility is VolatilityLevel.LOW
    assert regime.momentum == 0.0
    assert regime.confidence == pytest.approx(15.0)
    assert regime.timeframe == "1-7 days"


def test_ties_keep_shortest_window(make_points):
    # every window is perfectly consistent with flat volume
    closes = [100.0 * 1.05**i for i in range(60)]
    regime = analyze_regime(make_points(closes), current_price=closes[-1])

    assert regime.type is RegimeType.SHORT_TERM
    assert regime.trend is Trend.BULLISH
    assert regime.momentum == pytest.approx((1.05**4 - 1) * 100)
    assert regime.volatility is VolatilityLevel.LOW
    assert regime.confidence == pytest.approx(95.0)


def test_bearish_series(make_points):
    closes = [100.0 * 0.95**i for i in range(60)]
    regime = analyze_regime(make_points(closes), current_price=closes[-1])

    assert regime.trend is Trend.BEARISH
    assert regime.momentum < -10.0


def test_long_window_dominates(long_term_bullish_points):
    windows = compute_all_windows(long_term_bullish_points)
    assert [w.n_points for w in windows] == [5, 20, 60]
    assert windows[2].strength > windows[0].strength > windows[1].strength

    regime = analyze_regime(long_term_bullish_points, current_price=200.0)

    assert regime.type is RegimeType.LONG_TERM
    assert regime.trend is Trend.BULLISH
    assert regime.volatility is VolatilityLevel.LOW
    assert regime.confidence == pytest.approx(95.0)
    assert regime.timeframe == "2-12 months"

    start = 150.0 + 50.0 * 30 / 89
    assert regime.momentum == pytest.approx((200.0 - start) / start * 100)


def test_high_volatility_series(make_points):
    closes = [100.0, 110.0, 95.0, 108.0, 92.0, 106.0]
    regime = analyze_regime(make_points(closes), current_price=106.0)
    assert regime.volatility is VolatilityLevel.HIGH


def test_accepts_dataframe(make_points):
    points = make_points([100.0, 101.0, 102.0])
    df = pd.DataFrame(
        [
            {
                "timestamp": p.timestamp,
                "open": p.open,
                "high": p.high,
                "low": p.low,
                "close": p.close,
                "volume": p.volume,
            }
            for p in points
        ]
    )
    assert analyze_regime(df, 102.0) == analyze_regime(points, 102.0)


def test_invalid_inputs(make_points):
    with pytest.raises(ValidationError):
        analyze_regime([], current_price=100.0)
    with pytest.raises(InvalidOptionInputError):
        analyze_regime(make_points([100.0]), current_price=0.0)
