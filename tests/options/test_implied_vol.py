import logging

import pytest

from optregime.options.models.black_scholes import bs_price
from optregime.options.models.implied_vol import (
    MAX_SIGMA,
    MIN_SIGMA,
    implied_vol,
    solve_implied_vol,
)
from optregime.options.models.option_base import InvalidOptionInputError


@pytest.mark.parametrize("sigma0", [0.05, 0.2, 0.5, 1.0, 2.0])
@pytest.mark.parametrize("K", [100, 105])
@pytest.mark.parametrize("is_call", [True, False])
def test_implied_vol_round_trip(sigma0, K, is_call):
    S, r, T = 100.0, 0.05, 1.0
    price = bs_price(S, K, r, sigma0, T, "call" if is_call else "put")

    result = solve_implied_vol(price, S, K, r, T, is_call=is_call)

    assert result.converged
    assert abs(result.final_difference) < 1e-4
    assert result.implied_volatility == pytest.approx(sigma0, abs=1e-4)


def test_implied_vol_returns_plain_float():
    price = bs_price(100, 100, 0.05, 0.3, 0.5, "call")
    iv = implied_vol(price, 100, 100, 0.05, 0.5, True)
    assert isinstance(iv, float)
    assert iv == pytest.approx(0.3, abs=1e-4)


def test_non_convergence_is_soft(caplog):
    price = bs_price(100, 100, 0.05, 0.8, 1.0, "call")

    with caplog.at_level(logging.WARNING):
        result = solve_implied_vol(price, 100, 100, 0.05, 1.0, max_iterations=1)

    assert not result.converged
    assert result.iterations == 1
    assert MIN_SIGMA <= result.implied_volatility <= MAX_SIGMA
    assert "did not converge" in caplog.text


def test_upper_clamp_when_price_needs_extreme_vol():
    # a 1y ATM call at 99 would need sigma > 5
    result = solve_implied_vol(99.0, 100, 100, 0.05, 1.0, is_call=True)
    assert not result.converged
    assert result.implied_volatility == MAX_SIGMA


def test_lower_clamp_below_intrinsic_value():
    # deep ITM call quoted under S - K*exp(-rT): no volatility reproduces it
    result = solve_implied_vol(52.40, 100, 50, 0.05, 1.0, is_call=True)
    assert not result.converged
    assert result.implied_volatility == MIN_SIGMA


@pytest.mark.parametrize(
    "args",
    [
        (0.0, 100, 100, 0.05, 1.0),
        (5.0, 100, 100, 0.05, 0.0),
        (5.0, -1, 100, 0.05, 1.0),
    ],
)
def test_invalid_inputs_raise(args):
    with pytest.raises(InvalidOptionInputError):
        solve_implied_vol(*args)
