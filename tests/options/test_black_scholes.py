# tests/options/test_black_scholes.py
import math

import numpy as np
import pytest
from scipy.stats import norm

from optregime.options.models.black_scholes import (
    bs_greeks,
    bs_price,
    d1_d2,
    normal_cdf,
    raw_vega,
)
from optregime.options.models.option_base import InvalidOptionInputError, OptionType


def test_normal_cdf_matches_exact_cdf():
    x = np.linspace(-6, 6, 241)
    approx = normal_cdf(x)
    assert isinstance(approx, np.ndarray)
    assert np.max(np.abs(approx - norm.cdf(x))) < 1e-6
    assert np.all((approx >= 0) & (approx <= 1))


def test_normal_cdf_scalar_returns_float():
    v = normal_cdf(1.0)
    assert isinstance(v, float)
    assert v == pytest.approx(0.841345, abs=1e-6)


def test_price_monotone_in_spot():
    spots = [90, 100, 110]
    call_prices = [bs_price(s, 100, 0.05, 0.2, 1.0, "call") for s in spots]
    put_prices = [bs_price(s, 100, 0.05, 0.2, 1.0, "put") for s in spots]

    assert call_prices[0] < call_prices[1] < call_prices[2]
    assert put_prices[0] > put_prices[1] > put_prices[2]


def test_known_reference_values():
    assert bs_price(100, 100, 0.05, 0.2, 1.0, "call") == pytest.approx(10.4506, abs=1e-3)
    assert bs_price(100, 100, 0.05, 0.2, 1.0, "put") == pytest.approx(5.5735, abs=1e-3)


def test_enum_and_string_option_types_agree():
    assert bs_price(100, 95, 0.03, 0.25, 0.5, OptionType.PUT) == bs_price(
        100, 95, 0.03, 0.25, 0.5, "put"
    )


@pytest.mark.parametrize(
    "S,K,r,sigma,T",
    [
        (100, 100, 0.05, 0.2, 1.0),
        (100, 90, 0.01, 0.35, 0.25),
        (50, 65, 0.03, 0.6, 2.0),
        (200, 190, 0.05, 0.15, 0.4932),
        (10, 9.5, -0.01, 1.2, 0.1),
    ],
)
def test_put_call_parity(S, K, r, sigma, T):
    call = bs_price(S, K, r, sigma, T, "call")
    put = bs_price(S, K, r, sigma, T, "put")
    assert call - put == pytest.approx(S - K * math.exp(-r * T), abs=1e-6)


@pytest.mark.parametrize("S", [60, 90, 100, 110, 160])
@pytest.mark.parametrize("T", [0.05, 0.5, 2.0])
def test_greeks_sanity(S, T):
    call = bs_greeks(S, 100, 0.05, 0.3, T, "call")
    put = bs_greeks(S, 100, 0.05, 0.3, T, "put")

    assert 0.0 <= call.delta <= 1.0
    assert -1.0 <= put.delta <= 0.0
    assert call.gamma >= 0.0
    assert put.gamma >= 0.0
    assert call.gamma == put.gamma
    assert call.vega == put.vega


def test_vega_and_theta_scaling():
    S, K, r, sigma, T = 100, 100, 0.05, 0.2, 1.0
    g = bs_greeks(S, K, r, sigma, T, "call")

    assert g.vega == pytest.approx(raw_vega(S, K, r, sigma, T) / 100.0)

    d1, d2 = d1_d2(S, K, r, sigma, T)
    annual_theta = -S * norm.pdf(d1) * sigma / (2 * math.sqrt(T)) - r * K * math.exp(
        -r * T
    ) * norm.cdf(d2)
    assert g.theta == pytest.approx(annual_theta / 365.0, abs=1e-6)
    assert g.theta < 0


@pytest.mark.parametrize(
    "kwargs,name",
    [
        (dict(S=100, K=100, r=0.05, sigma=0.0, T=1.0), "sigma"),
        (dict(S=100, K=100, r=0.05, sigma=-0.2, T=1.0), "sigma"),
        (dict(S=100, K=100, r=0.05, sigma=0.2, T=0.0), "T"),
        (dict(S=100, K=100, r=0.05, sigma=0.2, T=-0.5), "T"),
        (dict(S=100, K=0.0, r=0.05, sigma=0.2, T=1.0), "K"),
        (dict(S=float("nan"), K=100, r=0.05, sigma=0.2, T=1.0), "S"),
    ],
)
def test_invalid_domain_raises(kwargs, name):
    with pytest.raises(InvalidOptionInputError) as exc:
        bs_price(**kwargs)
    assert exc.value.name == name

    with pytest.raises(InvalidOptionInputError):
        bs_greeks(**kwargs)


def test_invalid_option_type():
    with pytest.raises(ValueError):
        bs_price(100, 100, 0.05, 0.2, 1.0, "straddle")
