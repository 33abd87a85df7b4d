# src/optregime/options/models/black_scholes.py
"""
Closed-form Black-Scholes pricing for European options.

The cumulative normal uses the Abramowitz-Stegun polynomial approximation
(max abs error ~1e-7) rather than an exact erf evaluation; pricing, Greeks
and the implied-vol solver all share it so round trips stay consistent.

Every function validates its domain and raises InvalidOptionInputError
instead of returning NaN.
"""
from __future__ import annotations

from typing import Tuple, Union

import numpy as np
from scipy.stats import norm

from optregime.options.models.option_base import (
    OptionType,
    require_finite,
    require_positive,
)
from optregime.options.schemas import Greeks

OptionTypeLike = Union[OptionType, str]

# Abramowitz & Stegun 26.2.17
_AS_P = 0.2316419
_AS_B = (0.3193815, -0.3565638, 1.781478, -1.821256, 1.330274)
_AS_DENSITY = 0.3989423

DAYS_PER_YEAR = 365.0


def normal_cdf(x):
    """Standard normal CDF, scalar or array."""
    x = np.asarray(x, dtype=float)
    t = 1.0 / (1.0 + _AS_P * np.abs(x))
    d = _AS_DENSITY * np.exp(-x * x / 2.0)
    b1, b2, b3, b4, b5 = _AS_B
    p = d * t * (b1 + t * (b2 + t * (b3 + t * (b4 + t * b5))))
    out = np.where(x > 0, 1.0 - p, p)
    return float(out) if out.ndim == 0 else out


def normal_pdf(x):
    """Standard normal density."""
    out = norm.pdf(x)
    return float(out) if np.ndim(out) == 0 else out


def _as_option_type(option_type: OptionTypeLike) -> OptionType:
    try:
        return OptionType(option_type)
    except ValueError as e:
        raise ValueError("option_type must be 'call' or 'put'") from e


def d1_d2(S: float, K: float, r: float, sigma: float, T: float) -> Tuple[float, float]:
    """Black-Scholes d1, d2. Raises on non-positive S, K, sigma or T."""
    require_positive(S=S, K=K, sigma=sigma, T=T)
    require_finite(r=r)

    sqrtT = np.sqrt(T)
    d1 = (np.log(S / K) + (r + 0.5 * sigma**2) * T) / (sigma * sqrtT)
    d2 = d1 - sigma * sqrtT
    return float(d1), float(d2)


def bs_call(S: float, K: float, r: float, sigma: float, T: float) -> float:
    d1, d2 = d1_d2(S, K, r, sigma, T)
    return float(S * normal_cdf(d1) - K * np.exp(-r * T) * normal_cdf(d2))


def bs_put(S: float, K: float, r: float, sigma: float, T: float) -> float:
    d1, d2 = d1_d2(S, K, r, sigma, T)
    return float(K * np.exp(-r * T) * normal_cdf(-d2) - S * normal_cdf(-d1))


def bs_price(
    S: float,
    K: float,
    r: float,
    sigma: float,
    T: float,
    option_type: OptionTypeLike = OptionType.CALL,
) -> float:
    """
    Black-Scholes European option price.

    Parameters
    ----------
    S : float
        Spot price of the underlying (> 0)
    K : float
        Strike price (> 0)
    r : float
        Continuously compounded risk-free rate
    sigma : float
        Annualised volatility (> 0)
    T : float
        Time to expiry in years (> 0)
    option_type : OptionType or str
        'call' or 'put'
    """
    kind = _as_option_type(option_type)
    if kind is OptionType.CALL:
        return bs_call(S, K, r, sigma, T)
    elif kind is OptionType.PUT:
        return bs_put(S, K, r, sigma, T)
    raise ValueError(f"Unhandled option type: {kind}")


def raw_vega(S: float, K: float, r: float, sigma: float, T: float) -> float:
    """Unscaled vega dPrice/dSigma (per 1.00 of volatility)."""
    d1, _ = d1_d2(S, K, r, sigma, T)
    return float(S * np.sqrt(T) * normal_pdf(d1))


def bs_greeks(
    S: float,
    K: float,
    r: float,
    sigma: float,
    T: float,
    option_type: OptionTypeLike = OptionType.CALL,
) -> Greeks:
    """
    Delta, gamma, theta and vega for a European option.

    theta is per calendar day (annual theta / 365) and vega is per one
    volatility point (raw vega / 100).
    """
    kind = _as_option_type(option_type)
    d1, d2 = d1_d2(S, K, r, sigma, T)
    sqrtT = np.sqrt(T)
    pdf_d1 = normal_pdf(d1)
    discount = np.exp(-r * T)

    gamma = pdf_d1 / (S * sigma * sqrtT)
    vega = S * pdf_d1 * sqrtT / 100.0
    decay = -S * pdf_d1 * sigma / (2.0 * sqrtT)

    if kind is OptionType.CALL:
        delta = normal_cdf(d1)
        theta = (decay - r * K * discount * normal_cdf(d2)) / DAYS_PER_YEAR
    elif kind is OptionType.PUT:
        delta = normal_cdf(d1) - 1.0
        theta = (decay + r * K * discount * normal_cdf(-d2)) / DAYS_PER_YEAR
    else:
        raise ValueError(f"Unhandled option type: {kind}")

    return Greeks(
        delta=float(delta),
        gamma=float(gamma),
        theta=float(theta),
        vega=float(vega),
    )
