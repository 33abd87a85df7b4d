from __future__ import annotations

import logging

import numpy as np

from optregime.options.models.black_scholes import bs_price, raw_vega
from optregime.options.models.option_base import (
    OptionType,
    require_finite,
    require_positive,
)
from optregime.options.schemas import ImpliedVolResult

LOGGER = logging.getLogger(__name__)

INITIAL_SIGMA = 0.5
MIN_SIGMA = 0.01
MAX_SIGMA = 5.0


def solve_implied_vol(
    market_price: float,
    S: float,
    K: float,
    r: float,
    T: float,
    is_call: bool = True,
    tolerance: float = 1e-4,
    max_iterations: int = 100,
) -> ImpliedVolResult:
    """
    Newton-Raphson implied volatility solver.

    - starts at sigma = 0.5
    - steps with the unscaled vega (dPrice/dSigma), not the /100 Greek
    - clamps sigma to [0.01, 5] after every update
    - on exhaustion returns the last estimate with converged=False
    """
    require_positive(market_price=market_price, S=S, K=K, T=T)
    require_finite(r=r)
    if tolerance <= 0:
        raise ValueError("tolerance must be positive.")
    if max_iterations < 1:
        raise ValueError("max_iterations must be >= 1.")

    option_type = OptionType.from_flag(is_call)
    sigma = INITIAL_SIGMA
    diff = np.inf

    for i in range(max_iterations):
        model_price = bs_price(S, K, r, sigma, T, option_type)
        diff = market_price - model_price

        if abs(diff) < tolerance:
            return ImpliedVolResult(
                implied_volatility=sigma,
                iterations=i,
                converged=True,
                final_difference=diff,
            )

        vega = raw_vega(S, K, r, sigma, T)
        if vega > 0.0:
            sigma = sigma + diff / vega
        else:
            # unbounded step, the clamp decides
            sigma = MAX_SIGMA if diff > 0 else MIN_SIGMA
        sigma = max(MIN_SIGMA, min(sigma, MAX_SIGMA))

    LOGGER.warning(
        "Implied vol did not converge after %s iterations "
        "(price=%s, S=%s, K=%s, T=%s, last sigma=%.6f, diff=%.6g)",
        max_iterations,
        market_price,
        S,
        K,
        T,
        sigma,
        diff,
    )
    return ImpliedVolResult(
        implied_volatility=sigma,
        iterations=max_iterations,
        converged=False,
        final_difference=float(diff),
    )


def implied_vol(
    market_price: float,
    S: float,
    K: float,
    r: float,
    T: float,
    is_call: bool = True,
    tolerance: float = 1e-4,
    max_iterations: int = 100,
) -> float:
    """Best-effort implied volatility; see solve_implied_vol for the flagged form."""
    return solve_implied_vol(
        market_price,
        S,
        K,
        r,
        T,
        is_call=is_call,
        tolerance=tolerance,
        max_iterations=max_iterations,
    ).implied_volatility
