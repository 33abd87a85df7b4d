# src/optregime/options/greeks/greeks.py
from dataclasses import dataclass

import numpy as np
import polars as pl

from optregime.data.validation.validators import ValidationError
from optregime.options.models.black_scholes import bs_greeks, bs_price

REQUIRED_COLUMNS = ("underlying_price", "strike", "ttm", "r", "iv", "option_type")


# --------------------------
# Chain Greeks Calculator (row-wise over the pricer)
# --------------------------
@dataclass
class GreeksCalculator:
    df: pl.DataFrame  # columns: underlying_price, strike, ttm, r, iv, option_type

    def compute(self) -> pl.DataFrame:
        missing = [c for c in REQUIRED_COLUMNS if c not in self.df.columns]
        if missing:
            raise ValidationError(f"Greeks input missing columns: {missing}")

        S = self.df["underlying_price"].to_numpy().astype(float)
        K = self.df["strike"].to_numpy().astype(float)
        T = self.df["ttm"].to_numpy().astype(float)
        r = self.df["r"].to_numpy().astype(float)
        sigma = self.df["iv"].to_numpy().astype(float)
        option_type = self.df["option_type"].to_numpy()

        rows = list(zip(S, K, T, r, sigma, option_type))
        price = np.array(
            [bs_price(s, k, rr, sig, t, str(ot).lower()) for s, k, t, rr, sig, ot in rows]
        )
        greeks = [
            bs_greeks(s, k, rr, sig, t, str(ot).lower()) for s, k, t, rr, sig, ot in rows
        ]

        return self.df.with_columns(
            [
                pl.Series("price", price, dtype=pl.Float64),
                pl.Series("delta", [g.delta for g in greeks], dtype=pl.Float64),
                pl.Series("gamma", [g.gamma for g in greeks], dtype=pl.Float64),
                pl.Series("theta", [g.theta for g in greeks], dtype=pl.Float64),
                pl.Series("vega", [g.vega for g in greeks], dtype=pl.Float64),
            ]
        )
