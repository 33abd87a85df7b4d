from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================
# Save Settings
# ============================================================


class SaveSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    directory: Optional[str] = None
    filename: str = "regime_analysis.json"


# ============================================================
# Top-level AnalysisConfig
# ============================================================


class AnalysisConfig(BaseModel):
    """
    Configuration for one regime analysis run.
    """

    model_config = ConfigDict(extra="allow")

    name: str = "default_run"
    symbol: Optional[str] = None

    price_history: Optional[str] = Field(
        default=None, description="CSV with timestamp, open, high, low, close, volume."
    )
    catalog: Optional[str] = Field(
        default=None,
        description="YAML/JSON strategy catalog; the built-in catalog when unset.",
    )

    current_price: Optional[float] = Field(
        default=None, gt=0.0, description="Defaults to the last close."
    )
    risk_free_rate: float = Field(default=0.05, description="Continuous annual rate.")
    as_of: Optional[datetime] = Field(
        default=None, description="Valuation time; now (UTC) when unset."
    )

    save: SaveSettings = Field(default_factory=SaveSettings)
