from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator


class PricePoint(BaseModel):
    timestamp: datetime = Field(..., description="Bar timestamp (UTC)")
    open_: float = Field(..., alias="open", ge=0, description="Opening price")
    high: float = Field(..., ge=0)
    low: float = Field(..., ge=0)
    close_: float = Field(..., alias="close", gt=0, description="Closing price")
    volume: float = Field(0.0, ge=0)

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("timestamp")
    def normalize_timestamp(cls, v):
        # naive timestamps are taken as UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @property
    def close(self) -> float:
        return self.close_

    @property
    def open(self) -> float:
        return self.open_
