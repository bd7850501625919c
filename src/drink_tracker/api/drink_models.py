"""Pydantic models for drink request payloads."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

DrinkSeries = Literal["Normal", "Ultra", "Juice", "Reserve", "Special"]


class DrinkCreate(BaseModel):
    """Payload for logging a drink."""

    name: str = Field(min_length=1)
    series: DrinkSeries
    volume_ml: int = Field(gt=0)
    cost: float = Field(ge=0)
    rating: int = Field(ge=1, le=5)
    notes: str | None = None
    created_at: datetime | None = None

    def to_payload(self) -> dict[str, object]:
        """Return the row values to insert."""
        return self.model_dump(mode="json", exclude_none=True)


class DrinkUpdate(BaseModel):
    """Partial payload for editing a drink."""

    name: str | None = Field(default=None, min_length=1)
    series: DrinkSeries | None = None
    volume_ml: int | None = Field(default=None, gt=0)
    cost: float | None = Field(default=None, ge=0)
    rating: int | None = Field(default=None, ge=1, le=5)
    notes: str | None = None
    created_at: datetime | None = None

    @field_validator(
        "name", "series", "volume_ml", "cost", "rating", "created_at", mode="before"
    )
    @classmethod
    def reject_null(cls, value: object) -> object:
        """Only notes may be cleared with an explicit null."""
        if value is None:
            raise ValueError("must not be null")
        return value

    @model_validator(mode="after")
    def require_a_field(self) -> "DrinkUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        return self

    def to_payload(self) -> dict[str, object]:
        """Return only the fields the caller sent."""
        return self.model_dump(mode="json", exclude_unset=True)
