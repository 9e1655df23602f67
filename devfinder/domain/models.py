"""Pydantic models shared across the directory layers."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AvailabilityStatus(str, Enum):
    available = "available"
    busy = "busy"
    offline = "offline"


UNAVAILABLE_STATUSES: frozenset[AvailabilityStatus] = frozenset(
    {AvailabilityStatus.busy, AvailabilityStatus.offline}
)


class PriceBucket(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class ServiceProvider(BaseModel):
    """Immutable snapshot of one listed developer as returned by the listing service."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    name: str
    hourly_rate: float = Field(ge=0)
    skills: tuple[str, ...] = ()
    availability_status: AvailabilityStatus = Field(alias="status")
    image_url: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        # Listing rows may carry integer or UUID primary keys.
        if value is not None and not isinstance(value, str):
            return str(value)
        return value

    @field_validator("skills", mode="before")
    @classmethod
    def _coerce_skills(cls, value):
        if value is None:
            return ()
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return value

    @property
    def is_available(self) -> bool:
        return self.availability_status not in UNAVAILABLE_STATUSES


__all__ = [
    "AvailabilityStatus",
    "PriceBucket",
    "ServiceProvider",
    "UNAVAILABLE_STATUSES",
]
