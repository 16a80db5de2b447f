"""Reading and per-group snapshot models."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import ConfigDict, Field, field_validator

from sensorfeed.models._base import SensorFeedBaseModel


class Reading(SensorFeedBaseModel):
    """A single decoded feed message.

    Numeric fields are strict: JSON numbers only, no numeric strings or
    booleans. Any ``timestamp`` sent by the peer is ignored, and so is a
    snake_case ``group_id`` key: only ``groupName`` names the group.
    """

    model_config = ConfigDict(populate_by_name=False)

    group_id: str = Field(..., alias="groupName", min_length=1, strict=True)
    temperature: float = Field(..., strict=True, allow_inf_nan=False)
    humidity: float = Field(..., strict=True, allow_inf_nan=False)


class GroupSnapshot(SensorFeedBaseModel):
    """Latest reading for a group, stamped with the local receipt time."""

    group_id: str
    temperature: float
    humidity: float
    received_at: datetime

    @field_validator("received_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @classmethod
    def from_reading(cls, reading: Reading, received_at: datetime) -> GroupSnapshot:
        return cls(
            group_id=reading.group_id,
            temperature=reading.temperature,
            humidity=reading.humidity,
            received_at=received_at,
        )

    def age_seconds(self, now: datetime | None = None) -> float:
        """Seconds elapsed since this snapshot was received."""
        reference = now if now is not None else datetime.now(UTC)
        return (reference - self.received_at).total_seconds()
