"""Base model and enum for aquaroute entities.

Every entity model inherits from :class:`AquaBaseModel`, which is frozen:
the store replaces entities wholesale instead of mutating attributes, so a
reader holding a model never observes a half-applied update.

Category-like enums inherit from :class:`AquaEnum`, which adds an
``UNKNOWN`` member and a ``_missing_`` hook that returns it for any value
without a mapped member.
"""

from __future__ import annotations

import enum
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 100_000_000_000


def parse_timestamp(value: Any) -> datetime | None:
    """Coerce an epoch number (seconds **or** milliseconds) or ISO string to a UTC datetime.

    Naive datetimes are assumed to be UTC. Returns ``None`` for ``None``.
    """
    if value is None:
        return value
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, str):
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"unsupported timestamp value: {value!r}")
    ts = float(value)
    if ts >= _MS_THRESHOLD:
        ts /= 1000.0
    return datetime.fromtimestamp(ts, tz=UTC)


AquaTimestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]
"""Annotated type that coerces epoch numbers and ISO strings to UTC datetimes."""


class AquaEnum(enum.StrEnum):
    """Base for string-valued entity enums.

    Every subclass **must** define ``UNKNOWN``.
    """

    @classmethod
    def _missing_(cls, value: object) -> AquaEnum:
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        unknown: AquaEnum = cls.UNKNOWN  # type: ignore[attr-defined]
        return unknown


class AquaBaseModel(BaseModel):
    """Frozen base for entity models."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
    )


class Position(AquaBaseModel):
    """A WGS84 coordinate pair in degrees."""

    lat: float
    lon: float
