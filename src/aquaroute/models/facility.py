"""Remotely sourced facility model."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import Field, model_validator

from aquaroute.models._base import AquaBaseModel, AquaEnum, AquaTimestamp, Position
from aquaroute.status import is_overnight_window, resolve_status


class FacilityCategory(AquaEnum):
    """Facility kind used for marker styling."""

    FERRY_TERMINAL = "ferry_terminal"
    PIER = "pier"
    UNKNOWN = "unknown"


class Facility(AquaBaseModel):
    """A facility record from the remote collection.

    Parameters
    ----------
    id : str
        Remote-assigned identifier (identity key).
    name : str
        Display name.
    position : Position
        Validated coordinates.
    facility_type : str
        Remote ``type`` string, trimmed and lower-cased.
    category : FacilityCategory
        Category derived from ``facility_type``.
    raw_status : str
        Remote ``status`` string, shown when no operating window is known.
    source_label : str
        Remote ``source`` string.
    created_at : datetime
        Record creation time (UTC).
    open_hour, close_hour : int or None
        Half-open operating window ``[open_hour, close_hour)``.
    """

    id: str = Field(min_length=1)
    name: str
    position: Position
    facility_type: str = "unknown"
    category: FacilityCategory = FacilityCategory.UNKNOWN
    raw_status: str = "Unknown"
    source_label: str = "Unknown"
    created_at: AquaTimestamp = Field(default_factory=lambda: datetime.now(UTC))
    open_hour: int | None = Field(default=None, ge=0, le=23)
    close_hour: int | None = Field(default=None, ge=0, le=23)

    @model_validator(mode="after")
    def _check_window(self) -> Facility:
        if (self.open_hour is None) != (self.close_hour is None):
            raise ValueError("open_hour and close_hour must be given together")
        return self

    @property
    def has_operating_window(self) -> bool:
        return self.open_hour is not None and self.close_hour is not None

    @property
    def is_overnight_window(self) -> bool:
        return is_overnight_window(self.open_hour, self.close_hour)

    @property
    def hours_label(self) -> str | None:
        """Operating window as ``"5:00-20:00"``, or ``None`` without one."""
        if self.open_hour is None or self.close_hour is None:
            return None
        return f"{self.open_hour}:00-{self.close_hour}:00"

    def display_status(self, current_hour: int) -> str:
        return resolve_status(self.open_hour, self.close_hour, self.raw_status, current_hour)
