"""Facility record parsing and validation.

Raw remote records are loosely typed. Each one is parsed into a frozen
:class:`~aquaroute.models.facility.Facility` or rejected with a reason;
rejections never fail the batch.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from aquaroute._constants import (
    DERIVED_CLOSE_HOURS,
    DERIVED_OPEN_HOURS,
    FERRY_TYPE_HOURS,
    KNOWN_NAME_HOURS,
)
from aquaroute.exceptions import RecordValidationError
from aquaroute.ingestion.normalize import safe_float, safe_hour, safe_str, unwrap_document
from aquaroute.models._base import Position, parse_timestamp
from aquaroute.models.facility import Facility, FacilityCategory

_logger = logging.getLogger(__name__)


class RecordRejection(BaseModel):
    """Why a raw record was dropped."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., description="Position of the record in the fetched batch")
    record_id: str | None = None
    reason: str


class FacilityParseResult(BaseModel):
    """Outcome of parsing one fetched batch."""

    model_config = ConfigDict(frozen=True)

    facilities: tuple[Facility, ...] = ()
    rejections: tuple[RecordRejection, ...] = ()

    @property
    def rejected_count(self) -> int:
        return len(self.rejections)


def _name_digest(name: str) -> int:
    # Stable across processes, unlike hash().
    return int(hashlib.md5(name.encode("utf-8"), usedforsecurity=False).hexdigest()[:8], 16)


def derive_operating_hours(name: str, facility_type: str) -> tuple[int, int]:
    """Deterministic operating window for a facility without published hours.

    Ferry types get the ferry schedule, known names their documented pair,
    anything else a pair derived from a digest of the name, so repeated
    fetches of the same name yield the same hours.
    """
    if "ferry" in facility_type.lower():
        return FERRY_TYPE_HOURS
    lowered = name.lower()
    for fragment, hours in KNOWN_NAME_HOURS.items():
        if fragment in lowered:
            return hours
    digest = _name_digest(name)
    open_hour = DERIVED_OPEN_HOURS[digest % len(DERIVED_OPEN_HOURS)]
    close_hour = DERIVED_CLOSE_HOURS[digest % len(DERIVED_CLOSE_HOURS)]
    return open_hour, close_hour


def _parse_created_at(value: Any, default: datetime) -> datetime:
    if isinstance(value, dict):
        # Firestore timestamp JSON: {"seconds": ..., "nanoseconds": ...} or "_seconds".
        seconds = safe_float(value.get("seconds", value.get("_seconds")))
        if seconds is None:
            return default
        nanos = safe_float(value.get("nanoseconds", value.get("_nanoseconds"))) or 0.0
        try:
            return datetime.fromtimestamp(seconds + nanos / 1e9, tz=UTC)
        except (ValueError, OverflowError, OSError):
            return default
    try:
        parsed = parse_timestamp(value)
    except (ValueError, OverflowError, OSError):
        return default
    return parsed if parsed is not None else default


def _coordinate(data: dict[str, Any], key: str, limit: float) -> float:
    if key not in data or data[key] is None:
        raise RecordValidationError(f"missing '{key}'")
    value = safe_float(data[key])
    if value is None:
        raise RecordValidationError(f"invalid '{key}': {data[key]!r}")
    if not -limit <= value <= limit:
        raise RecordValidationError(f"'{key}' out of range: {value}")
    return value


def parse_facility_record(record: Any, *, fetched_at: datetime) -> Facility:
    """Parse one raw record.

    Raises
    ------
    RecordValidationError
        If a required field is missing, malformed or out of range.
    """
    if not isinstance(record, dict):
        raise RecordValidationError(f"record is not an object: {type(record).__name__}")
    data = unwrap_document(record)

    facility_id = data.get("id")
    if isinstance(facility_id, int) and not isinstance(facility_id, bool):
        facility_id = str(facility_id)
    facility_id = safe_str(facility_id)
    if facility_id is None:
        raise RecordValidationError("missing 'id'")

    name = data.get("name")
    if not isinstance(name, str):
        raise RecordValidationError("missing 'name'")

    lat = _coordinate(data, "lat", 90.0)
    lng = _coordinate(data, "lng", 180.0)

    facility_type = (safe_str(data.get("type")) or "unknown").lower()
    raw_status = safe_str(data.get("status")) or "Unknown"
    source_label = safe_str(data.get("source")) or "Unknown"
    created_at = _parse_created_at(data.get("createdAt"), fetched_at)

    open_hour = safe_hour(data.get("openHour"))
    close_hour = safe_hour(data.get("closeHour"))
    if open_hour is None or close_hour is None:
        open_hour, close_hour = derive_operating_hours(name, facility_type)

    try:
        facility = Facility(
            id=facility_id,
            name=name,
            position=Position(lat=lat, lon=lng),
            facility_type=facility_type,
            category=FacilityCategory(facility_type),
            raw_status=raw_status,
            source_label=source_label,
            created_at=created_at,
            open_hour=open_hour,
            close_hour=close_hour,
        )
    except ValidationError as exc:
        raise RecordValidationError(f"invalid record: {exc.errors()[0].get('msg', exc)}") from exc

    if facility.is_overnight_window:
        _logger.warning(
            "Facility %s has an overnight window %s; derived status is not wrapped past midnight",
            facility_id,
            facility.hours_label,
        )
    return facility


def parse_facility_records(records: Iterable[Any], *, fetched_at: datetime | None = None) -> FacilityParseResult:
    """Parse a fetched batch, dropping (and counting) invalid records.

    Later records reusing an already accepted id are rejected.
    """
    fetched_at = fetched_at if fetched_at is not None else datetime.now(UTC)
    facilities: list[Facility] = []
    rejections: list[RecordRejection] = []
    seen: set[str] = set()

    for index, record in enumerate(records):
        record_id = record.get("id") if isinstance(record, dict) else None
        record_id = str(record_id) if record_id is not None else None
        try:
            facility = parse_facility_record(record, fetched_at=fetched_at)
        except RecordValidationError as exc:
            _logger.warning("Rejected facility record #%d (id=%s): %s", index, record_id, exc)
            rejections.append(RecordRejection(index=index, record_id=record_id, reason=str(exc)))
            continue
        if facility.id in seen:
            reason = f"duplicate id {facility.id!r}"
            _logger.warning("Rejected facility record #%d: %s", index, reason)
            rejections.append(RecordRejection(index=index, record_id=facility.id, reason=reason))
            continue
        seen.add(facility.id)
        facilities.append(facility)

    _logger.debug("Parsed %d facilities (%d rejected)", len(facilities), len(rejections))
    return FacilityParseResult(facilities=tuple(facilities), rejections=tuple(rejections))
