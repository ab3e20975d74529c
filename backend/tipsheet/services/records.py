"""Typed views of store records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class Venue:
    id: str
    name: str
    city: str
    state: str
    venue_type: str | None = None
    created_at: datetime | None = None
    google_place_id: str | None = None
    formatted_address: str | None = None
    lat: float | None = None
    lng: float | None = None

    @classmethod
    def from_record(cls, row: dict[str, Any]) -> "Venue":
        return cls(
            id=row["id"],
            name=row["name"],
            city=row["city"],
            state=row["state"],
            venue_type=row.get("venue_type"),
            created_at=row.get("created_at"),
            google_place_id=row.get("google_place_id"),
            formatted_address=row.get("formatted_address"),
            lat=row.get("lat"),
            lng=row.get("lng"),
        )


@dataclass(frozen=True)
class Review:
    # no submitter_token: it never leaves the store
    id: str
    venue_id: str
    role: str
    tips_weekly: float | None = None
    hours_weekly: float | None = None
    tip_pool: bool | None = None
    busy_season: str | None = None
    recommended: bool = False
    comment: str | None = None
    earnings_label: str = "pre-tax"
    created_at: datetime | None = None
    is_hidden: bool = False

    @classmethod
    def from_record(cls, row: dict[str, Any]) -> "Review":
        return cls(
            id=row["id"],
            venue_id=row["venue_id"],
            role=row["role"],
            tips_weekly=row.get("tips_weekly"),
            hours_weekly=row.get("hours_weekly"),
            tip_pool=row.get("tip_pool"),
            busy_season=row.get("busy_season"),
            recommended=bool(row.get("recommended")),
            comment=row.get("comment"),
            earnings_label=row.get("earnings_label") or "pre-tax",
            created_at=row.get("created_at"),
            is_hidden=bool(row.get("is_hidden")),
        )


@dataclass(frozen=True)
class Report:
    id: str
    target_type: str
    target_id: str
    reason: str | None = None
    created_at: datetime | None = None
    resolved_at: datetime | None = None
    resolved_by: str | None = None

    @classmethod
    def from_record(cls, row: dict[str, Any]) -> "Report":
        return cls(
            id=row["id"],
            target_type=row["target_type"],
            target_id=row["target_id"],
            reason=row.get("reason"),
            created_at=row.get("created_at"),
            resolved_at=row.get("resolved_at"),
            resolved_by=row.get("resolved_by"),
        )
