from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from tipsheet.models.enums import ReportTarget
from tipsheet.services.errors import AlreadyResolved, InvalidInput, NotFound
from tipsheet.services.records import Report, Review, Venue
from tipsheet.store import In, Store

log = logging.getLogger("tipsheet.reports")

REPORTS_PAGE = 500


def create_report(store: Store, *, target_type: str, target_id: str, reason: str | None = None) -> Report:
    if target_type not in {t.value for t in ReportTarget}:
        raise InvalidInput("Report target must be a venue or a review.")
    target_id = (target_id or "").strip()
    if not target_id:
        raise InvalidInput("Report target is required.")

    table = "reviews" if target_type == ReportTarget.REVIEW.value else "venues"
    if not store.query(table, {"id": target_id}, limit=1):
        raise NotFound(f"{target_type.capitalize()} not found")

    row = store.insert(
        "reports",
        {
            "target_type": target_type,
            "target_id": target_id,
            "reason": (reason or "").strip() or None,
        },
    )
    log.info("report %s filed against %s %s", row["id"], target_type, target_id)
    return Report.from_record(row)


@dataclass
class ModerationQueue:
    review_reports: list[Report] = field(default_factory=list)
    venue_reports: list[Report] = field(default_factory=list)
    reviews_by_id: dict[str, Review] = field(default_factory=dict)
    venues_by_id: dict[str, Venue] = field(default_factory=dict)

    @property
    def open_review_reports(self) -> int:
        return sum(1 for r in self.review_reports if r.resolved_at is None)

    @property
    def open_venue_reports(self) -> int:
        return sum(1 for r in self.venue_reports if r.resolved_at is None)


def load_moderation_queue(store: Store, *, limit: int = REPORTS_PAGE) -> ModerationQueue:
    rows = store.query("reports", limit=limit, order=("created_at", "desc"))
    reports = [Report.from_record(r) for r in rows]

    q = ModerationQueue(
        review_reports=[r for r in reports if r.target_type == ReportTarget.REVIEW.value],
        venue_reports=[r for r in reports if r.target_type == ReportTarget.VENUE.value],
    )

    review_ids = list(dict.fromkeys(r.target_id for r in q.review_reports))
    if review_ids:
        for row in store.query("reviews", {"id": In(review_ids)}):
            rv = Review.from_record(row)
            q.reviews_by_id[rv.id] = rv

    venue_ids = list(dict.fromkeys(
        [r.target_id for r in q.venue_reports] + [rv.venue_id for rv in q.reviews_by_id.values()]
    ))
    if venue_ids:
        for row in store.query("venues", {"id": In(venue_ids)}):
            v = Venue.from_record(row)
            q.venues_by_id[v.id] = v

    return q


def resolve_report(store: Store, report_id: str, *, resolved_by: str) -> None:
    rows = store.query("reports", {"id": report_id}, limit=1)
    if not rows:
        raise NotFound("Report not found")
    if rows[0].get("resolved_at") is not None:
        raise AlreadyResolved("Report already resolved")

    n = store.update(
        "reports",
        {"id": report_id, "resolved_at": None},
        {"resolved_at": datetime.now(timezone.utc), "resolved_by": resolved_by},
    )
    if n == 0:
        # resolved by someone else in between
        raise AlreadyResolved("Report already resolved")
    log.info("report %s resolved by %s", report_id, resolved_by)


def hide_review(store: Store, review_id: str) -> None:
    n = store.update("reviews", {"id": review_id}, {"is_hidden": True})
    if n == 0:
        raise NotFound("Review not found")
    log.info("review %s hidden", review_id)
