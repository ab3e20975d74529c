from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from tipsheet.core.text import normalize_spaces
from tipsheet.models.enums import EarningsLabel
from tipsheet.services.device import DeviceStore
from tipsheet.services.errors import AlreadyReviewed, InvalidInput
from tipsheet.services.records import Review
from tipsheet.store import In, Store, StoreError, is_conflict

log = logging.getLogger("tipsheet.reviews")

REVIEWS_PAGE = 50


@dataclass(frozen=True)
class ReviewForm:
    role: str
    recommended: bool = False
    tips_weekly: str | int | float | None = None
    hours_weekly: str | int | float | None = None
    tip_pool: bool | None = None
    busy_season: str | None = None
    comment: str | None = None
    earnings_label: str = EarningsLabel.PRE_TAX.value


def parse_optional_amount(value, label: str) -> float | None:
    """Blank means unknown; anything else must be a finite number >= 0."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidInput(f"{label} must be a valid number (or blank).")
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return None
        try:
            value = float(value)
        except ValueError:
            raise InvalidInput(f"{label} must be a valid number (or blank).")
    if not math.isfinite(value) or value < 0:
        raise InvalidInput(f"{label} must be a valid number (or blank).")
    return float(value)


def build_review_record(venue_id: str, form: ReviewForm) -> dict:
    role = normalize_spaces(form.role)
    if not role:
        raise InvalidInput("Role is required.")

    tips = parse_optional_amount(form.tips_weekly, "Tips weekly")
    hours = parse_optional_amount(form.hours_weekly, "Hours weekly")

    labels = {e.value for e in EarningsLabel}
    if form.earnings_label not in labels:
        raise InvalidInput(f"Earnings label must be one of: {', '.join(sorted(labels))}.")

    return {
        "venue_id": venue_id,
        "role": role,
        "recommended": bool(form.recommended),
        "earnings_label": form.earnings_label,
        "comment": (form.comment or "").strip() or None,
        "tips_weekly": tips,
        "hours_weekly": hours,
        "tip_pool": form.tip_pool,
        "busy_season": (form.busy_season or "").strip() or None,
    }


def submit_review(
    store: Store,
    device: DeviceStore,
    *,
    venue_id: str,
    form: ReviewForm,
    submitter_token: str,
) -> Review:
    if device.has_reviewed(venue_id):
        raise AlreadyReviewed(venue_id)

    record = build_review_record(venue_id, form)
    record["submitter_token"] = submitter_token

    try:
        row = store.insert("reviews", record)
    except StoreError as e:
        if is_conflict(e):
            # another tab or a cleared cookie; the store is authoritative
            device.mark_reviewed(venue_id)
            raise AlreadyReviewed(venue_id) from e
        raise

    device.mark_reviewed(venue_id)
    log.info("review %s added to venue %s", row["id"], venue_id)
    return Review.from_record(row)


def list_visible_reviews(store: Store, venue_id: str, *, limit: int = REVIEWS_PAGE) -> list[Review]:
    rows = store.query(
        "reviews",
        {"venue_id": venue_id, "is_hidden": False},
        limit=limit,
        order=("created_at", "desc"),
    )
    return [Review.from_record(r) for r in rows]


def reported_review_ids(store: Store, review_ids: list[str]) -> set[str]:
    """Which of these reviews already carry a report. Empty when the lookup fails."""
    if not review_ids:
        return set()
    try:
        rows = store.query("reports", {"target_type": "review", "target_id": In(review_ids)})
    except StoreError as e:
        log.warning("reported-review preload skipped: %s", e.message)
        return set()
    return {r["target_id"] for r in rows if r.get("target_id")}
