from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Sequence

from tipsheet.services.records import Review

SORTS = ("newest", "oldest", "tips_desc", "hours_desc")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class ReviewSummary:
    total: int
    avg_tips: float | None
    tips_sample: int
    avg_hours: float | None
    hours_sample: int
    pct_recommended: float | None
    pct_tip_pool: float | None
    tip_pool_sample: int


def _finite(v) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def _mean(values: list[float]) -> float | None:
    return sum(values) / len(values) if values else None


def summarize_reviews(reviews: Sequence[Review]) -> ReviewSummary:
    """Summary stats for one venue's visible reviews.

    Missing or non-finite tips/hours are left out of their average rather than
    counted as zero; tip pool percentage only looks at reviews that answered it.
    """
    total = len(reviews)
    tips = [r.tips_weekly for r in reviews if _finite(r.tips_weekly)]
    hours = [r.hours_weekly for r in reviews if _finite(r.hours_weekly)]
    recommended = sum(1 for r in reviews if r.recommended)

    pool_known = [r for r in reviews if r.tip_pool is not None]
    pool_yes = sum(1 for r in pool_known if r.tip_pool is True)

    return ReviewSummary(
        total=total,
        avg_tips=_mean(tips),
        tips_sample=len(tips),
        avg_hours=_mean(hours),
        hours_sample=len(hours),
        pct_recommended=(recommended / total) * 100 if total else None,
        pct_tip_pool=(pool_yes / len(pool_known)) * 100 if pool_known else None,
        tip_pool_sample=len(pool_known),
    )


def _created(r: Review) -> datetime:
    return r.created_at or _EPOCH


def filter_sort_reviews(
    reviews: Sequence[Review],
    *,
    sort: str = "newest",
    recommended_only: bool = False,
    tip_pool_only: bool = False,
    hide_missing: bool = True,
) -> list[Review]:
    """Display order for a review list. Returns a new list."""
    if sort not in SORTS:
        raise ValueError(f"unknown sort: {sort}")

    out = list(reviews)
    if recommended_only:
        out = [r for r in out if r.recommended]
    if tip_pool_only:
        out = [r for r in out if r.tip_pool is True]

    if sort == "newest":
        out.sort(key=_created, reverse=True)
    elif sort == "oldest":
        out.sort(key=_created)
    else:
        field = "tips_weekly" if sort == "tips_desc" else "hours_weekly"
        if hide_missing:
            out = [r for r in out if _finite(getattr(r, field))]
        # missing values sink to the bottom
        out.sort(
            key=lambda r: getattr(r, field) if _finite(getattr(r, field)) else -math.inf,
            reverse=True,
        )
    return out
