import math
from datetime import datetime, timedelta, timezone

import pytest

from tipsheet.services.aggregation import filter_sort_reviews, summarize_reviews
from tipsheet.services.records import Review

T0 = datetime(2026, 3, 1, tzinfo=timezone.utc)


def make(i, **kw):
    kw.setdefault("created_at", T0 + timedelta(days=i))
    return Review(id=f"r{i}", venue_id="v1", role="server", **kw)


def test_tips_average_skips_missing_values():
    reviews = [make(0, tips_weekly=100), make(1, tips_weekly=None), make(2, tips_weekly=300)]
    s = summarize_reviews(reviews)
    assert s.total == 3
    assert s.avg_tips == 200
    assert s.tips_sample == 2


def test_non_finite_numbers_are_excluded():
    reviews = [make(0, hours_weekly=40), make(1, hours_weekly=math.nan), make(2, hours_weekly=math.inf)]
    s = summarize_reviews(reviews)
    assert s.avg_hours == 40
    assert s.hours_sample == 1


def test_empty_list_gives_nulls_not_zero():
    s = summarize_reviews([])
    assert s.total == 0
    assert s.avg_tips is None
    assert s.avg_hours is None
    assert s.pct_recommended is None
    assert s.pct_tip_pool is None
    assert s.tips_sample == s.hours_sample == s.tip_pool_sample == 0


def test_percentages():
    reviews = [
        make(0, recommended=True, tip_pool=True),
        make(1, recommended=False, tip_pool=False),
        make(2, recommended=True, tip_pool=None),
        make(3, recommended=False, tip_pool=True),
    ]
    s = summarize_reviews(reviews)
    assert s.pct_recommended == 50
    # only the three reviews that answered count
    assert s.tip_pool_sample == 3
    assert s.pct_tip_pool == pytest.approx(200 / 3)


def test_tip_pool_null_when_unknown_everywhere():
    s = summarize_reviews([make(0, tip_pool=None), make(1)])
    assert s.pct_tip_pool is None
    assert s.pct_recommended == 0


# ---------- filter / sort ----------

def test_newest_and_oldest():
    reviews = [make(1), make(0), make(2)]
    assert [r.id for r in filter_sort_reviews(reviews)] == ["r2", "r1", "r0"]
    assert [r.id for r in filter_sort_reviews(reviews, sort="oldest")] == ["r0", "r1", "r2"]


def test_tips_desc_hides_missing_by_default():
    reviews = [make(0, tips_weekly=50), make(1), make(2, tips_weekly=500)]
    assert [r.id for r in filter_sort_reviews(reviews, sort="tips_desc")] == ["r2", "r0"]


def test_tips_desc_keeps_missing_last_when_asked():
    reviews = [make(0, tips_weekly=50), make(1), make(2, tips_weekly=500)]
    out = filter_sort_reviews(reviews, sort="tips_desc", hide_missing=False)
    assert [r.id for r in out] == ["r2", "r0", "r1"]


def test_hours_desc_and_flags():
    reviews = [
        make(0, hours_weekly=30, recommended=True, tip_pool=True),
        make(1, hours_weekly=45, recommended=True, tip_pool=False),
        make(2, hours_weekly=60, recommended=False, tip_pool=True),
    ]
    assert [r.id for r in filter_sort_reviews(reviews, sort="hours_desc")] == ["r2", "r1", "r0"]
    assert [r.id for r in filter_sort_reviews(reviews, sort="hours_desc", recommended_only=True)] == ["r1", "r0"]
    assert [r.id for r in filter_sort_reviews(reviews, tip_pool_only=True)] == ["r2", "r0"]


def test_sorting_leaves_summary_input_alone():
    reviews = [make(0, tips_weekly=None), make(1, tips_weekly=10)]
    before = list(reviews)
    filter_sort_reviews(reviews, sort="tips_desc")
    assert reviews == before
    assert summarize_reviews(reviews).total == 2


def test_unknown_sort_rejected():
    with pytest.raises(ValueError):
        filter_sort_reviews([], sort="best")
