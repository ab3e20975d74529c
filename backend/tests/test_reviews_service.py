import pytest

from tipsheet.services.device import CookieDeviceStore, InMemoryDeviceStore
from tipsheet.services.errors import AlreadyReviewed, InvalidInput
from tipsheet.services.reviews import (
    ReviewForm,
    list_visible_reviews,
    parse_optional_amount,
    reported_review_ids,
    submit_review,
)
from tipsheet.store import StoreError


@pytest.fixture
def venue(fake_store):
    return fake_store.seed("venues", name="Ale House", city="Hoboken", state="NJ")


def test_submit_review_stores_and_marks_device(fake_store, venue):
    device = InMemoryDeviceStore()
    form = ReviewForm(role="  bar   back ", tips_weekly="450", hours_weekly=32, tip_pool=True, comment="  ")

    review = submit_review(fake_store, device, venue_id=venue["id"], form=form, submitter_token="dev-1")

    assert review.role == "bar back"
    assert review.tips_weekly == 450
    assert review.hours_weekly == 32
    assert review.comment is None
    assert device.has_reviewed(venue["id"])
    assert fake_store.tables["reviews"][0]["submitter_token"] == "dev-1"


def test_second_review_from_same_device_blocked_before_store(fake_store, venue):
    device = InMemoryDeviceStore()
    submit_review(fake_store, device, venue_id=venue["id"], form=ReviewForm(role="server"), submitter_token="dev-1")
    calls_after_first = len(fake_store.calls)

    with pytest.raises(AlreadyReviewed):
        submit_review(fake_store, device, venue_id=venue["id"], form=ReviewForm(role="server"), submitter_token="dev-1")

    assert len(fake_store.calls) == calls_after_first
    assert len(fake_store.tables["reviews"]) == 1


def test_store_constraint_backs_up_device_flag(fake_store, venue):
    # a cleared cookie: the device forgot, the store did not
    submit_review(
        fake_store, InMemoryDeviceStore(), venue_id=venue["id"], form=ReviewForm(role="server"), submitter_token="dev-1"
    )
    fresh = InMemoryDeviceStore()

    with pytest.raises(AlreadyReviewed):
        submit_review(fake_store, fresh, venue_id=venue["id"], form=ReviewForm(role="server"), submitter_token="dev-1")

    assert fresh.has_reviewed(venue["id"])


@pytest.mark.parametrize(
    "form",
    [
        ReviewForm(role="   "),
        ReviewForm(role="server", tips_weekly="-5"),
        ReviewForm(role="server", hours_weekly="lots"),
        ReviewForm(role="server", tips_weekly=float("nan")),
        ReviewForm(role="server", earnings_label="gross"),
    ],
)
def test_validation_happens_before_any_store_call(fake_store, venue, form):
    fake_store.calls.clear()
    with pytest.raises(InvalidInput):
        submit_review(fake_store, InMemoryDeviceStore(), venue_id=venue["id"], form=form, submitter_token="dev-1")
    assert fake_store.calls == []


def test_parse_optional_amount():
    assert parse_optional_amount(None, "Tips") is None
    assert parse_optional_amount("  ", "Tips") is None
    assert parse_optional_amount("0", "Tips") == 0
    assert parse_optional_amount(" 12.5 ", "Tips") == 12.5
    with pytest.raises(InvalidInput):
        parse_optional_amount(True, "Tips")


def test_other_store_errors_propagate(fake_store, venue):
    fake_store.fail["insert"] = StoreError("connection refused")
    device = InMemoryDeviceStore()
    with pytest.raises(StoreError):
        submit_review(fake_store, device, venue_id=venue["id"], form=ReviewForm(role="server"), submitter_token="d")
    assert not device.has_reviewed(venue["id"])


def test_list_visible_reviews_skips_hidden(fake_store, venue):
    keep = fake_store.seed("reviews", venue_id=venue["id"], role="server")
    fake_store.seed("reviews", venue_id=venue["id"], role="server", is_hidden=True)
    assert [r.id for r in list_visible_reviews(fake_store, venue["id"])] == [keep["id"]]


def test_reported_review_ids(fake_store, venue):
    r1 = fake_store.seed("reviews", venue_id=venue["id"], role="server")
    r2 = fake_store.seed("reviews", venue_id=venue["id"], role="server")
    fake_store.seed("reports", target_type="review", target_id=r1["id"])
    fake_store.seed("reports", target_type="venue", target_id=r2["id"])

    assert reported_review_ids(fake_store, [r1["id"], r2["id"]]) == {r1["id"]}
    assert reported_review_ids(fake_store, []) == set()


def test_reported_review_ids_empty_when_refused(fake_store, venue):
    fake_store.fail["query"] = StoreError("permission denied for table reports", code="42501")
    assert reported_review_ids(fake_store, ["x"]) == set()


def test_cookie_device_store_roundtrip():
    device = CookieDeviceStore("a. b..")
    assert device.has_reviewed("a") and device.has_reviewed("b")
    assert not device.dirty

    device.mark_reviewed("a")
    assert not device.dirty
    device.mark_reviewed("c")
    assert device.dirty
    assert device.cookie_value() == "a.b.c"


def test_cookie_device_store_keeps_newest_ids_under_cookie_limit():
    device = CookieDeviceStore(None)
    ids = [f"{i:08d}-0000-4000-8000-000000000000" for i in range(150)]
    for venue_id in ids:
        device.mark_reviewed(venue_id)

    value = device.cookie_value()
    assert len(value) < 4000
    assert value.split(".") == ids[-CookieDeviceStore.MAX_IDS:]
    assert not CookieDeviceStore(value).has_reviewed(ids[0])
