from __future__ import annotations

from dataclasses import asdict
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from tipsheet.core.config import settings
from tipsheet.core.text import title_case
from tipsheet.models.enums import EarningsLabel
from tipsheet.routers.deps import (
    device_token,
    duplicate_venue_response,
    get_device_store,
    get_store,
    http_error,
    write_device_cookies,
)
from tipsheet.services.aggregation import filter_sort_reviews, summarize_reviews
from tipsheet.services.cities import best_city_suggestion, load_known_cities
from tipsheet.services.device import CookieDeviceStore
from tipsheet.services.errors import AlreadyReviewed, DuplicateVenue, InvalidInput, NotFound
from tipsheet.services.reviews import (
    ReviewForm,
    list_visible_reviews,
    reported_review_ids,
    submit_review,
)
from tipsheet.services.venues import build_submission, create_venue, get_venue, list_venues
from tipsheet.store import Store, StoreError

router = APIRouter(prefix="/venues", tags=["venues"])


# ---------- Schemas ----------

class VenueCreateIn(BaseModel):
    name: str = Field(..., max_length=200)
    city: str = Field(..., max_length=120)
    state: Optional[str] = Field(default=None, max_length=8)  # default: settings.DEFAULT_STATE
    venue_type: Optional[str] = Field(default=None, max_length=80)

    # filled from a places pick
    google_place_id: Optional[str] = Field(default=None, max_length=255)
    formatted_address: Optional[str] = Field(default=None, max_length=500)
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lng: Optional[float] = Field(default=None, ge=-180, le=180)


class ReviewCreateIn(BaseModel):
    role: str = Field("server", max_length=80)
    recommended: bool = False
    # blank strings allowed; validated by the service
    tips_weekly: float | str | None = None
    hours_weekly: float | str | None = None
    tip_pool: bool | None = None
    busy_season: str | None = Field(default=None, max_length=200)
    comment: str | None = Field(default=None, max_length=4000)
    earnings_label: EarningsLabel = EarningsLabel.PRE_TAX


# ---------- Routes ----------

@router.get("")
def list_venues_public(
    limit: int = Query(default=50, ge=1, le=200),
    store: Store = Depends(get_store),
):
    try:
        listing = list_venues(store, limit=limit)
    except StoreError as e:
        raise http_error(e)

    return {
        "metrics_available": listing.metrics_available,
        "venues": [{**asdict(v), "review_count": n} for v, n in listing.venues],
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_venue_public(payload: VenueCreateIn, store: Store = Depends(get_store)):
    try:
        sub = build_submission(
            name=payload.name,
            city=payload.city,
            state=payload.state or settings.DEFAULT_STATE,
            venue_type=payload.venue_type,
            google_place_id=payload.google_place_id,
            formatted_address=payload.formatted_address,
            lat=payload.lat,
            lng=payload.lng,
        )
        venue = create_venue(store, sub)
    except DuplicateVenue as e:
        return duplicate_venue_response(e)
    except (InvalidInput, StoreError) as e:
        raise http_error(e)

    return asdict(venue)


@router.get("/cities")
def list_cities(store: Store = Depends(get_store)):
    try:
        return {"cities": load_known_cities(store)}
    except StoreError as e:
        raise http_error(e)


@router.get("/city-suggestion")
def city_suggestion(
    city: str = Query(default=""),
    store: Store = Depends(get_store),
):
    try:
        known = load_known_cities(store)
    except StoreError as e:
        raise http_error(e)
    return {"city": title_case(city), "suggestion": best_city_suggestion(city, known)}


@router.get("/{venue_id}")
def get_venue_public(venue_id: str, store: Store = Depends(get_store)):
    try:
        return asdict(get_venue(store, venue_id))
    except (NotFound, StoreError) as e:
        raise http_error(e)


@router.get("/{venue_id}/reviews")
def list_reviews_public(
    venue_id: str,
    sort: Literal["newest", "oldest", "tips_desc", "hours_desc"] = Query(default="newest"),
    recommended_only: bool = Query(default=False),
    tip_pool_only: bool = Query(default=False),
    hide_missing: bool = Query(default=True),
    store: Store = Depends(get_store),
    device: CookieDeviceStore = Depends(get_device_store),
):
    try:
        get_venue(store, venue_id)
        reviews = list_visible_reviews(store, venue_id)
    except (NotFound, StoreError) as e:
        raise http_error(e)

    summary = summarize_reviews(reviews)
    shown = filter_sort_reviews(
        reviews,
        sort=sort,
        recommended_only=recommended_only,
        tip_pool_only=tip_pool_only,
        hide_missing=hide_missing,
    )
    return {
        "summary": asdict(summary),
        "reviews": [asdict(r) for r in shown],
        "reported_review_ids": sorted(reported_review_ids(store, [r.id for r in reviews])),
        "already_reviewed": device.has_reviewed(venue_id),
    }


@router.post("/{venue_id}/reviews", status_code=status.HTTP_201_CREATED)
def add_review(
    venue_id: str,
    payload: ReviewCreateIn,
    request: Request,
    response: Response,
    store: Store = Depends(get_store),
    device: CookieDeviceStore = Depends(get_device_store),
):
    token = device_token(request)
    form = ReviewForm(
        role=payload.role,
        recommended=payload.recommended,
        tips_weekly=payload.tips_weekly,
        hours_weekly=payload.hours_weekly,
        tip_pool=payload.tip_pool,
        busy_season=payload.busy_season,
        comment=payload.comment,
        earnings_label=payload.earnings_label.value,
    )
    try:
        if not device.has_reviewed(venue_id):
            get_venue(store, venue_id)
        review = submit_review(store, device, venue_id=venue_id, form=form, submitter_token=token)
    except AlreadyReviewed as e:
        conflict = JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(e)})
        if device.dirty:
            write_device_cookies(conflict, device, token)
        return conflict
    except (InvalidInput, NotFound, StoreError) as e:
        raise http_error(e)

    write_device_cookies(response, device, token)
    return asdict(review)
