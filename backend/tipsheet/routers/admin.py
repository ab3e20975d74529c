from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from tipsheet.auth.deps import require_admin
from tipsheet.models import AdminUser
from tipsheet.routers.deps import duplicate_venue_response, get_store, http_error
from tipsheet.services.cities import load_known_cities, merge_cities
from tipsheet.services.errors import AlreadyResolved, CityMergeConflict, DuplicateVenue, InvalidInput, NotFound
from tipsheet.services.reports import hide_review, load_moderation_queue, resolve_report
from tipsheet.services.venues import update_venue
from tipsheet.store import Store, StoreError

router = APIRouter(prefix="/admin", tags=["admin"])


# ---------- Schemas ----------

class VenueEditIn(BaseModel):
    name: str = Field(..., max_length=200)
    city: str = Field(..., max_length=120)
    venue_type: str | None = Field(default=None, max_length=80)


class CityMergeIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    from_city: str = Field(..., alias="from", max_length=120)
    to_city: str = Field(..., alias="to", max_length=120)


# ---------- Routes ----------

@router.patch("/venues/{venue_id}")
def edit_venue(
    venue_id: str,
    payload: VenueEditIn,
    store: Store = Depends(get_store),
    admin: AdminUser = Depends(require_admin),
):
    try:
        edit = update_venue(
            store,
            venue_id,
            name=payload.name,
            city=payload.city,
            venue_type=payload.venue_type,
        )
    except DuplicateVenue as e:
        return duplicate_venue_response(e)
    except (InvalidInput, NotFound, StoreError) as e:
        raise http_error(e)
    return {"venue": asdict(edit.venue), "city_suggestion": edit.city_suggestion}


@router.get("/reports")
def list_reports(
    store: Store = Depends(get_store),
    admin: AdminUser = Depends(require_admin),
):
    try:
        q = load_moderation_queue(store)
    except StoreError as e:
        raise http_error(e)

    return {
        "open_review_reports": q.open_review_reports,
        "open_venue_reports": q.open_venue_reports,
        "review_reports": [asdict(r) for r in q.review_reports],
        "venue_reports": [asdict(r) for r in q.venue_reports],
        "reviews": {k: asdict(v) for k, v in q.reviews_by_id.items()},
        "venues": {k: asdict(v) for k, v in q.venues_by_id.items()},
    }


@router.post("/reports/{report_id}/resolve")
def resolve(
    report_id: str,
    store: Store = Depends(get_store),
    admin: AdminUser = Depends(require_admin),
):
    try:
        resolve_report(store, report_id, resolved_by=admin.id)
    except (NotFound, AlreadyResolved, StoreError) as e:
        raise http_error(e)
    return {"ok": True}


@router.post("/reviews/{review_id}/hide")
def hide(
    review_id: str,
    store: Store = Depends(get_store),
    admin: AdminUser = Depends(require_admin),
):
    try:
        hide_review(store, review_id)
    except (NotFound, StoreError) as e:
        raise http_error(e)
    return {"ok": True}


@router.get("/cities")
def cities(
    store: Store = Depends(get_store),
    admin: AdminUser = Depends(require_admin),
):
    try:
        return {"cities": load_known_cities(store)}
    except StoreError as e:
        raise http_error(e)


@router.post("/cities/merge")
def merge(
    payload: CityMergeIn,
    store: Store = Depends(get_store),
    admin: AdminUser = Depends(require_admin),
):
    try:
        n = merge_cities(store, from_city=payload.from_city, to_city=payload.to_city)
    except (InvalidInput, CityMergeConflict, StoreError) as e:
        raise http_error(e)
    return {"ok": True, "venues_updated": n}
