from __future__ import annotations

import logging
from dataclasses import dataclass

from tipsheet.core.text import normalize_spaces, title_case
from tipsheet.services.cities import best_city_suggestion, load_known_cities
from tipsheet.services.duplicates import VenueSubmission, find_existing_venue
from tipsheet.services.errors import DuplicateVenue, InvalidInput, NotFound
from tipsheet.services.records import Venue
from tipsheet.store import UNKNOWN_PROCEDURE, Store, StoreError, is_conflict

log = logging.getLogger("tipsheet.venues")

VENUES_PAGE = 50


def build_submission(
    *,
    name: str,
    city: str,
    state: str,
    venue_type: str | None = None,
    google_place_id: str | None = None,
    formatted_address: str | None = None,
    lat: float | None = None,
    lng: float | None = None,
) -> VenueSubmission:
    name_n = normalize_spaces(name)
    city_n = title_case(city)
    if not name_n or not city_n:
        raise InvalidInput("Venue name and city are required.")

    state_n = normalize_spaces(state).upper()
    if not state_n:
        raise InvalidInput("State is required.")

    return VenueSubmission(
        name=name_n,
        city=city_n,
        state=state_n,
        venue_type=title_case(venue_type) or None,
        google_place_id=normalize_spaces(google_place_id) or None,
        formatted_address=normalize_spaces(formatted_address) or None,
        lat=lat,
        lng=lng,
    )


def create_venue(store: Store, sub: VenueSubmission) -> Venue:
    """Insert a venue; on a uniqueness conflict raise DuplicateVenue with the one on file."""
    record = {
        "name": sub.name,
        "city": sub.city,
        "state": sub.state,
        "venue_type": sub.venue_type,
        "google_place_id": sub.google_place_id,
        "formatted_address": sub.formatted_address,
        "lat": sub.lat,
        "lng": sub.lng,
    }
    try:
        row = store.insert("venues", record)
    except StoreError as e:
        if not is_conflict(e):
            raise
        raise DuplicateVenue(find_existing_venue(store, sub)) from e

    log.info("venue %s created: %s, %s %s", row["id"], sub.name, sub.city, sub.state)
    return Venue.from_record(row)


def get_venue(store: Store, venue_id: str) -> Venue:
    rows = store.query("venues", {"id": venue_id}, limit=1)
    if not rows:
        raise NotFound("Venue not found")
    return Venue.from_record(rows[0])


@dataclass(frozen=True)
class VenueEdit:
    venue: Venue
    # what the typed city was probably meant to be, for the admin to confirm
    city_suggestion: str | None


def update_venue(
    store: Store,
    venue_id: str,
    *,
    name: str,
    city: str,
    venue_type: str | None = None,
) -> VenueEdit:
    name_n = normalize_spaces(name)
    if not name_n:
        raise InvalidInput("Venue name is required.")
    if not normalize_spaces(city):
        raise InvalidInput("City is required.")

    current = get_venue(store, venue_id)
    suggestion = best_city_suggestion(city, load_known_cities(store))

    patch = {
        "name": name_n,
        "city": title_case(city),
        "venue_type": title_case(venue_type) or None,
    }
    try:
        n = store.update("venues", {"id": venue_id}, patch)
    except StoreError as e:
        if not is_conflict(e):
            raise
        sub = VenueSubmission(name=name_n, city=patch["city"], state=current.state)
        raise DuplicateVenue(find_existing_venue(store, sub)) from e
    if n == 0:
        raise NotFound("Venue not found")
    return VenueEdit(venue=get_venue(store, venue_id), city_suggestion=suggestion)


@dataclass(frozen=True)
class VenueListing:
    venues: list[tuple[Venue, int]]
    metrics_available: bool


def list_venues(store: Store, *, limit: int = VENUES_PAGE) -> VenueListing:
    rows = store.query("venues", limit=limit, order=("created_at", "desc"))
    venues = [Venue.from_record(r) for r in rows]

    try:
        metrics = store.call_procedure("venue_metrics")
    except StoreError as e:
        if e.code == UNKNOWN_PROCEDURE:
            log.warning("venue_metrics procedure missing; showing zero counts")
        else:
            log.warning("venue_metrics failed: %s", e.message)
        return VenueListing(venues=[(v, 0) for v in venues], metrics_available=False)

    counts = {m["venue_id"]: int(m.get("review_count") or 0) for m in metrics}
    return VenueListing(venues=[(v, counts.get(v.id, 0)) for v in venues], metrics_available=True)
