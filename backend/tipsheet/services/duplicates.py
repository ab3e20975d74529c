from __future__ import annotations

import logging
from dataclasses import dataclass

from tipsheet.core.text import normalized_key
from tipsheet.services.records import Venue
from tipsheet.store import Store

log = logging.getLogger("tipsheet.duplicates")

# upper bound on venues scanned per state when matching by name/city
STATE_SCAN_LIMIT = 1000


@dataclass(frozen=True)
class VenueSubmission:
    name: str
    city: str
    state: str
    venue_type: str | None = None
    google_place_id: str | None = None
    formatted_address: str | None = None
    lat: float | None = None
    lng: float | None = None


def find_existing_venue(store: Store, sub: VenueSubmission) -> Venue | None:
    """Locate the venue that made an insert of ``sub`` conflict. Read-only."""
    if sub.google_place_id:
        rows = store.query("venues", {"google_place_id": sub.google_place_id}, limit=1)
        if rows:
            return Venue.from_record(rows[0])

    name_key = normalized_key(sub.name)
    city_key = normalized_key(sub.city)
    rows = store.query("venues", {"state": sub.state}, limit=STATE_SCAN_LIMIT)
    for row in rows:
        if normalized_key(row.get("name")) == name_key and normalized_key(row.get("city")) == city_key:
            return Venue.from_record(row)

    log.warning("duplicate venue not located: name=%r city=%r state=%r", sub.name, sub.city, sub.state)
    return None
