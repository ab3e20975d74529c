from __future__ import annotations

import json
import logging
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Any

from tipsheet.core.config import settings

log = logging.getLogger("tipsheet.places")

API_ROOT = "https://maps.googleapis.com/maps/api/place"
DETAIL_FIELDS = "place_id,name,formatted_address,geometry,address_component"


@dataclass(frozen=True)
class PlaceSuggestion:
    place_id: str
    description: str


@dataclass(frozen=True)
class PlacePick:
    place_id: str
    name: str
    formatted_address: str
    city: str
    state: str
    lat: float
    lng: float


def city_state_from_components(components: list[dict[str, Any]]) -> tuple[str, str]:
    def find(kind: str, key: str = "long_name") -> str:
        for c in components:
            if kind in (c.get("types") or []):
                return c.get(key) or ""
        return ""

    city = find("locality") or find("sublocality") or find("administrative_area_level_2")
    state = find("administrative_area_level_1", "short_name")
    return city, state


class PlacesClient:
    """Google Places lookup. Best-effort: failures log and return nothing.

    Without an API key the client is disabled and callers fall back to manual
    entry.
    """

    def __init__(self, api_key: str | None = None, *, country: str | None = None, timeout: float | None = None):
        self.api_key = api_key if api_key is not None else settings.GOOGLE_MAPS_API_KEY
        self.country = country or settings.PLACES_COUNTRY
        self.timeout = timeout if timeout is not None else settings.PLACES_TIMEOUT_SECONDS

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _get(self, path: str, params: dict[str, str]) -> dict[str, Any] | None:
        url = f"{API_ROOT}/{path}/json?" + urllib.parse.urlencode({**params, "key": self.api_key})
        try:
            with urllib.request.urlopen(url, timeout=self.timeout) as resp:
                body = resp.read().decode("utf-8", errors="ignore")
        except Exception as e:
            # slow or unreachable lookup is abandoned; the user types it in
            log.warning("places %s request failed: %s", path, e)
            return None
        try:
            js = json.loads(body) if body else {}
        except ValueError:
            log.warning("places %s returned non-JSON body=%s", path, body[:300])
            return None
        status = js.get("status")
        if status not in ("OK", "ZERO_RESULTS"):
            log.warning("places %s status=%s error=%s", path, status, js.get("error_message"))
            return None
        return js

    def autocomplete(self, query: str) -> list[PlaceSuggestion]:
        query = (query or "").strip()
        if not self.enabled or not query:
            return []
        js = self._get(
            "autocomplete",
            {"input": query, "types": "establishment", "components": f"country:{self.country}"},
        )
        if not js:
            return []
        return [
            PlaceSuggestion(place_id=p["place_id"], description=p.get("description") or "")
            for p in js.get("predictions", [])
            if p.get("place_id")
        ]

    def details(self, place_id: str) -> PlacePick | None:
        if not self.enabled or not place_id:
            return None
        js = self._get("details", {"place_id": place_id, "fields": DETAIL_FIELDS})
        if not js:
            return None

        place = js.get("result") or {}
        location = (place.get("geometry") or {}).get("location") or {}
        if not place.get("place_id") or "lat" not in location or "lng" not in location:
            return None

        city, state = city_state_from_components(place.get("address_components") or [])
        return PlacePick(
            place_id=place["place_id"],
            name=place.get("name") or "",
            formatted_address=place.get("formatted_address") or "",
            city=city,
            state=state,
            lat=float(location["lat"]),
            lng=float(location["lng"]),
        )
