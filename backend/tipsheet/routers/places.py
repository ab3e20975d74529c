from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query

from tipsheet.routers.deps import get_places_client
from tipsheet.services.places import PlacesClient

router = APIRouter(prefix="/places", tags=["places"])


@router.get("/autocomplete")
def autocomplete(
    q: str = Query(default="", max_length=200),
    places: PlacesClient = Depends(get_places_client),
):
    # disabled lookup is not an error: the page switches to manual entry
    return {
        "enabled": places.enabled,
        "results": [asdict(p) for p in places.autocomplete(q)],
    }


@router.get("/{place_id}")
def place_details(place_id: str, places: PlacesClient = Depends(get_places_client)):
    if not places.enabled:
        return {"enabled": False, "place": None}
    pick = places.details(place_id)
    if pick is None:
        raise HTTPException(404, "Place not found")
    return {"enabled": True, "place": asdict(pick)}
