from __future__ import annotations

import uuid
from dataclasses import asdict

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from tipsheet.core.config import settings
from tipsheet.core.db import get_db
from tipsheet.services.device import CookieDeviceStore
from tipsheet.services.errors import AlreadyResolved, CityMergeConflict, DuplicateVenue, InvalidInput, NotFound
from tipsheet.services.places import PlacesClient
from tipsheet.store import Store, StoreError, is_conflict
from tipsheet.store.sql import SqlStore

DEVICE_COOKIE = "device_token"
REVIEWED_COOKIE = "reviewed_venues"


def get_store(db: Session = Depends(get_db)) -> Store:
    return SqlStore(db)


def get_places_client() -> PlacesClient:
    return PlacesClient()


def get_device_store(request: Request) -> CookieDeviceStore:
    return CookieDeviceStore(request.cookies.get(REVIEWED_COOKIE))


def device_token(request: Request) -> str:
    return request.cookies.get(DEVICE_COOKIE) or uuid.uuid4().hex


def write_device_cookies(response: Response, device: CookieDeviceStore, token: str) -> None:
    for key, value in ((DEVICE_COOKIE, token), (REVIEWED_COOKIE, device.cookie_value())):
        response.set_cookie(
            key=key,
            value=value,
            httponly=True,
            secure=settings.COOKIE_SECURE,
            samesite="lax",
            domain=settings.COOKIE_DOMAIN,
            path="/",
            max_age=settings.DEVICE_COOKIE_TTL_SECONDS,
        )


def duplicate_venue_response(e: DuplicateVenue) -> JSONResponse:
    """409 carrying the venue already on file, so the page can link to it."""
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=jsonable_encoder({
            "detail": str(e),
            "existing_venue": asdict(e.existing) if e.existing else None,
        }),
    )


def http_error(e: Exception) -> HTTPException:
    """Translate a service error into the HTTP answer the pages expect."""
    if isinstance(e, InvalidInput):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if isinstance(e, NotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, (AlreadyResolved, CityMergeConflict)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if isinstance(e, StoreError):
        if is_conflict(e):
            return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)
    raise e
