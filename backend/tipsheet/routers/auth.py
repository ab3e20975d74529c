from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from tipsheet.auth.deps import get_jwt_config, require_admin
from tipsheet.auth.jwt_tokens import create_access_token
from tipsheet.auth.passwords import verify_password
from tipsheet.core.config import settings
from tipsheet.core.db import get_db
from tipsheet.models import AdminUser

log = logging.getLogger("tipsheet.auth")

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginIn(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=256)


@router.post("/login", status_code=status.HTTP_204_NO_CONTENT)
def login(payload: LoginIn, response: Response, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    admin = db.query(AdminUser).filter(AdminUser.email == email).one_or_none()

    if admin is None or not verify_password(payload.password, admin.password_hash):
        log.info("failed admin login for %s", email)
        raise HTTPException(status_code=401, detail="Invalid login credentials")
    if not admin.is_active:
        raise HTTPException(status_code=403, detail="Admin account disabled")

    token = create_access_token(get_jwt_config(), admin.id)

    response.set_cookie(
        key="access_token",
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        domain=settings.COOKIE_DOMAIN,
        path="/",
        max_age=settings.ACCESS_TOKEN_TTL_SECONDS,
    )
    return


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(response: Response):
    response.delete_cookie("access_token", path="/", domain=settings.COOKIE_DOMAIN)
    return


@router.get("/me")
def me(admin: AdminUser = Depends(require_admin)):
    return {"id": admin.id, "email": admin.email}
