from __future__ import annotations

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from tipsheet.models.enums import ReportTarget
from tipsheet.routers.deps import get_store, http_error
from tipsheet.services.errors import InvalidInput, NotFound
from tipsheet.services.reports import create_report
from tipsheet.store import Store, StoreError

router = APIRouter(prefix="/reports", tags=["reports"])


class ReportCreateIn(BaseModel):
    target_type: ReportTarget
    target_id: str = Field(..., min_length=1, max_length=36)
    reason: str | None = Field(default=None, max_length=2000)


@router.post("", status_code=status.HTTP_201_CREATED)
def file_report(payload: ReportCreateIn, store: Store = Depends(get_store)):
    try:
        report = create_report(
            store,
            target_type=payload.target_type.value,
            target_id=payload.target_id,
            reason=payload.reason,
        )
    except (InvalidInput, NotFound, StoreError) as e:
        raise http_error(e)
    # reporters only get confirmation, not the moderation fields
    return {"id": report.id, "target_type": report.target_type, "target_id": report.target_id}
