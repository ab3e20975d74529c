from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tipsheet.core.db import Base


class Review(Base):
    """One anonymous review; at most one per (venue, device)."""

    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("venue_id", "submitter_token", name="uq_reviews_venue_submitter"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    venue_id: Mapped[str] = mapped_column(ForeignKey("venues.id"), index=True, nullable=False)

    role: Mapped[str] = mapped_column(String(80), nullable=False)
    tips_weekly: Mapped[float | None] = mapped_column(Float, nullable=True)
    hours_weekly: Mapped[float | None] = mapped_column(Float, nullable=True)
    tip_pool: Mapped[bool | None] = mapped_column(Boolean, nullable=True)  # None = unknown
    busy_season: Mapped[str | None] = mapped_column(String(200), nullable=True)
    recommended: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    comment: Mapped[str | None] = mapped_column(String(4000), nullable=True)
    earnings_label: Mapped[str] = mapped_column(String(16), nullable=False, default="pre-tax")  # pre-tax | post-tax

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    is_hidden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # opaque per-device token, only used for one-review-per-venue
    submitter_token: Mapped[str | None] = mapped_column(String(64), nullable=True)

    venue = relationship("Venue", back_populates="reviews")
