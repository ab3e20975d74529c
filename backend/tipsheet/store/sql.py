from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from tipsheet.models import Report, Review, Venue
from tipsheet.store.base import (
    UNIQUE_VIOLATION,
    UNKNOWN_PROCEDURE,
    ConflictError,
    Filters,
    ILike,
    In,
    Order,
    Record,
    StoreError,
)

log = logging.getLogger("tipsheet.store")

TABLES = {
    "venues": Venue,
    "reviews": Review,
    "reports": Report,
}


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == UNIQUE_VIOLATION:
        return True
    msg = str(orig).lower()
    # sqlite: "UNIQUE constraint failed: ..."
    return "unique constraint" in msg or "duplicate" in msg


def _value(v: Any) -> Any:
    # sqlite hands back naive datetimes for timezone=True columns
    if isinstance(v, datetime) and v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v


class SqlStore:
    """Store over a SQLAlchemy session. Every write commits."""

    def __init__(self, db: Session):
        self.db = db

    def _model(self, table: str):
        model = TABLES.get(table)
        if model is None:
            raise StoreError(f'relation "{table}" does not exist', code="42P01")
        return model

    @staticmethod
    def _to_record(obj) -> Record:
        return {c.key: _value(getattr(obj, c.key)) for c in obj.__table__.columns}

    @staticmethod
    def _column(model, name: str):
        if name not in model.__table__.columns:
            raise StoreError(f'column {model.__tablename__}.{name} does not exist', code="42703")
        return getattr(model, name)

    def _conditions(self, model, filters: Filters | None) -> list:
        conds = []
        for name, value in (filters or {}).items():
            col = self._column(model, name)
            if isinstance(value, In):
                conds.append(col.in_(list(value.values)))
            elif isinstance(value, ILike):
                conds.append(col.ilike(value.pattern))
            elif value is None:
                conds.append(col.is_(None))
            else:
                conds.append(col == value)
        return conds

    def insert(self, table: str, record: Record) -> Record:
        model = self._model(table)
        columns = {c.key for c in model.__table__.columns}
        obj = model(**{k: v for k, v in record.items() if k in columns})
        self.db.add(obj)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if _is_unique_violation(e):
                raise ConflictError(
                    f"duplicate key value violates unique constraint on {table}",
                    code=UNIQUE_VIOLATION,
                ) from e
            raise StoreError(str(e.orig), code="23000") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            log.exception("insert into %s failed", table)
            raise StoreError(str(e)) from e
        self.db.refresh(obj)
        return self._to_record(obj)

    def query(
        self,
        table: str,
        filters: Filters | None = None,
        *,
        limit: int | None = None,
        order: Order | None = None,
    ) -> list[Record]:
        model = self._model(table)
        stmt = select(model).where(*self._conditions(model, filters))
        if order:
            col = self._column(model, order[0])
            stmt = stmt.order_by(col.desc() if order[1] == "desc" else col.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            rows = self.db.execute(stmt).scalars().all()
        except SQLAlchemyError as e:
            self.db.rollback()
            log.exception("query on %s failed", table)
            raise StoreError(str(e)) from e
        return [self._to_record(r) for r in rows]

    def update(self, table: str, filters: Filters, patch: Record) -> int:
        model = self._model(table)
        stmt = (
            update(model)
            .where(*self._conditions(model, filters))
            .values(**patch)
            .execution_options(synchronize_session=False)
        )
        try:
            res = self.db.execute(stmt)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if _is_unique_violation(e):
                raise ConflictError(
                    f"duplicate key value violates unique constraint on {table}",
                    code=UNIQUE_VIOLATION,
                ) from e
            raise StoreError(str(e.orig), code="23000") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            log.exception("update on %s failed", table)
            raise StoreError(str(e)) from e
        return res.rowcount or 0

    def call_procedure(self, name: str) -> list[Record]:
        proc = PROCEDURES.get(name)
        if proc is None:
            raise StoreError(
                f"Could not find the function public.{name} without parameters in the schema cache",
                code=UNKNOWN_PROCEDURE,
            )
        try:
            return proc(self.db)
        except SQLAlchemyError as e:
            self.db.rollback()
            log.exception("procedure %s failed", name)
            raise StoreError(str(e)) from e


def venue_metrics(db: Session) -> list[Record]:
    """Per-venue review count and averages over visible reviews."""
    stmt = (
        select(
            Review.venue_id,
            func.count(Review.id).label("review_count"),
            func.avg(Review.tips_weekly).label("avg_tips_weekly"),
            func.avg(Review.hours_weekly).label("avg_hours_weekly"),
            func.avg(case((Review.recommended.is_(True), 100.0), else_=0.0)).label("pct_recommended"),
        )
        .where(Review.is_hidden.is_(False))
        .group_by(Review.venue_id)
    )
    return [
        {
            "venue_id": r.venue_id,
            "review_count": int(r.review_count),
            "avg_tips_weekly": float(r.avg_tips_weekly) if r.avg_tips_weekly is not None else None,
            "avg_hours_weekly": float(r.avg_hours_weekly) if r.avg_hours_weekly is not None else None,
            "pct_recommended": float(r.pct_recommended) if r.pct_recommended is not None else None,
        }
        for r in db.execute(stmt).all()
    ]


PROCEDURES = {
    "venue_metrics": venue_metrics,
}
