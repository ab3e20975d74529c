"""Storage collaborator used by every service.

Services only see this interface: plain dict records in, plain dict records
out, and two error types. ``SqlStore`` is the production implementation; tests
swap in an in-memory one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence

Record = dict[str, Any]

# Postgres unique_violation; SqlStore reports every unique failure with it
UNIQUE_VIOLATION = "23505"
# PostgREST "function not found"
UNKNOWN_PROCEDURE = "PGRST202"


class StoreError(Exception):
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class ConflictError(StoreError):
    """Insert rejected by a uniqueness constraint."""


def is_conflict(err: StoreError) -> bool:
    if isinstance(err, ConflictError):
        return True
    return err.code == UNIQUE_VIOLATION or "duplicate" in (err.message or "").lower()


@dataclass(frozen=True)
class In:
    values: Sequence[Any]


@dataclass(frozen=True)
class ILike:
    pattern: str


# column -> value (None means IS NULL), In(...) or ILike(...)
Filters = dict[str, Any]
# (column, "asc" | "desc")
Order = tuple[str, str]


class Store(Protocol):
    def insert(self, table: str, record: Record) -> Record: ...

    def query(
        self,
        table: str,
        filters: Filters | None = None,
        *,
        limit: int | None = None,
        order: Order | None = None,
    ) -> list[Record]: ...

    def update(self, table: str, filters: Filters, patch: Record) -> int: ...

    def call_procedure(self, name: str) -> list[Record]: ...
