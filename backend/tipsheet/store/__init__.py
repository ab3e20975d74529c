from .base import (
    UNIQUE_VIOLATION,
    UNKNOWN_PROCEDURE,
    ConflictError,
    Filters,
    ILike,
    In,
    Order,
    Record,
    Store,
    StoreError,
    is_conflict,
)

__all__ = [
    "UNIQUE_VIOLATION",
    "UNKNOWN_PROCEDURE",
    "ConflictError",
    "Filters",
    "ILike",
    "In",
    "Order",
    "Record",
    "Store",
    "StoreError",
    "is_conflict",
]
