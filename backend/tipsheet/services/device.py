"""Per-device memory of which venues this device has already reviewed."""

from __future__ import annotations

from typing import Protocol


class DeviceStore(Protocol):
    def has_reviewed(self, venue_id: str) -> bool: ...

    def mark_reviewed(self, venue_id: str) -> None: ...


class InMemoryDeviceStore:
    def __init__(self, reviewed: set[str] | None = None):
        self.reviewed: set[str] = set(reviewed or ())

    def has_reviewed(self, venue_id: str) -> bool:
        return venue_id in self.reviewed

    def mark_reviewed(self, venue_id: str) -> None:
        self.reviewed.add(venue_id)


class CookieDeviceStore(InMemoryDeviceStore):
    """Flags carried in a browser cookie as a dot-separated id list.

    ``dirty`` tells the router the cookie needs to be written back.
    """

    # 36-char uuids plus separators stay under the ~4 KB browser cookie limit
    MAX_IDS = 100

    def __init__(self, raw: str | None):
        ids = [x.strip() for x in (raw or "").split(".") if x.strip()]
        super().__init__(set(ids[-self.MAX_IDS:]))
        self._order = ids[-self.MAX_IDS:]
        self.dirty = False

    def mark_reviewed(self, venue_id: str) -> None:
        if venue_id in self.reviewed:
            return
        super().mark_reviewed(venue_id)
        self._order.append(venue_id)
        self.dirty = True

    def cookie_value(self) -> str:
        return ".".join(self._order[-self.MAX_IDS:])
