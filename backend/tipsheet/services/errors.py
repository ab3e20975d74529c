from __future__ import annotations

from tipsheet.services.records import Venue


class InvalidInput(Exception):
    """Rejected before any store call."""


class NotFound(Exception):
    pass


class DuplicateVenue(Exception):
    """Venue insert hit a uniqueness constraint.

    ``existing`` is the venue already on file, or None when it could not be
    located and the user has to search for it manually.
    """

    def __init__(self, existing: Venue | None):
        self.existing = existing
        if existing is not None:
            msg = f'"{existing.name}" in {existing.city}, {existing.state} already exists'
        else:
            msg = "This venue already exists, but we couldn't find it. Try searching for it."
        super().__init__(msg)


class AlreadyReviewed(Exception):
    def __init__(self, venue_id: str):
        self.venue_id = venue_id
        super().__init__("You already reviewed this venue from this device.")


class AlreadyResolved(Exception):
    pass


class CityMergeConflict(Exception):
    """A venue in the source city has a namesake in the target city."""

    def __init__(self, to_city: str):
        self.to_city = to_city
        super().__init__(
            f"A venue with the same name already exists in {to_city}. "
            "Edit or remove one of them, then merge again."
        )
