from __future__ import annotations

import logging
from typing import Iterable, Sequence

from tipsheet.core.text import normalize_spaces, title_case
from tipsheet.services.errors import CityMergeConflict, InvalidInput
from tipsheet.store import ILike, Store, StoreError, is_conflict

log = logging.getLogger("tipsheet.cities")

# below this canonical length a suggestion is never offered
MIN_SUGGEST_LENGTH = 5
# always suggest at or under this distance
CLOSE_DISTANCE = 2
# distance 3 is accepted only for inputs at least this long
FAR_DISTANCE = 3
FAR_MIN_LENGTH = 9


def levenshtein(a: str, b: str) -> int:
    s = a.lower()
    t = b.lower()
    m, n = len(s), len(t)
    if m == 0:
        return n
    if n == 0:
        return m

    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m + 1):
        dp[i][0] = i
    for j in range(n + 1):
        dp[0][j] = j

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            cost = 0 if s[i - 1] == t[j - 1] else 1
            dp[i][j] = min(
                dp[i - 1][j] + 1,
                dp[i][j - 1] + 1,
                dp[i - 1][j - 1] + cost,
            )
    return dp[m][n]


def best_city_suggestion(raw: str | None, known_cities: Sequence[str]) -> str | None:
    """Return a known city the user probably meant, or None.

    Ties between equally close cities go to whichever comes first in
    ``known_cities``; callers should not rely on that order.
    """
    city = title_case(raw)
    if not city:
        return None

    lowered = city.lower()
    if any(c.lower() == lowered for c in known_cities):
        return None

    best: str | None = None
    best_dist = 0
    for candidate in known_cities:
        dist = levenshtein(city, candidate)
        if best is None or dist < best_dist:
            best, best_dist = candidate, dist

    if best is None:
        return None

    length = len(city)
    if length < MIN_SUGGEST_LENGTH:
        return None
    if best_dist <= CLOSE_DISTANCE:
        return best
    if best_dist == FAR_DISTANCE and length >= FAR_MIN_LENGTH:
        return best
    return None


def distinct_cities(rows: Iterable[dict]) -> list[str]:
    found = {title_case(r.get("city")) for r in rows if r.get("city")}
    found.discard("")
    return sorted(found)


def load_known_cities(store: Store, *, limit: int = 2000) -> list[str]:
    rows = store.query("venues", limit=limit)
    return distinct_cities(rows)


def merge_cities(store: Store, *, from_city: str, to_city: str) -> int:
    """Rename every venue in ``from_city`` (case-insensitive) to ``to_city``."""
    src_raw = normalize_spaces(from_city)
    dst_raw = normalize_spaces(to_city)
    if not src_raw or not dst_raw:
        raise InvalidInput("Pick both From and To cities.")

    src = title_case(src_raw)
    dst = title_case(dst_raw)
    if src.lower() == dst.lower():
        raise InvalidInput("From and To are the same city.")

    # ilike without wildcards: case-insensitive exact match
    try:
        n = store.update("venues", {"city": ILike(src)}, {"city": dst})
    except StoreError as e:
        if not is_conflict(e):
            raise
        raise CityMergeConflict(dst) from e
    log.info("merged city %r into %r (%s venues)", src, dst, n)
    return n
