import re

_SPACES = re.compile(r"\s+")
# a letter at the string start or right after any non-letter
_WORD_START = re.compile(r"(^|[^a-z])([a-z])")


def normalize_spaces(value: str | None) -> str:
    return _SPACES.sub(" ", value or "").strip()


def title_case(value: str | None) -> str:
    """Canonical display form for cities and venue types.

    Naive ASCII rule: "mcdonald's" becomes "Mcdonald'S".
    """
    cleaned = normalize_spaces(value).lower()
    return _WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), cleaned)


def normalized_key(value: str | None) -> str:
    """Equality key, never shown to users."""
    return normalize_spaces(value).lower()
