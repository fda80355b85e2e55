"""Search text helpers - pure, no I/O dependencies."""

import unicodedata


def fold(text: str | None) -> str:
    """Lowercase and strip accents so 'Cálculo' matches 'calc'."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def contains(query: str, *fields: str | None) -> bool:
    """Whether any field contains the folded query (an empty query matches)."""
    needle = fold(query)
    return any(needle in fold(text) for text in fields)
