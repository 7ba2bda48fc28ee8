from __future__ import annotations

from typing import Iterable, Iterator, Sequence


def normalize_card_keys(raw_text: str | None) -> list[str]:
    """Split an uploaded key list into individual keys.

    Only newlines separate keys. Commas, tabs and semicolons are valid key
    content. Lines are stripped and blank lines dropped; order and
    duplicates are kept.
    """
    if not raw_text:
        return []
    return sanitize_card_keys(raw_text.split("\n"))


def sanitize_card_keys(keys: Iterable[str | None]) -> list[str]:
    cleaned: list[str] = []
    for key in keys:
        value = (key or "").strip()
        if value:
            cleaned.append(value)
    return cleaned


def chunked(items: Sequence[str], size: int) -> Iterator[list[str]]:
    if size < 1:
        raise ValueError("size must be a positive integer")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])
