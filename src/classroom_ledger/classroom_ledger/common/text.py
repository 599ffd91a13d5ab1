from __future__ import annotations

import re
import unicodedata

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
_PUNCTUATION = re.compile(r"[^\w\s]|_", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_FIRST_NUMBER = re.compile(r"\d+")


def normalize_name(value: str | None) -> str:
    """Lower-case, strip accents and punctuation, collapse whitespace.

    "Book 1", " book  1" and "Bóok 1!" all map to the same key.
    """
    if not value:
        return ""
    text = unicodedata.normalize("NFD", value.lower())
    text = _COMBINING_MARKS.sub("", text)
    text = _PUNCTUATION.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def join_key(name: str | None) -> str:
    """Key used to join sessions to rooms and books.

    Sessions store room and book *names*; ids are not stable across imports
    and rooms/books get renamed or recreated, so joins go through the
    normalized name.
    """
    return normalize_name(name)


def book_number(name: str | None) -> int:
    """First integer found in a book name, 0 when there is none."""
    if not name:
        return 0
    match = _FIRST_NUMBER.search(name)
    return int(match.group(0)) if match else 0


def abbreviate_book_name(name: str) -> str:
    """'Book 3: Travel' -> 'Book 3'."""
    return name.split(":")[0].strip()
