from __future__ import annotations

from typing import Iterator, Optional

from ..common.datetime_utils import month_key
from ..common.text import join_key, normalize_name
from .model import CatalogEntry, Room, Session, Settings, Student


class InMemoryRecordStore:
    """In-memory snapshot of a school's rooms, sessions and settings.

    Owned by the surrounding application; the engine only reads it and, for
    reconciliation, transfers, edits and imports, mutates it in place.
    """

    def __init__(
        self,
        rooms: Optional[list[Room]] = None,
        sessions: Optional[list[Session]] = None,
        settings: Optional[Settings] = None,
    ):
        self._rooms: list[Room] = list(rooms or [])
        self._sessions: list[Session] = list(sessions or [])
        self._settings = settings or Settings()

    @property
    def rooms(self) -> list[Room]:
        return self._rooms

    @property
    def sessions(self) -> list[Session]:
        return self._sessions

    @property
    def settings(self) -> Settings:
        return self._settings

    def get_room(self, room_id: int) -> Optional[Room]:
        return next((r for r in self._rooms if r.room_id == int(room_id)), None)

    def get_room_by_name(self, name: str) -> Optional[Room]:
        key = join_key(name)
        return next((r for r in self._rooms if join_key(r.name) == key), None)

    def book_catalog(self) -> dict[int, CatalogEntry]:
        # Later rooms overwrite earlier ones when a book id is reused.
        catalog: dict[int, CatalogEntry] = {}
        for room in self._rooms:
            for book in room.books:
                catalog[book.book_id] = CatalogEntry(book=book, room=room, normalized_name=normalize_name(book.name))
        return catalog

    def iter_enrollments(self) -> Iterator[tuple[Room, Student]]:
        for room in self._rooms:
            for student in room.students:
                yield room, student

    def completed_sessions(
        self,
        *,
        room_name: Optional[str] = None,
        book_name: Optional[str] = None,
        month: Optional[str] = None,
    ) -> list[Session]:
        room_key = join_key(room_name) if room_name is not None else None
        book_key = join_key(book_name) if book_name is not None else None

        out: list[Session] = []
        for s in self._sessions:
            if not s.counts_as_class:
                continue
            if room_key is not None and join_key(s.room_name) != room_key:
                continue
            if book_key is not None and join_key(s.book_name) != book_key:
                continue
            if month is not None and month_key(s.session_date) != month:
                continue
            out.append(s)
        return out

    def replace_contents(self, *, rooms: list[Room], sessions: list[Session], settings: Settings) -> None:
        self._rooms = list(rooms)
        self._sessions = list(sessions)
        self._settings = settings
