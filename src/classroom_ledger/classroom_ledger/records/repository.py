from __future__ import annotations

from typing import Iterator, Optional, Protocol, Sequence

from .model import CatalogEntry, Room, Session, Settings, Student


class RecordRepository(Protocol):
    """Record Store contract: rooms (with books and students), sessions, settings.

    The store is an explicit object passed by reference into every service;
    mutating services change it in place.
    """

    @property
    def rooms(self) -> Sequence[Room]:
        raise NotImplementedError

    @property
    def sessions(self) -> Sequence[Session]:
        raise NotImplementedError

    @property
    def settings(self) -> Settings:
        raise NotImplementedError

    def get_room(self, room_id: int) -> Optional[Room]:
        raise NotImplementedError

    def get_room_by_name(self, name: str) -> Optional[Room]:
        raise NotImplementedError

    def book_catalog(self) -> dict[int, CatalogEntry]:
        raise NotImplementedError

    def iter_enrollments(self) -> Iterator[tuple[Room, Student]]:
        raise NotImplementedError

    def completed_sessions(
        self,
        *,
        room_name: Optional[str] = None,
        book_name: Optional[str] = None,
        month: Optional[str] = None,
    ) -> list[Session]:
        raise NotImplementedError

    def replace_contents(
        self,
        *,
        rooms: list[Room],
        sessions: list[Session],
        settings: Settings,
    ) -> None:
        raise NotImplementedError
