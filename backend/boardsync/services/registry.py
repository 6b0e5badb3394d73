"""In-memory room registry."""

import threading
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional

from boardsync.models import Participant, RoomSession


class RoomRegistry:
    """Process-wide table of live rooms, owned by one application instance.

    Rooms are created on first reference and dropped as soon as their roster
    empties. ``lock()`` serializes every connection event so that seating and
    document mutation run one handler at a time.
    """

    def __init__(self, document_factory: Optional[Callable[[], object]] = None) -> None:
        self._rooms: Dict[str, RoomSession] = {}
        self._sid_room: Dict[str, str] = {}
        self._document_factory = document_factory
        self._lock = threading.RLock()

    @contextmanager
    def lock(self) -> Iterator[None]:
        with self._lock:
            yield

    def get(self, room_id: str) -> Optional[RoomSession]:
        return self._rooms.get(room_id)

    def get_or_create(self, room_id: str) -> RoomSession:
        session = self._rooms.get(room_id)
        if session is None:
            session = RoomSession(room_id=room_id)
            if self._document_factory is not None:
                session.document = self._document_factory()
            self._rooms[room_id] = session
        return session

    def remove(self, room_id: str) -> None:
        self._rooms.pop(room_id, None)

    def __contains__(self, room_id: str) -> bool:
        return room_id in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    # ---- membership ----
    def add_participant(self, session: RoomSession, participant: Participant) -> None:
        session.roster[participant.sid] = participant
        self._sid_room[participant.sid] = session.room_id

    def find(self, sid: str):
        """Return ``(session, participant)`` for a live connection, or ``(None, None)``."""
        room_id = self._sid_room.get(sid)
        session = self._rooms.get(room_id) if room_id is not None else None
        if session is None:
            return None, None
        return session, session.roster.get(sid)

    def discard_participant(self, sid: str) -> Optional[RoomSession]:
        """Remove a connection from its room; drop the room once it is empty.

        Returns the session the connection belonged to, or None when it was
        already cleaned up.
        """
        room_id = self._sid_room.pop(sid, None)
        if room_id is None:
            return None
        session = self._rooms.get(room_id)
        if session is None:
            return None
        session.roster.pop(sid, None)
        if session.is_empty():
            self.remove(room_id)
        return session
