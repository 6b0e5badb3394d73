from typing import Any, Optional

from boardsync.models import RoomSession

AUTHORITATIVE = 'authoritative'
RELAY = 'relay'
SYNC_MODES = (AUTHORITATIVE, RELAY)

# Event carrying the document for each mode
SNAPSHOT_EVENTS = {AUTHORITATIVE: 'state:update', RELAY: 'snapshot:apply'}


class SnapshotStore:
    """Holds each room's document and version and ships it to members.

    In authoritative mode the document is a GameState serialized with its
    version; in relay mode it is whatever a player last pushed, sent verbatim.
    """

    def __init__(self, registry, emitter, mode: str = AUTHORITATIVE) -> None:
        if mode not in SYNC_MODES:
            raise ValueError(f"unknown sync mode: {mode!r}")
        self.registry = registry
        self.emitter = emitter
        self.mode = mode
        self.event = SNAPSHOT_EVENTS[mode]

    def serialize(self, session: RoomSession) -> Any:
        if self.mode == AUTHORITATIVE:
            return session.document.to_wire(session.version)
        return session.document

    def store(self, session: RoomSession, document: Any) -> None:
        session.document = document

    def publish(self, room_id: str, skip_sid: Optional[str] = None) -> Optional[int]:
        """Bump the room version and send the document to the room.

        Returns the new version, or None when the room no longer exists.
        """
        session = self.registry.get(room_id)
        if session is None or session.document is None:
            return None
        session.version += 1
        self.emitter.to_room(room_id, self.event, self.serialize(session), skip_sid=skip_sid)
        return session.version

    def pull(self, room_id: str, sid: str) -> bool:
        """Send the current document to one connection. Never changes the version."""
        session = self.registry.get(room_id)
        if session is None or session.document is None:
            return False
        self.emitter.to_sid(sid, self.event, self.serialize(session))
        return True
