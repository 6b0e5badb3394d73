from typing import Any, Optional

from boardsync.models import RoomSession


def room_channel(room_id: str) -> str:
    return f"room:{room_id}"


class SocketEmitter:
    """Fire-and-forget delivery to one connection or a whole room."""

    def __init__(self, socketio, namespace: str = '/') -> None:
        self.socketio = socketio
        self.namespace = namespace

    def to_room(self, room_id: str, event: str, data: Any, skip_sid: Optional[str] = None) -> None:
        self.socketio.emit(event, data, to=room_channel(room_id), skip_sid=skip_sid, namespace=self.namespace)

    def to_sid(self, sid: str, event: str, data: Any) -> None:
        self.socketio.emit(event, data, to=sid, namespace=self.namespace)


class RosterBroadcaster:
    def __init__(self, emitter) -> None:
        self.emitter = emitter

    def publish(self, session: RoomSession) -> None:
        self.emitter.to_room(session.room_id, 'room:roster', session.roster_list())
