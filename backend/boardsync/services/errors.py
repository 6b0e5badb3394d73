class RoomError(Exception):
    """Base class for room-domain errors."""


class SpectatorsFullError(RoomError):
    """Raised when a room has no spectator slot left for a joining connection."""

    def __init__(self, room_id: str):
        super().__init__(f"room={room_id} spectators full")
        self.room_id = room_id


class NotSeatedError(RoomError):
    """Raised when a non-player tries to mutate or relay room state."""

    reason = 'spectator'
