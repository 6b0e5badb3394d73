from typing import NamedTuple, Optional

from boardsync.models import MAX_PLAYERS, PLAYER, PLAYER_SEATS, SPECTATOR, RoomSession
from .errors import SpectatorsFullError

SPECTATOR_REQUEST = 'spec'


class Seating(NamedTuple):
    role: str
    seat: str


def assign_seat(session: RoomSession, requested_role: Optional[str] = None,
                max_spectators: Optional[int] = None) -> Seating:
    """Decide role and seat for a connection joining ``session``.

    The first two player-eligible joins take P1 then P2 (whichever is free),
    everyone else watches under a never-reused SPEC<n> label. Raises
    SpectatorsFullError without touching the session when no spectator slot
    is left.
    """
    players = session.players()
    if requested_role == SPECTATOR_REQUEST or len(players) >= MAX_PLAYERS:
        if max_spectators is not None and session.spectator_count() >= max_spectators:
            raise SpectatorsFullError(session.room_id)
        seat = f"SPEC{session.next_spectator_seq}"
        session.next_spectator_seq += 1
        return Seating(SPECTATOR, seat)

    taken = {p.seat for p in players}
    seat = next(s for s in PLAYER_SEATS if s not in taken)
    return Seating(PLAYER, seat)
