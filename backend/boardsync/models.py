from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

PLAYER = 'PLAYER'
SPECTATOR = 'SPECTATOR'
PLAYER_SEATS = ('P1', 'P2')
MAX_PLAYERS = len(PLAYER_SEATS)


@dataclass(frozen=True)
class Participant:
    """One live connection inside a room. Fixed at join time."""

    sid: str
    name: str
    role: str
    seat: str

    @property
    def is_player(self) -> bool:
        return self.role == PLAYER

    def to_dict(self):
        return {
            'id': self.sid,
            'name': self.name,
            'role': self.role,
            'seat': self.seat,
        }


@dataclass
class RoomSession:
    room_id: str
    roster: Dict[str, Participant] = field(default_factory=dict)
    # GameState in authoritative mode, the last pushed blob in relay mode
    document: Optional[Any] = None
    version: int = 0
    next_spectator_seq: int = 1

    def players(self) -> List[Participant]:
        return [p for p in self.roster.values() if p.role == PLAYER]

    def spectator_count(self) -> int:
        return sum(1 for p in self.roster.values() if p.role == SPECTATOR)

    def roster_list(self) -> List[Dict[str, str]]:
        return [p.to_dict() for p in self.roster.values()]

    def is_empty(self) -> bool:
        return not self.roster
