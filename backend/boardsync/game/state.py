"""Board document held per room in authoritative mode."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

SIDES = ('A', 'B')
ZONES = ('deck', 'hand', 'life', 'trash')
# Zones whose cards are face-down unless explicitly revealed
REVEALABLE_ZONES = ('life', 'deck')
RESOURCE_POOLS = ('reserve', 'active', 'rested')
RESOURCE_MIN = 0
RESOURCE_MAX = 10
INITIAL_RESERVE = 10
BOARD_SLOTS = 5

# Wire names used by the client bundle
ZONE_WIRE_KEYS = {zone: f"{zone}Images" for zone in ZONES}
COUNT_WIRE_KEYS = {zone: f"{zone}Counts" for zone in ZONES}
POOL_WIRE_KEYS = {'reserve': 'donDeck', 'active': 'donAct', 'rested': 'donRest'}


def _per_side(factory):
    return {side: factory() for side in SIDES}


@dataclass
class SideState:
    zones: Dict[str, List[str]] = field(default_factory=lambda: {z: [] for z in ZONES})
    counts: Dict[str, int] = field(default_factory=lambda: {z: 0 for z in ZONES})
    pools: Dict[str, int] = field(default_factory=lambda: {'reserve': INITIAL_RESERVE, 'active': 0, 'rested': 0})
    board: List[Optional[str]] = field(default_factory=lambda: [None] * BOARD_SLOTS)
    stage: Optional[str] = None
    revealed: Dict[str, Set[str]] = field(default_factory=lambda: {z: set() for z in REVEALABLE_ZONES})


@dataclass
class GameState:
    sides: Dict[str, SideState] = field(default_factory=lambda: _per_side(SideState))

    def side(self, side: str) -> SideState:
        return self.sides[side]

    def counts_consistent(self) -> bool:
        return all(
            s.counts[z] == len(s.zones[z])
            for s in self.sides.values() for z in ZONES
        )

    def to_wire(self, version: int) -> Dict[str, Any]:
        """Serialize for transmission. Reveal-sets become sorted lists here and only here."""
        wire: Dict[str, Any] = {'version': version, 'players': list(SIDES)}
        for zone in ZONES:
            wire[ZONE_WIRE_KEYS[zone]] = {k: list(s.zones[zone]) for k, s in self.sides.items()}
        for zone in ZONES:
            wire[COUNT_WIRE_KEYS[zone]] = {k: s.counts[zone] for k, s in self.sides.items()}
        for pool, key in POOL_WIRE_KEYS.items():
            wire[key] = {k: s.pools[pool] for k, s in self.sides.items()}
        wire['chara'] = {k: list(s.board) for k, s in self.sides.items()}
        wire['stage'] = {k: s.stage for k, s in self.sides.items()}
        wire['revealed'] = {
            zone: {k: sorted(s.revealed[zone]) for k, s in self.sides.items()}
            for zone in REVEALABLE_ZONES
        }
        return wire


def initial_state(deck_size: int = 50,
                  card_template: str = 'deck/player_{side}/images/image ({n}).png') -> GameState:
    """Fresh layout: every deck full, every other zone empty."""
    state = GameState()
    for side, s in state.sides.items():
        s.zones['deck'] = [card_template.format(side=side, n=n) for n in range(1, deck_size + 1)]
        s.counts['deck'] = deck_size
    return state
