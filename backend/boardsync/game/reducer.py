"""Deterministic state transitions for the shared board document.

The reducer manipulates card references structurally; it does not judge
whether a move is legal under the card game's rules. Randomness is always
drawn from the ``rng`` argument.
"""

import random
from typing import Optional

from .actions import (
    Action,
    Mulligan,
    MoveTop,
    Refresh,
    Reveal,
    SetResource,
    Shuffle,
)
from .state import RESOURCE_MAX, RESOURCE_MIN, GameState, SideState

MULLIGAN_DRAW = 5
REFRESH_TRANSFER = 2


def clamp(value, low: int = RESOURCE_MIN, high: int = RESOURCE_MAX) -> int:
    """Coerce to int (truncating) and clamp; anything non-numeric becomes ``low``."""
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        number = 0
    return min(high, max(low, number))


def _move_top(side: SideState, source: str, dest: str) -> Optional[str]:
    cards = side.zones[source]
    if not cards:
        return None
    card = cards.pop(0)
    side.zones[dest].insert(0, card)
    side.counts[source] -= 1
    side.counts[dest] += 1
    if source in side.revealed:
        side.revealed[source].discard(card)
    return card


def _shuffle(cards: list, rng: random.Random) -> None:
    # Fisher-Yates, in place
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randint(0, i)
        cards[i], cards[j] = cards[j], cards[i]


def _mulligan(side: SideState, rng: random.Random) -> None:
    hand = side.zones['hand']
    while hand:
        card = hand.pop(0)
        side.zones['deck'].append(card)
        side.counts['hand'] -= 1
        side.counts['deck'] += 1
    _shuffle(side.zones['deck'], rng)
    for _ in range(min(MULLIGAN_DRAW, len(side.zones['deck']))):
        _move_top(side, 'deck', 'hand')


def _refresh(side: SideState) -> None:
    pools = side.pools
    pools['rested'] = 0
    transfer = min(REFRESH_TRANSFER, pools['reserve'], RESOURCE_MAX - pools['active'])
    transfer = max(0, transfer)
    pools['reserve'] -= transfer
    pools['active'] = clamp(pools['active'] + transfer)
    _move_top(side, 'deck', 'hand')


def apply_action(state: GameState, action: Action, rng: Optional[random.Random] = None) -> GameState:
    """Apply ``action`` to ``state`` in place and return it.

    Actions that cannot take effect (empty source zone, unknown kind) leave
    the state untouched.
    """
    rng = rng or random.Random()

    if isinstance(action, MoveTop):
        _move_top(state.side(action.side), action.source, action.dest)
    elif isinstance(action, SetResource):
        state.side(action.side).pools[action.pool] = clamp(action.value)
    elif isinstance(action, Shuffle):
        _shuffle(state.side(action.side).zones[action.zone], rng)
    elif isinstance(action, Mulligan):
        _mulligan(state.side(action.side), rng)
    elif isinstance(action, Refresh):
        _refresh(state.side(action.side))
    elif isinstance(action, Reveal):
        revealed = state.side(action.side).revealed.get(action.zone)
        if revealed is not None:
            revealed.update(action.cards)
    return state
