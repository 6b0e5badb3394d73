"""Inbound action payloads parsed into a closed set of action types.

Each client payload is a dict with a ``type`` (or ``kind``) tag. Parsing never
raises: anything that cannot be understood becomes ``UnknownAction``, which the
reducer treats as a no-op.
"""

from dataclasses import dataclass
from typing import Any, FrozenSet, Optional, Union

from .state import RESOURCE_POOLS, SIDES, ZONE_WIRE_KEYS, ZONES

# (source, destination) pairs a MOVE_TOP may use
MOVE_ROUTES = frozenset({
    ('deck', 'hand'),
    ('deck', 'life'),
    ('deck', 'trash'),
    ('life', 'hand'),
    ('life', 'trash'),
})

# Fixed-route kinds still sent by older clients
MOVE_ALIASES = {
    'DRAW_TO_HAND': ('deck', 'hand'),
    'DECK_TO_LIFE_TOP': ('deck', 'life'),
    'DECK_TO_TRASH': ('deck', 'trash'),
    'LIFE_TO_HAND': ('life', 'hand'),
    'LIFE_TO_TRASH': ('life', 'trash'),
}

POOL_ALIASES = {'deck': 'reserve', 'act': 'active', 'rest': 'rested'}
_WIRE_ZONES = {key: zone for zone, key in ZONE_WIRE_KEYS.items()}


@dataclass(frozen=True)
class MoveTop:
    side: str
    source: str
    dest: str


@dataclass(frozen=True)
class SetResource:
    side: str
    pool: str
    value: Any


@dataclass(frozen=True)
class Shuffle:
    side: str
    zone: str


@dataclass(frozen=True)
class Mulligan:
    side: str


@dataclass(frozen=True)
class Refresh:
    side: str


@dataclass(frozen=True)
class Reveal:
    side: str
    zone: str
    cards: FrozenSet[str]


@dataclass(frozen=True)
class UnknownAction:
    kind: Optional[str] = None


Action = Union[MoveTop, SetResource, Shuffle, Mulligan, Refresh, Reveal, UnknownAction]


def _side(payload) -> Optional[str]:
    side = payload.get('side', payload.get('player'))
    return side if side in SIDES else None


def _zone_path(path) -> Optional[tuple]:
    """Resolve ``deckImages.A`` / ``deck.A`` into ``(side, zone)``."""
    if not isinstance(path, str) or path.count('.') != 1:
        return None
    key, side = path.split('.')
    zone = _WIRE_ZONES.get(key, key)
    if zone not in ZONES or side not in SIDES:
        return None
    return side, zone


def _cards(raw) -> FrozenSet[str]:
    if isinstance(raw, str):
        return frozenset([raw])
    if not isinstance(raw, (list, tuple, set, frozenset)):
        return frozenset()
    return frozenset(c for c in raw if isinstance(c, str))


def parse_action(payload) -> Action:
    if not isinstance(payload, dict):
        return UnknownAction()
    kind = payload.get('type', payload.get('kind'))
    if not isinstance(kind, str):
        return UnknownAction()
    kind = kind.upper()

    if kind == 'SHUFFLE':
        resolved = _zone_path(payload.get('path'))
        if resolved is None:
            return UnknownAction(kind)
        return Shuffle(*resolved)

    side = _side(payload)
    if side is None:
        return UnknownAction(kind)

    if kind == 'MOVE_TOP' or kind in MOVE_ALIASES:
        route = MOVE_ALIASES.get(kind) or (str(payload.get('from')), str(payload.get('to')))
        if route not in MOVE_ROUTES:
            return UnknownAction(kind)
        return MoveTop(side, *route)
    if kind in ('SET_RESOURCE', 'DON_SET'):
        target = str(payload.get('target'))
        pool = POOL_ALIASES.get(target, target)
        if pool not in RESOURCE_POOLS:
            return UnknownAction(kind)
        return SetResource(side, pool, payload.get('value'))
    if kind == 'MULLIGAN':
        return Mulligan(side)
    if kind == 'REFRESH':
        return Refresh(side)
    if kind in ('REVEAL', 'REVEAL_LIFE'):
        zone = 'life' if kind == 'REVEAL_LIFE' else str(payload.get('zone'))
        return Reveal(side, zone, _cards(payload.get('cards')))
    return UnknownAction(kind)
