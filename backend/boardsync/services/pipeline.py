import logging
import random
import time
from typing import Any, NamedTuple, Optional

from boardsync.game import apply_action, parse_action
from .errors import NotSeatedError
from .snapshots import AUTHORITATIVE, RELAY

logger = logging.getLogger(__name__)


class Outcome(NamedTuple):
    ok: bool
    reason: Optional[str] = None
    version: Optional[int] = None

    def to_ack(self):
        if self.ok:
            return {'ok': True}
        return {'ok': False, 'reason': self.reason}


class ActionPipeline:
    """Entry point for every inbound action from a connection.

    Only seated players may act. In relay mode the action is stamped and
    forwarded to the rest of the room untouched; in authoritative mode it is
    reduced into the room's GameState and the new document goes to everyone,
    the sender included.
    """

    def __init__(self, registry, snapshots, emitter, rng: Optional[random.Random] = None) -> None:
        self.registry = registry
        self.snapshots = snapshots
        self.emitter = emitter
        self.rng = rng or random.Random()

    @property
    def mode(self) -> str:
        return self.snapshots.mode

    def _seated(self, sid: str):
        session, participant = self.registry.find(sid)
        if participant is None or not participant.is_player:
            raise NotSeatedError(sid)
        return session, participant

    def submit(self, sid: str, payload: Any) -> Outcome:
        try:
            session, _ = self._seated(sid)
        except NotSeatedError as exc:
            return Outcome(False, exc.reason)

        if self.mode == RELAY:
            if isinstance(payload, dict):
                enriched = dict(payload)
            else:
                logger.warning(f"[deny] event=action sid={sid} reason=payload-not-object type={type(payload).__name__}")
                enriched = {}
            enriched['_from'] = sid
            enriched['_ts'] = int(time.time() * 1000)
            self.emitter.to_room(session.room_id, 'action', enriched, skip_sid=sid)
            return Outcome(True, version=session.version)

        action = parse_action(payload)
        apply_action(session.document, action, self.rng)
        version = self.snapshots.publish(session.room_id)
        return Outcome(True, version=version)

    def push_snapshot(self, sid: str, document: Any) -> Outcome:
        """Relay-mode publish: store a player's document and hand it to the rest of the room."""
        try:
            session, _ = self._seated(sid)
        except NotSeatedError as exc:
            return Outcome(False, exc.reason)
        if self.mode == AUTHORITATIVE:
            return Outcome(False, 'authoritative')
        self.snapshots.store(session, document)
        version = self.snapshots.publish(session.room_id, skip_sid=sid)
        return Outcome(True, version=version)
