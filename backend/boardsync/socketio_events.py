import random

from flask import current_app, request
from flask_socketio import emit, join_room

from boardsync import socketio
from boardsync.game import initial_state
from boardsync.models import Participant
from boardsync.services.broadcast import RosterBroadcaster, SocketEmitter, room_channel
from boardsync.services.errors import SpectatorsFullError
from boardsync.services.pipeline import ActionPipeline
from boardsync.services.registry import RoomRegistry
from boardsync.services.seating import assign_seat
from boardsync.services.snapshots import AUTHORITATIVE, SnapshotStore


class RoomEvents:
    """Connection lifecycle and per-event handlers for one application.

    Every handler runs under the registry lock, so joins, actions and
    departures are processed one at a time across all rooms.
    """

    def __init__(self, registry, snapshots, pipeline, roster, default_room='dev', max_spectators=None):
        self.registry = registry
        self.snapshots = snapshots
        self.pipeline = pipeline
        self.roster = roster
        self.default_room = default_room
        self.max_spectators = max_spectators

    @classmethod
    def from_config(cls, config, emitter):
        mode = config.get('SYNC_MODE', AUTHORITATIVE)
        factory = None
        if mode == AUTHORITATIVE:
            deck_size = int(config.get('DECK_SIZE', 50))
            template = config.get('CARD_PATH_TEMPLATE', 'deck/player_{side}/images/image ({n}).png')

            def factory():
                return initial_state(deck_size, template)

        registry = RoomRegistry(document_factory=factory)
        snapshots = SnapshotStore(registry, emitter, mode)
        pipeline = ActionPipeline(registry, snapshots, emitter, random.Random(config.get('SHUFFLE_SEED')))
        return cls(
            registry,
            snapshots,
            pipeline,
            RosterBroadcaster(emitter),
            default_room=config.get('DEFAULT_ROOM', 'dev'),
            max_spectators=config.get('MAX_SPECTATORS'),
        )

    # ---- lifecycle ----
    def handle_connect(self, auth=None):
        sid = request.sid
        room_id = str(request.args.get('room') or self.default_room)
        name = str(request.args.get('name') or 'anon')
        requested_role = request.args.get('role')

        with self.registry.lock():
            if room_id not in self.registry:
                current_app.logger.info(f"[room-create] room={room_id}")
            session = self.registry.get_or_create(room_id)
            try:
                seating = assign_seat(session, requested_role, self.max_spectators)
            except SpectatorsFullError:
                if session.is_empty():
                    self.registry.remove(room_id)
                current_app.logger.info(f"[spectators-full] room={room_id} sid={sid}")
                emit('room:spectators_full', {'room': room_id})
                return False

            join_room(room_channel(room_id))
            self.registry.add_participant(session, Participant(sid, name, seating.role, seating.seat))
            current_app.logger.info(f"[join] room={room_id} sid={sid} name={name} role={seating.role} seat={seating.seat}")

            emit('room:hello', {'room': room_id, 'name': name, 'role': seating.role, 'seat': seating.seat})
            self.roster.publish(session)
            # Late join catch-up
            self.snapshots.pull(room_id, sid)

    def handle_disconnect(self, reason=None):
        sid = request.sid
        with self.registry.lock():
            session = self.registry.discard_participant(sid)
            if session is None:
                return
            current_app.logger.info(f"[leave] room={session.room_id} sid={sid} remaining={len(session.roster)}")
            if session.is_empty():
                current_app.logger.info(f"[room-drop] room={session.room_id}")
                return
            self.roster.publish(session)

    # ---- document traffic ----
    def handle_action(self, payload=None):
        sid = request.sid
        with self.registry.lock():
            outcome = self.pipeline.submit(sid, payload)
        if outcome.ok:
            current_app.logger.debug(f"[action] sid={sid} mode={self.pipeline.mode} version={outcome.version}")
        else:
            current_app.logger.info(f"[deny] event=action sid={sid} reason={outcome.reason}")
        return outcome.to_ack()

    def handle_snapshot_push(self, document=None):
        sid = request.sid
        with self.registry.lock():
            outcome = self.pipeline.push_snapshot(sid, document)
        if not outcome.ok:
            current_app.logger.info(f"[deny] event=snapshot:push sid={sid} reason={outcome.reason}")

    def handle_snapshot_pull(self, *args):
        sid = request.sid
        with self.registry.lock():
            session, _ = self.registry.find(sid)
            if session is not None:
                self.snapshots.pull(session.room_id, sid)


def handle_error(exc):
    current_app.logger.exception(f"[error] sid={getattr(request, 'sid', None)} {exc}")
    return {'ok': False, 'reason': 'error'}


def register_socketio_handlers(config, namespace='/') -> RoomEvents:
    """Build the room services for an app and bind them to Socket.IO events."""
    events = RoomEvents.from_config(config, SocketEmitter(socketio, namespace))
    socketio.on_event('connect', events.handle_connect, namespace=namespace)
    socketio.on_event('disconnect', events.handle_disconnect, namespace=namespace)
    socketio.on_event('action', events.handle_action, namespace=namespace)
    socketio.on_event('snapshot:push', events.handle_snapshot_push, namespace=namespace)
    socketio.on_event('snapshot:pull', events.handle_snapshot_pull, namespace=namespace)
    socketio.on_error_default(handle_error)
    return events
