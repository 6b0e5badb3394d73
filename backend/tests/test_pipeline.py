import logging
import random

from boardsync.game import initial_state
from boardsync.models import Participant
from boardsync.services.pipeline import ActionPipeline
from boardsync.services.registry import RoomRegistry
from boardsync.services.snapshots import RELAY, SnapshotStore

DRAW = {'kind': 'MOVE_TOP', 'from': 'deck', 'to': 'hand', 'side': 'A'}


def _seat_room(registry, room_id='dev'):
    session = registry.get_or_create(room_id)
    registry.add_participant(session, Participant('p1', 'A', 'PLAYER', 'P1'))
    registry.add_participant(session, Participant('p2', 'B', 'PLAYER', 'P2'))
    registry.add_participant(session, Participant('s1', 'C', 'SPECTATOR', 'SPEC1'))
    return session


def test_accepted_action_bumps_version_and_broadcasts_to_everyone(registry, pipeline, emitter):
    session = _seat_room(registry)
    outcome = pipeline.submit('p1', DRAW)
    assert outcome.to_ack() == {'ok': True}
    assert outcome.version == 1 == session.version

    [(scope, room_id, _, wire, skip_sid)] = emitter.events('state:update')
    assert (scope, room_id, skip_sid) == ('room', 'dev', None)
    assert wire['version'] == 1
    assert wire['deckCounts']['A'] == 49 and wire['handCounts']['A'] == 1


def test_empty_source_still_advances_version(emitter):
    registry = RoomRegistry(document_factory=lambda: initial_state(0))
    store = SnapshotStore(registry, emitter)
    pipeline = ActionPipeline(registry, store, emitter, random.Random(0))
    session = _seat_room(registry)

    pipeline.submit('p1', DRAW)
    pipeline.submit('p2', {'type': 'NOT_A_THING'})
    versions = [entry[3]['version'] for entry in emitter.events('state:update')]
    assert versions == [1, 2]
    assert session.document.side('A').counts['hand'] == 0


def test_spectator_is_denied_without_broadcast(registry, pipeline, emitter):
    session = _seat_room(registry)
    outcome = pipeline.submit('s1', DRAW)
    assert outcome.to_ack() == {'ok': False, 'reason': 'spectator'}
    assert emitter.sent == []
    assert session.version == 0


def test_unknown_connection_is_denied(registry, pipeline):
    _seat_room(registry)
    assert not pipeline.submit('ghost', DRAW).ok


def test_snapshot_push_ignored_in_authoritative_mode(registry, pipeline, emitter):
    session = _seat_room(registry)
    document = session.document
    outcome = pipeline.push_snapshot('p1', {'anything': True})
    assert not outcome.ok
    assert session.document is document
    assert emitter.sent == []


def test_relay_mode_forwards_stamped_action_to_others(emitter):
    registry = RoomRegistry()
    pipeline = ActionPipeline(registry, SnapshotStore(registry, emitter, RELAY), emitter)
    session = _seat_room(registry)

    outcome = pipeline.submit('p2', {'type': 'ATTACK', 'target': 3})
    assert outcome.ok
    [(_, room_id, event, data, skip_sid)] = emitter.sent
    assert (room_id, event, skip_sid) == ('dev', 'action', 'p2')
    assert data['type'] == 'ATTACK' and data['target'] == 3
    assert data['_from'] == 'p2' and isinstance(data['_ts'], int)
    assert session.document is None and session.version == 0


def test_relay_mode_logs_when_payload_is_not_an_object(emitter, caplog):
    registry = RoomRegistry()
    pipeline = ActionPipeline(registry, SnapshotStore(registry, emitter, RELAY), emitter)
    _seat_room(registry)

    with caplog.at_level(logging.WARNING, logger='boardsync'):
        outcome = pipeline.submit('p1', ['not', 'a', 'dict'])
    assert outcome.ok
    [(_, _, _, data, _)] = emitter.sent
    assert set(data) == {'_from', '_ts'}
    assert any('[deny] event=action sid=p1' in r.getMessage() for r in caplog.records)


def test_relay_mode_snapshot_push_stores_and_fans_out(emitter):
    registry = RoomRegistry()
    store = SnapshotStore(registry, emitter, RELAY)
    pipeline = ActionPipeline(registry, store, emitter)
    session = _seat_room(registry)
    document = {'board': [1, 2, 3]}

    assert pipeline.push_snapshot('s1', {'evil': True}).ok is False
    assert session.document is None

    assert pipeline.push_snapshot('p1', document).ok
    assert session.document == document and session.version == 1
    [(_, _, event, data, skip_sid)] = emitter.sent
    assert event == 'snapshot:apply' and data == document and skip_sid == 'p1'


def test_pull_has_no_side_effect(registry, emitter):
    session = _seat_room(registry)
    store = SnapshotStore(registry, emitter)
    assert store.pull('dev', 's1')
    assert store.pull('dev', 's1')
    assert session.version == 0
    assert [entry[1] for entry in emitter.sent] == ['s1', 's1']
    assert not store.pull('elsewhere', 's1')
