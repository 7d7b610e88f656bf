import asyncio
import json

from fastapi import BackgroundTasks
from starlette.websockets import WebSocketState

from protolab_api.core.config import Settings
from protolab_api.dependencies import CollabServices
from protolab_api.services.broadcaster import Broadcaster, is_open
from protolab_api.services.change_tracker import ChangeTracker
from protolab_api.services.workspace_store import WorkspaceStore


class FakeConnection:
    def __init__(self, *, open: bool = True, fail: bool = False) -> None:
        state = WebSocketState.CONNECTED if open else WebSocketState.CONNECTING
        self.client_state = state
        self.application_state = state
        self.fail = fail
        self.sent: list[str] = []

    def close(self) -> None:
        self.client_state = WebSocketState.DISCONNECTED
        self.application_state = WebSocketState.DISCONNECTED

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("half-closed transport")
        self.sent.append(data)


def test_publish_sends_identical_payload_to_workspace_connections_only():
    broadcaster = Broadcaster()
    first, second, other = FakeConnection(), FakeConnection(), FakeConnection()
    broadcaster.subscribe("ws_1", first)
    broadcaster.subscribe("ws_1", second)
    broadcaster.subscribe("ws_2", other)

    delivered = asyncio.run(broadcaster.publish("ws_1", {"type": "document_added", "document": {"id": "doc_1"}}))

    assert delivered == 2
    assert first.sent == second.sent
    assert json.loads(first.sent[0]) == {"type": "document_added", "document": {"id": "doc_1"}}
    assert other.sent == []


def test_publish_skips_non_open_connections_without_pruning():
    broadcaster = Broadcaster()
    connecting = FakeConnection(open=False)
    closed = FakeConnection()
    closed.close()
    live = FakeConnection()
    for connection in (connecting, closed, live):
        broadcaster.subscribe("ws_1", connection)

    delivered = asyncio.run(broadcaster.publish("ws_1", {"type": "comment_added"}))

    assert delivered == 1
    assert connecting.sent == [] and closed.sent == []
    assert len(broadcaster.connections("ws_1")) == 3


def test_publish_swallows_send_failures():
    broadcaster = Broadcaster()
    broken = FakeConnection(fail=True)
    healthy = FakeConnection()
    broadcaster.subscribe("ws_1", broken)
    broadcaster.subscribe("ws_1", healthy)

    delivered = asyncio.run(broadcaster.publish("ws_1", {"type": "change_reviewed"}))

    assert delivered == 1
    assert len(healthy.sent) == 1


def test_publish_to_workspace_without_connections():
    assert asyncio.run(Broadcaster().publish("ws_empty", {"type": "document_added"})) == 0


def test_subscribe_is_idempotent_and_unsubscribe_removes_everywhere():
    broadcaster = Broadcaster()
    connection = FakeConnection()
    broadcaster.subscribe("ws_1", connection)
    broadcaster.subscribe("ws_1", connection)
    broadcaster.subscribe("ws_2", connection)

    assert len(broadcaster.connections("ws_1")) == 1

    removed = broadcaster.unsubscribe(connection)

    assert sorted(removed) == ["ws_1", "ws_2"]
    assert broadcaster.connections("ws_1") == []
    assert broadcaster.connections("ws_2") == []
    assert broadcaster.unsubscribe(connection) == []


def test_relay_forwards_to_peers_with_origin_tag():
    broadcaster = Broadcaster()
    sender, peer, outsider = FakeConnection(), FakeConnection(), FakeConnection()
    broadcaster.subscribe("ws_1", sender)
    broadcaster.subscribe("ws_1", peer)
    broadcaster.subscribe("ws_2", outsider)

    delivered = asyncio.run(broadcaster.relay("ws_1", sender, json.dumps({"type": "cursor", "position": 7})))

    assert delivered == 1
    assert sender.sent == []
    assert outsider.sent == []
    assert json.loads(peer.sent[0]) == {"type": "cursor", "position": 7, "from": "participant"}


def test_relay_drops_invalid_messages():
    broadcaster = Broadcaster()
    sender, peer = FakeConnection(), FakeConnection()
    broadcaster.subscribe("ws_1", sender)
    broadcaster.subscribe("ws_1", peer)

    assert asyncio.run(broadcaster.relay("ws_1", sender, "not json")) == 0
    assert asyncio.run(broadcaster.relay("ws_1", sender, "[1, 2]")) == 0
    assert peer.sent == []


def test_is_open_requires_both_sides_connected():
    connection = FakeConnection()
    assert is_open(connection)

    connection.client_state = WebSocketState.DISCONNECTED
    assert not is_open(connection)


def test_announce_defers_publish_until_background_tasks_run():
    store = WorkspaceStore()
    broadcaster = Broadcaster()
    background_tasks = BackgroundTasks()
    services = CollabServices(
        background_tasks,
        store=store,
        tracker=ChangeTracker(store),
        broadcaster=broadcaster,
        settings=Settings(_env_file=None),
    )
    connection = FakeConnection()
    broadcaster.subscribe("ws_1", connection)

    services.announce("ws_1", {"type": "document_added"})

    assert connection.sent == []
    asyncio.run(background_tasks())
    assert json.loads(connection.sent[0]) == {"type": "document_added"}
