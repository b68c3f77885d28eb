import pytest
from fastapi.testclient import TestClient

from supportops.main import create_app
from supportops.tickets.domain import Ticket
from supportops.tickets.infrastructure import WebSocketBroadcaster
from tests.conftest import make_settings, model_transport


def test_init_matches_ticket_list(client):
    client.post("/api/tickets", json={"title": "printer jam"})
    listed = client.get("/api/tickets").json()

    with client.websocket_connect("/ws") as ws:
        message = ws.receive_json()

    assert message["event"] == "init"
    assert message["data"]["tickets"] == listed


def test_new_ticket_is_broadcast(client):
    with client.websocket_connect("/ws") as ws:
        ws.receive_json()

        created = client.post("/api/tickets", json={"title": "password reset"}).json()
        message = ws.receive_json()

    assert message == {"event": "ticket:new", "data": created}


def test_broadcast_reaches_every_client(client):
    with client.websocket_connect("/ws") as first, client.websocket_connect("/ws") as second:
        first.receive_json()
        second.receive_json()
        assert client.get("/health").json()["checks"]["realtime_clients"] == 2

        created = client.post("/api/tickets", json={"title": "email bouncing"}).json()

        assert first.receive_json()["data"] == created
        assert second.receive_json()["data"] == created


def test_printer_jam_with_unreachable_ai():
    app = create_app(make_settings(), model_transport(unreachable=True))
    with TestClient(app) as client:
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()

            r = client.post("/api/tickets", json={"title": "printer jam"})
            assert r.status_code == 201
            ticket = r.json()
            assert ticket["priority"] == "medium"
            assert ticket["suggestedReply"] == ""

            message = ws.receive_json()
            assert message["event"] == "ticket:new"
            assert message["data"] == ticket


def test_rejected_ticket_is_not_broadcast(client):
    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        assert client.post("/api/tickets", json={"title": ""}).status_code == 400

        created = client.post("/api/tickets", json={"title": "real one"}).json()
        assert ws.receive_json()["data"]["id"] == created["id"]


class FakeWebSocket:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.accepted = False
        self.sent = []

    async def accept(self):
        self.accepted = True

    async def send_json(self, data):
        if self.fail and self.accepted and self.sent:
            raise RuntimeError("socket closed")
        self.sent.append(data)


@pytest.mark.asyncio
async def test_broadcaster_drops_clients_that_fail():
    broadcaster = WebSocketBroadcaster()
    healthy, broken = FakeWebSocket(), FakeWebSocket(fail=True)

    async def snapshot():
        return []

    await broadcaster.connect(healthy, snapshot)
    await broadcaster.connect(broken, snapshot)
    assert broadcaster.connection_count == 2

    await broadcaster.ticket_created(Ticket(id=7, title="disk full"))

    assert broadcaster.connection_count == 1
    assert healthy.sent[-1]["event"] == "ticket:new"
    assert healthy.sent[-1]["data"]["id"] == 7
    assert healthy.sent[-1]["data"]["suggestedReply"] == ""


@pytest.mark.asyncio
async def test_broadcaster_disconnect_is_idempotent():
    broadcaster = WebSocketBroadcaster()

    async def snapshot():
        return [Ticket(id=1, title="Sample ticket: internet down")]

    ws = FakeWebSocket()
    client_id = await broadcaster.connect(ws, snapshot)
    assert ws.sent[0]["event"] == "init"
    assert ws.sent[0]["data"]["tickets"][0]["title"] == "Sample ticket: internet down"

    broadcaster.disconnect(client_id)
    broadcaster.disconnect(client_id)
    assert broadcaster.connection_count == 0
    assert await broadcaster.broadcast("ticket:new", {}) == 0
