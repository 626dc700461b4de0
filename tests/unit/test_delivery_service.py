from __future__ import annotations

import json
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import pytest

from rental_service.application.exceptions import PersistenceError
from rental_service.infrastructure.ws.registry import ConnectionRegistry
from rental_service.services.delivery_service import DeliveryCoordinator
from tests.conftest import (
    FailingMessageWriter,
    FakeConnection,
    FrozenClock,
    principal_for,
    make_user,
    uow_factory_for,
)


@dataclass
class RecordingRelay:
    published: list[tuple[uuid.UUID, str, Any]] = field(default_factory=list)

    async def publish(self, receiver_id: uuid.UUID, event_type: str, data: Any) -> None:
        self.published.append((receiver_id, event_type, data))


def _frame(event_type: str, data: Any) -> str:
    return json.dumps({"type": event_type, "data": data})


def _send(listing, sender, receiver, body: Any = "Hi") -> str:
    return _frame("send_message", {
        "propertyId": str(listing.id),
        "senderId": str(sender.id),
        "receiverId": str(receiver.id),
        "message": body,
    })


def _history(listing, a, b) -> str:
    return _frame("get_messages", {
        "propertyId": str(listing.id),
        "userId1": str(a.id),
        "userId2": str(b.id),
    })


@pytest.fixture
def registry() -> ConnectionRegistry:
    return ConnectionRegistry()


@pytest.fixture
def coordinator(registry, uow) -> DeliveryCoordinator:
    return DeliveryCoordinator(registry, uow_factory_for(uow), clock=FrozenClock())


async def _connect(coordinator, user) -> FakeConnection:
    conn = FakeConnection()
    await coordinator.dispatch(conn, principal_for(user), _frame("user_connected", {"userId": str(user.id)}))
    return conn


@pytest.mark.asyncio
async def test_sender_acked_when_receiver_offline(coordinator, registry, uow, listing, tenant, owner):
    alice, bob = tenant, owner
    c1 = await _connect(coordinator, alice)

    await coordinator.dispatch(c1, principal_for(alice), _send(listing, alice, bob))

    [ack] = c1.of_type("message_sent")
    stored = uow.messages._messages[0]
    assert ack["id"] == str(stored.id)
    assert ack["propertyId"] == str(listing.id)
    assert ack["sender"] == {"id": str(alice.id), "name": alice.name}
    assert ack["receiver"] == {"id": str(bob.id), "name": bob.name}
    assert ack["message"] == "Hi"
    assert ack["delivered"] is False
    assert registry.lookup(bob.id) is None
    assert c1.of_type("new_message") == []


@pytest.mark.asyncio
async def test_history_returns_stored_thread(coordinator, listing, tenant, owner):
    alice, bob = tenant, owner
    c1 = await _connect(coordinator, alice)
    await coordinator.dispatch(c1, principal_for(alice), _send(listing, alice, bob))
    c2 = await _connect(coordinator, bob)

    await coordinator.dispatch(c1, principal_for(alice), _history(listing, alice, bob))

    [history] = c1.of_type("messages_history")
    assert [m["message"] for m in history] == ["Hi"]
    assert c2.sent == []


@pytest.mark.asyncio
async def test_online_receiver_gets_new_message(coordinator, uow, listing, tenant, owner):
    alice, bob = tenant, owner
    c1 = await _connect(coordinator, alice)
    c2 = await _connect(coordinator, bob)

    await coordinator.dispatch(c1, principal_for(alice), _send(listing, alice, bob, "Hi again"))

    [ack] = c1.of_type("message_sent")
    [pushed] = c2.of_type("new_message")
    assert pushed == ack
    assert pushed["message"] == "Hi again"
    assert ack["delivered"] is True
    assert uow.messages._messages[0].delivered is True


@pytest.mark.asyncio
async def test_empty_body_yields_message_error_and_stores_nothing(coordinator, uow, listing, tenant, owner):
    alice, bob = tenant, owner
    c1 = await _connect(coordinator, alice)

    await coordinator.dispatch(c1, principal_for(alice), _send(listing, alice, bob, ""))

    [error] = c1.of_type("message_error")
    assert error["error"] == "Message body must not be empty"
    assert error["request"]["receiverId"] == str(bob.id)
    assert c1.of_type("message_sent") == []
    assert uow.messages._messages == []


@pytest.mark.asyncio
async def test_offline_user_reads_missed_message_after_reconnect(coordinator, registry, listing, tenant, owner):
    alice, bob = tenant, owner
    c1 = await _connect(coordinator, alice)
    c2 = await _connect(coordinator, bob)

    coordinator.disconnect(c1)
    await coordinator.dispatch(c2, principal_for(bob), _send(listing, bob, alice, "Still there?"))

    assert registry.lookup(alice.id) is None
    assert c1.sent == []
    [ack] = c2.of_type("message_sent")
    assert ack["delivered"] is False

    c3 = await _connect(coordinator, alice)
    await coordinator.dispatch(c3, principal_for(alice), _history(listing, alice, bob))

    [history] = c3.of_type("messages_history")
    assert [m["message"] for m in history] == ["Still there?"]


@pytest.mark.asyncio
async def test_acks_follow_request_order(coordinator, listing, tenant, owner):
    c1 = await _connect(coordinator, tenant)

    for body in ["first", "second", "third"]:
        await coordinator.dispatch(c1, principal_for(tenant), _send(listing, tenant, owner, body))

    acks = c1.of_type("message_sent")
    assert [a["message"] for a in acks] == ["first", "second", "third"]
    stamps = [datetime.fromisoformat(a["timestamp"]) for a in acks]
    assert stamps[0] < stamps[1] < stamps[2]


@pytest.mark.asyncio
async def test_user_connected_accepts_bare_id(coordinator, registry, tenant):
    conn = FakeConnection()

    await coordinator.dispatch(conn, principal_for(tenant), _frame("user_connected", str(tenant.id)))

    assert registry.lookup(tenant.id) is conn


@pytest.mark.asyncio
async def test_user_connected_must_match_token(coordinator, registry, tenant, owner):
    conn = FakeConnection()

    await coordinator.dispatch(
        conn, principal_for(tenant), _frame("user_connected", {"userId": str(owner.id)}),
    )

    [error] = conn.of_type("error")
    assert error["code"] == "identity_mismatch"
    assert registry.lookup(owner.id) is None
    assert registry.lookup(tenant.id) is None


@pytest.mark.asyncio
async def test_sender_must_be_authenticated_user(coordinator, uow, listing, tenant, owner):
    conn = await _connect(coordinator, tenant)

    await coordinator.dispatch(conn, principal_for(tenant), _send(listing, owner, tenant))

    [error] = conn.of_type("message_error")
    assert "senderId" in error["error"]
    assert uow.messages._messages == []


@pytest.mark.asyncio
async def test_malformed_send_payload(coordinator, tenant):
    conn = await _connect(coordinator, tenant)

    await coordinator.dispatch(conn, principal_for(tenant), _frame("send_message", {"message": "hi"}))

    [error] = conn.of_type("message_error")
    assert error == {"error": "Invalid message payload", "request": {"message": "hi"}}


@pytest.mark.asyncio
async def test_storage_failure_reported_and_connection_survives(coordinator, uow, listing, tenant, owner):
    uow.messages_w = FailingMessageWriter(uow.messages)
    conn = await _connect(coordinator, tenant)

    await coordinator.dispatch(conn, principal_for(tenant), _send(listing, tenant, owner))
    await coordinator.dispatch(conn, principal_for(tenant), _frame("ping", {}))

    [error] = conn.of_type("message_error")
    assert error["error"] == "Failed to send message"
    assert conn.of_type("pong") == [{}]


@pytest.mark.asyncio
async def test_persistence_error_detail_is_reported(registry, listing, tenant, owner):
    @asynccontextmanager
    async def broken_factory():
        raise PersistenceError("Storage unavailable")
        yield  # pragma: no cover

    coordinator = DeliveryCoordinator(registry, broken_factory)
    conn = FakeConnection()

    await coordinator.dispatch(conn, principal_for(tenant), _send(listing, tenant, owner))
    await coordinator.dispatch(conn, principal_for(tenant), _history(listing, tenant, owner))

    assert conn.of_type("message_error")[0]["error"] == "Storage unavailable"
    assert conn.of_type("messages_error") == [{"error": "Storage unavailable"}]


@pytest.mark.asyncio
async def test_broken_receiver_connection_does_not_fail_send(coordinator, registry, uow, listing, tenant, owner):
    c1 = await _connect(coordinator, tenant)
    dead = FakeConnection(broken=True)
    registry.register(owner.id, dead)

    await coordinator.dispatch(c1, principal_for(tenant), _send(listing, tenant, owner))

    [ack] = c1.of_type("message_sent")
    assert ack["delivered"] is False
    assert registry.lookup(owner.id) is None
    assert len(uow.messages._messages) == 1


@pytest.mark.asyncio
async def test_offline_receiver_handed_to_relay(registry, uow, listing, tenant, owner):
    relay = RecordingRelay()
    coordinator = DeliveryCoordinator(registry, uow_factory_for(uow), relay=relay)
    c1 = await _connect(coordinator, tenant)

    await coordinator.dispatch(c1, principal_for(tenant), _send(listing, tenant, owner))

    [(receiver_id, event_type, data)] = relay.published
    assert receiver_id == owner.id
    assert event_type == "new_message"
    assert data == c1.of_type("message_sent")[0]
    assert data["delivered"] is False


@pytest.mark.asyncio
async def test_history_requires_participant(coordinator, uow, listing, tenant, owner):
    outsider = uow.add_user(make_user(name="Eve"))
    conn = await _connect(coordinator, outsider)

    await coordinator.dispatch(conn, principal_for(outsider), _history(listing, tenant, owner))

    [error] = conn.of_type("messages_error")
    assert "participant" in error["error"]


@pytest.mark.asyncio
async def test_history_with_bad_payload(coordinator, tenant):
    conn = await _connect(coordinator, tenant)

    await coordinator.dispatch(conn, principal_for(tenant), _frame("get_messages", {"propertyId": "nope"}))

    assert conn.of_type("messages_error") == [{"error": "Invalid history request"}]


@pytest.mark.asyncio
async def test_non_json_frame(coordinator, tenant):
    conn = FakeConnection()

    await coordinator.dispatch(conn, principal_for(tenant), "not json")

    assert conn.of_type("error") == [{"code": "invalid_payload"}]


@pytest.mark.asyncio
async def test_unknown_event_type(coordinator, tenant):
    conn = FakeConnection()

    await coordinator.dispatch(conn, principal_for(tenant), _frame("typing", {}))

    assert conn.of_type("error") == [{"code": "unknown_type", "type": "typing"}]


@pytest.mark.asyncio
async def test_ping_pong(coordinator, tenant):
    conn = FakeConnection()

    await coordinator.dispatch(conn, principal_for(tenant), _frame("ping", {}))

    assert conn.events() == [{"type": "pong", "data": {}}]


def test_disconnect_of_unknown_connection_is_noop(coordinator):
    coordinator.disconnect(FakeConnection())
