"""Shared test fixtures."""
from __future__ import annotations

import json
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncIterator
from uuid import UUID

import pytest

from rental_service.application.dto.principal import Principal
from rental_service.application.dto.property import PropertyFilterDTO
from rental_service.application.ports.payments import PaymentIntent
from rental_service.domain.entities.contact import Contact
from rental_service.domain.entities.message import Message
from rental_service.domain.entities.property import Property
from rental_service.domain.entities.user import User
from rental_service.domain.value_objects.enums import PropertyType, UserRole
from rental_service.domain.value_objects.thread import ThreadKey

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_user(
    *,
    user_id: UUID | None = None,
    name: str = "Alice",
    email: str | None = None,
    role: UserRole = UserRole.TENANT,
    password_hash: str = "hashed:secret1",
) -> User:
    uid = user_id or uuid.uuid4()
    return User(
        id=uid,
        name=name,
        email=email or f"{uid.hex[:8]}@example.com",
        password_hash=password_hash,
        phone=None,
        role=role.value,
        address=None,
        bio=None,
        created_at=T0,
    )


def make_property(
    *,
    owner_id: UUID,
    property_id: UUID | None = None,
    title: str = "Sunny flat",
    city: str = "Dhaka",
    price: int = 30000,
    type: PropertyType = PropertyType.APARTMENT,
    bedrooms: int = 2,
    featured: bool = False,
    available: bool = True,
    created_at: datetime = T0,
) -> Property:
    return Property(
        id=property_id or uuid.uuid4(),
        title=title,
        description=None,
        location=f"Road 1, {city}",
        city=city,
        price=price,
        type=type.value,
        bedrooms=bedrooms,
        bathrooms=1,
        size=900,
        owner_id=owner_id,
        created_at=created_at,
        featured=featured,
        available=available,
    )


def principal_for(user: User) -> Principal:
    return Principal(user_id=user.id, role=UserRole(user.role))


@dataclass
class FakeUserReader:
    _store: dict[UUID, User] = field(default_factory=dict)

    async def get_by_id(self, user_id: UUID) -> User | None:
        return self._store.get(user_id)

    async def get_by_email(self, email: str) -> User | None:
        for u in self._store.values():
            if u.email.lower() == email.lower():
                return u
        return None

    async def get_many(self, user_ids: list[UUID]) -> dict[UUID, User]:
        return {uid: self._store[uid] for uid in user_ids if uid in self._store}


@dataclass
class FakeUserWriter:
    _reader: FakeUserReader

    async def create(self, user: User) -> User:
        self._reader._store[user.id] = user
        return user

    async def update(self, user_id: UUID, values: dict[str, Any]) -> User | None:
        user = self._reader._store.get(user_id)
        if user is None:
            return None
        user = replace(user, **values)
        self._reader._store[user_id] = user
        return user


@dataclass
class FakePropertyReader:
    _store: dict[UUID, Property] = field(default_factory=dict)

    async def get_by_id(self, property_id: UUID) -> Property | None:
        return self._store.get(property_id)

    async def search(self, filters: PropertyFilterDTO) -> list[Property]:
        found = [p for p in self._store.values() if p.available]
        if filters.location:
            found = [p for p in found if filters.location.lower() in p.city.lower()]
        if filters.type:
            found = [p for p in found if p.type == filters.type.value]
        if filters.min_price is not None:
            found = [p for p in found if p.price >= filters.min_price]
        if filters.max_price is not None:
            found = [p for p in found if p.price <= filters.max_price]
        if filters.bedrooms is not None:
            found = [p for p in found if p.bedrooms >= filters.bedrooms]
        return sorted(found, key=lambda p: p.created_at, reverse=True)

    async def list_featured(self, limit: int) -> list[Property]:
        found = [p for p in self._store.values() if p.featured and p.available]
        return sorted(found, key=lambda p: p.created_at, reverse=True)[:limit]

    async def list_for_owner(self, owner_id: UUID) -> list[Property]:
        found = [p for p in self._store.values() if p.owner_id == owner_id]
        return sorted(found, key=lambda p: p.created_at, reverse=True)


@dataclass
class FakePropertyWriter:
    _reader: FakePropertyReader

    async def create(self, prop: Property) -> Property:
        self._reader._store[prop.id] = prop
        return prop

    async def update(self, property_id: UUID, values: dict[str, Any]) -> Property | None:
        prop = self._reader._store.get(property_id)
        if prop is None:
            return None
        prop = replace(prop, **values)
        self._reader._store[property_id] = prop
        return prop

    async def delete(self, property_id: UUID) -> None:
        self._reader._store.pop(property_id, None)


@dataclass
class FakeMessageReader:
    """Keeps insertion order, which stands in for the seq tie-breaker."""

    _messages: list[Message] = field(default_factory=list)

    async def list_thread(self, key: ThreadKey) -> list[Message]:
        in_thread = [m for m in self._messages if m.thread_key == key]
        return sorted(in_thread, key=lambda m: m.created_at)

    async def latest_created_at(self, key: ThreadKey) -> datetime | None:
        stamps = [m.created_at for m in self._messages if m.thread_key == key]
        return max(stamps, default=None)


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader
    locked: list[ThreadKey] = field(default_factory=list)

    async def lock_thread(self, key: ThreadKey) -> None:
        self.locked.append(key)

    async def append(self, message: Message) -> Message:
        self._reader._messages.append(message)
        return message

    async def mark_delivered(self, message_id: UUID) -> None:
        self._reader._messages = [
            replace(m, delivered=True) if m.id == message_id else m
            for m in self._reader._messages
        ]


class FailingMessageWriter(FakeMessageWriter):
    async def append(self, message: Message) -> Message:
        raise RuntimeError("disk full")


@dataclass
class FakeContactWriter:
    _records: list[Contact] = field(default_factory=list)

    async def add(self, contact: Contact) -> Contact:
        self._records.append(contact)
        return contact


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    users: FakeUserReader = field(default_factory=FakeUserReader)
    users_w: FakeUserWriter | None = None
    properties: FakePropertyReader = field(default_factory=FakePropertyReader)
    properties_w: FakePropertyWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    contacts_w: FakeContactWriter = field(default_factory=FakeContactWriter)
    commits: int = 0

    def __post_init__(self) -> None:
        if self.users_w is None:
            self.users_w = FakeUserWriter(self.users)
        if self.properties_w is None:
            self.properties_w = FakePropertyWriter(self.properties)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)

    @property
    def _committed(self) -> bool:
        return self.commits > 0

    def add_user(self, user: User) -> User:
        self.users._store[user.id] = user
        return user

    def add_property(self, prop: Property) -> Property:
        self.properties._store[prop.id] = prop
        return prop

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        pass


def uow_factory_for(uow: FakeUoW):
    """Every WebSocket event shares the same in-memory store."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUoW]:
        yield uow

    return _factory


class FrozenClock:
    def __init__(self, now: datetime = T0) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += timedelta(seconds=seconds)


class FakeConnection:
    """Records everything the server pushes."""

    def __init__(self, *, broken: bool = False) -> None:
        self.sent: list[str] = []
        self.broken = broken

    async def send_text(self, data: str) -> None:
        if self.broken:
            raise ConnectionError("socket closed")
        self.sent.append(data)

    def events(self) -> list[dict[str, Any]]:
        return [json.loads(raw) for raw in self.sent]

    def of_type(self, event_type: str) -> list[Any]:
        return [e["data"] for e in self.events() if e["type"] == event_type]


class FakeHasher:
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, password_hash: str) -> bool:
        return password_hash == f"hashed:{password}"


class FakeIssuer:
    def issue(self, user: User) -> str:
        return f"token-for-{user.id}"


@dataclass
class FakePaymentGateway:
    status: str = "succeeded"
    created: list[tuple[int, str, dict[str, str]]] = field(default_factory=list)
    metadata: dict[str, str] = field(default_factory=dict)

    def opened_for(self, property_id: uuid.UUID) -> FakePaymentGateway:
        self.metadata = {"propertyId": str(property_id)}
        return self

    async def create_intent(
        self, amount_minor: int, currency: str, metadata: dict[str, str],
    ) -> PaymentIntent:
        self.created.append((amount_minor, currency, metadata))
        self.metadata = dict(metadata)
        return PaymentIntent(id="pi_1", status="requires_payment_method", client_secret="pi_1_secret")

    async def retrieve_intent(self, intent_id: str) -> PaymentIntent:
        return PaymentIntent(id=intent_id, status=self.status, metadata=dict(self.metadata))


@dataclass
class FakeImageStorage:
    saved: list[tuple[str, int]] = field(default_factory=list)

    async def save(self, filename: str, content: bytes, content_type: str | None) -> str:
        self.saved.append((filename, len(content)))
        return f"/uploads/{len(self.saved)}-{filename}"


@pytest.fixture
def uow() -> FakeUoW:
    return FakeUoW()


@pytest.fixture
def owner(uow: FakeUoW) -> User:
    return uow.add_user(make_user(name="Olivia Owner", role=UserRole.OWNER))


@pytest.fixture
def tenant(uow: FakeUoW) -> User:
    return uow.add_user(make_user(name="Tariq Tenant"))


@pytest.fixture
def listing(uow: FakeUoW, owner: User) -> Property:
    return uow.add_property(make_property(owner_id=owner.id))
