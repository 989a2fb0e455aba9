"""Shared test fixtures and helpers."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from sms_agent.conversation.escalation import EscalationAdvisor
from sms_agent.conversation.session_store import SessionStore
from sms_agent.config import DEFAULT_ESCALATION_KEYWORDS
from sms_agent.pricing.cache import PricingCache
from sms_agent.schemas.conversation_schema import Message, Role
from sms_agent.schemas.pricing_schema import Product

START = datetime(2025, 3, 15, 10, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock usable for both datetime and float clocks."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def seconds(self) -> float:
        return self.now.timestamp()

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class FakeFetcher:
    """Async product fetcher that records calls and can be told to fail."""

    def __init__(self, products: Optional[list[Product]] = None) -> None:
        self.products = products if products is not None else [
            Product(title="Custom Cotton T-Shirt", price="$19.99"),
            Product(title="Printed Graphic T-Shirt", price="$22.00"),
        ]
        self.calls: list[str] = []
        self.error: Optional[Exception] = None

    async def __call__(self, product_type: str) -> list[Product]:
        self.calls.append(product_type)
        if self.error is not None:
            raise self.error
        return list(self.products)


class FakeStorefront:
    """Async storefront search over a small in-memory catalog."""

    def __init__(self, catalog: Optional[dict[str, list[Product]]] = None) -> None:
        self.catalog = catalog if catalog is not None else {
            "custom hoodie": [
                Product(title="Custom Pullover Hoodie", price="$39.99"),
                Product(title="Printed Zip Hoodie", price="$44.00"),
            ],
            "printed hoodie": [Product(title="Printed Zip Hoodie", price="$44.00")],
        }
        self.terms: list[str] = []

    async def __call__(self, term: str) -> list[Product]:
        self.terms.append(term)
        return list(self.catalog.get(term, []))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return SessionStore(max_history=10, timeout=timedelta(hours=24), clock=clock)


@pytest.fixture
def advisor():
    return EscalationAdvisor(keywords=DEFAULT_ESCALATION_KEYWORDS, length_threshold=10)


@pytest.fixture
def pricing_cache(clock):
    return PricingCache(ttl_seconds=300, clock=clock.seconds)


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def storefront():
    return FakeStorefront()


def make_message(role: Role, content: str, index: int = 0) -> Message:
    """Helper to create a Message."""
    return Message(
        role=role,
        content=content,
        timestamp=START + timedelta(minutes=index),
        id=f"msg_test_{index}",
    )


def make_history(entries: list[tuple[str, str]]) -> list[Message]:
    """Create a message history from a list of (role, text) tuples."""
    return [
        make_message(Role.CUSTOMER if role == "customer" else Role.ASSISTANT, text, i)
        for i, (role, text) in enumerate(entries)
    ]
