"""
Shared test fixtures and configuration for the test suite.

Provides: a controllable clock, token codec, stores, relay and a FastAPI
TestClient wired to them.
"""

import pytest
from fastapi.testclient import TestClient

from core.security.signature import SessionSigner
from core.security.token_codec import TokenCodec
from runtime.api.server import create_app
from runtime.relay.session_relay import SessionRelay
from runtime.store.message_queue import MessageQueueStore
from runtime.store.session_store import SessionStore

TEST_SECRET = "test-secret"
START_MS = 1_700_000_000_000


class FakeClock:
    """Epoch-millis clock that only moves when told to."""

    def __init__(self, now: int = START_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def signer() -> SessionSigner:
    return SessionSigner(TEST_SECRET)


@pytest.fixture
def codec(signer: SessionSigner) -> TokenCodec:
    return TokenCodec(signer)


@pytest.fixture
def session_store(codec: TokenCodec, clock: FakeClock) -> SessionStore:
    return SessionStore(codec=codec, clock=clock)


@pytest.fixture
def queue_store() -> MessageQueueStore:
    return MessageQueueStore()


@pytest.fixture
def relay(session_store: SessionStore, queue_store: MessageQueueStore) -> SessionRelay:
    return SessionRelay(session_store=session_store, queue_store=queue_store)


@pytest.fixture
def client(relay: SessionRelay) -> TestClient:
    """Provide TestClient for an app built around the test relay."""
    return TestClient(create_app(relay=relay))
