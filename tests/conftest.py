import pytest
from fastapi.testclient import TestClient

from pastebin.clock import ManualClock
from pastebin.config import settings
from pastebin.database import InMemoryStore
from pastebin.main import create_app
from pastebin.store import PasteStore

T0 = 1_000


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(T0)


@pytest.fixture
def storage() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def store(storage: InMemoryStore, clock: ManualClock) -> PasteStore:
    return PasteStore(storage, clock=clock)


@pytest.fixture
def client(store: PasteStore, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    """API client backed by the in-memory store and the manual clock."""
    monkeypatch.setattr(settings, "APP_DOMAIN", "")
    return TestClient(create_app(store))
