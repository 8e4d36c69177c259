from typing import Iterable, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from curations import settings
from curations.catalog import Catalog
from curations.database import make_engine, make_session_factory
from curations.deps import get_affiliate_store, get_catalog, get_dispatcher, get_guard, get_subscriber_store
from curations.main import app
from curations.notifier import Dispatcher, MailTransport
from curations.routers._guards import OpenGuard
from curations.stores import JsonAffiliateStore, JsonSubscriberStore


class FakeTransport(MailTransport):
    """Records every send; recipients in ``fail`` raise instead."""

    def __init__(self, fail: Iterable[str] = ()):
        self.fail = set(fail)
        self.sent: List[Tuple[str, str, str]] = []

    async def send(self, recipient: str, subject: str, body: str) -> None:
        if recipient in self.fail:
            raise ConnectionError(f"mailbox {recipient} unavailable")
        self.sent.append((recipient, subject, body))


@pytest.fixture
def catalog() -> Catalog:
    return Catalog.from_file(settings.ITEMS_FILE)


@pytest.fixture
def subscriber_store(tmp_path) -> JsonSubscriberStore:
    return JsonSubscriberStore(tmp_path / "subscribers.json")


@pytest.fixture
def affiliate_store(tmp_path) -> JsonAffiliateStore:
    return JsonAffiliateStore(tmp_path / "affiliates.json")


@pytest.fixture
def sql_sessions(tmp_path):
    return make_session_factory(make_engine(f"sqlite:///{tmp_path / 'curations.db'}"))


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_client(catalog, subscriber_store, affiliate_store, transport):
    def _make(guard=None, dispatcher: Optional[Dispatcher] = None) -> TestClient:
        app.dependency_overrides[get_catalog] = lambda: catalog
        app.dependency_overrides[get_subscriber_store] = lambda: subscriber_store
        app.dependency_overrides[get_affiliate_store] = lambda: affiliate_store
        app.dependency_overrides[get_guard] = lambda: guard or OpenGuard()
        app.dependency_overrides[get_dispatcher] = lambda: dispatcher or Dispatcher(lambda: transport)
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
