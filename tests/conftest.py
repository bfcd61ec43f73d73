# tests/conftest.py
import json
import os
from pathlib import Path

# must happen before ticketdesk.main builds its module-level app
os.environ.setdefault("DATABASE_URL", "sqlite://")

import httpx
import pytest
from fastapi.testclient import TestClient

from ticketdesk.core.config import Settings
from ticketdesk.core.database import init_schema, make_engine, make_session_factory
from ticketdesk.main import create_app
from ticketdesk.ticket.notify import WebhookNotifier
from ticketdesk.ticket.store import TicketStore

SETUP_SQL = str(Path(__file__).resolve().parent.parent / "setup.sql")


class WebhookRecorder:
    """Stands in for the chat service that receives notifications."""

    def __init__(self, status_code: int = 200):
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code)

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite://",
        SETUP_SQL=SETUP_SQL,
        BASE_URL="tickets.example.test",
        WEBHOOK_BACKOFF=0,
    )


@pytest.fixture
def store():
    engine = make_engine("sqlite://")
    init_schema(engine, SETUP_SQL)
    yield TicketStore(make_session_factory(engine))
    engine.dispose()


@pytest.fixture
def webhook() -> WebhookRecorder:
    return WebhookRecorder()


@pytest.fixture
def app(settings, webhook):
    app = create_app(settings)
    app.state.notifier = WebhookNotifier(
        settings.public_base_url,
        timeout=settings.WEBHOOK_TIMEOUT,
        transport=httpx.MockTransport(webhook),
    )
    yield app
    app.state.engine.dispose()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
