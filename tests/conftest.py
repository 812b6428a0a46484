import os

os.environ.setdefault("MODE", "test")

from datetime import date, datetime, timezone

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

# Import the app and DB helpers from the project.
from main import app as fastapi_app
from core import deps
from core.clock import FixedClock
from core.services import build_services
from db import init_db, make_session_factory

START = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


class RecordingNotifier:
    """Notification sender that keeps every message; can be told to fail."""

    def __init__(self):
        self.sent = []
        self.fail = False

    async def send(self, to, subject, html_body, text_body, cc=None):
        if self.fail:
            raise ConnectionError("mail server unavailable")
        self.sent.append({"to": to, "cc": cc, "subject": subject, "text": text_body})
        return True

    def subjects(self):
        return [m["subject"] for m in self.sent]


class RecordingRenderer:
    def __init__(self):
        self.rendered = []
        self.fail = False

    async def render(self, template_kind, record, related_asset):
        if self.fail:
            raise RuntimeError("renderer crashed")
        key = record.get("form_id") or record.get("disposal_id")
        self.rendered.append((template_kind, key))
        return f"docs/{template_kind}/{key}.pdf"


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def engine(tmp_path):
    # A fresh SQLite file per test; NullPool so every session opens its own connection
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'assets_test.db'}",
        poolclass=NullPool,
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def clock():
    return FixedClock(START)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def services(engine, clock, notifier, renderer):
    return build_services(
        make_session_factory(engine),
        notifier=notifier,
        renderer=renderer,
        clock=clock,
    )


@pytest.fixture
def store(services):
    return services.store


@pytest.fixture
async def async_client(services):
    fastapi_app.dependency_overrides[deps.get_services] = lambda: services

    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://testserver") as ac:
        yield ac

    # Clean up
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def laptop_data():
    return {
        "serial_number": "SN1",
        "category": "Laptop",
        "brand": "Dell",
        "model": "X1",
        "condition": "Good",
        "date_received": date(2024, 4, 2),
        "location": "HQ Store Room",
        "purchase_price": 1200.0,
    }


@pytest.fixture
def form_data():
    return {
        "employee_name": "Erin Cole",
        "employee_email": "e@co.com",
        "department": "Finance",
        "it_personnel": "it.admin@co.com",
        "it_signature": "data:image/png;base64,SIGIT",
    }


@pytest.fixture
def disposal_data():
    return {
        "method": "Recycling",
        "reason": "Battery swollen, beyond economical repair",
        "it_personnel": "it.admin@co.com",
        "requester_email": "it.admin@co.com",
        "it_signature": "data:image/png;base64,SIGREQ",
        "approver_name": "Morgan Lee",
        "approver_email": "approver@co.com",
        "estimated_value": 50.0,
    }


@pytest.fixture
async def laptop(services, laptop_data):
    return await services.assets.add_asset(laptop_data, "it.admin@co.com")
