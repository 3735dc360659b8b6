"""
Pytest Configuration and Fixtures

Shared fixtures for unit tests (session doubles, note factories) and
for live tests that need a reachable PostgreSQL.
"""

import os

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Test environment defaults: MUST be set before any notes_api imports.
#
# 1. Load .env first so that Docker-matching credentials are available.
# 2. setdefault fills in anything still missing (CI runners, fresh clones
#    without a .env file) so that Settings picks up a usable DSN.
# ---------------------------------------------------------------------------
load_dotenv()  # .env → os.environ (no-op if file is missing)

_test_env = {
    "POSTGRES_USER": "notes",
    "POSTGRES_PASSWORD": "notes_password",
    "POSTGRES_HOST": "localhost",
    "POSTGRES_PORT": "5432",
    "POSTGRES_DB": "notes_db",
    "LOG_LEVEL": "DEBUG",
}
for _key, _value in _test_env.items():
    os.environ.setdefault(_key, _value)

# ---------------------------------------------------------------------------
# Imports (safe now that env vars are set)
# ---------------------------------------------------------------------------
import time  # noqa: E402
from collections.abc import Callable, Generator  # noqa: E402
from datetime import UTC, datetime, timedelta  # noqa: E402
from types import SimpleNamespace  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from notes_api.models import Note  # noqa: E402

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0, 123456, tzinfo=UTC)


def note_row(
    note_id: int,
    title: str = "title",
    content: str = "content",
    created_at: datetime | None = None,
) -> SimpleNamespace:
    """A stand-in for a SQLAlchemy ``Row``: exposes ``_mapping`` only."""
    return SimpleNamespace(
        _mapping={
            "id": note_id,
            "title": title,
            "content": content,
            "created_at": created_at or BASE_TIME + timedelta(seconds=note_id),
        }
    )


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """Factory for Note entities with increasing timestamps by id."""

    def _make(note_id: int, title: str = "title", content: str = "content") -> Note:
        return Note(
            id=note_id,
            title=title,
            content=content,
            created_at=BASE_TIME + timedelta(seconds=note_id),
        )

    return _make


def result_of(
    *,
    one: Any = None,
    rows: list[Any] | None = None,
    rowcount: int = 0,
) -> MagicMock:
    """Build a fake ``Result`` for ``session.execute`` to return."""
    result = MagicMock()
    result.one.return_value = one
    result.one_or_none.return_value = one
    result.all.return_value = rows or []
    result.rowcount = rowcount
    return result


@pytest.fixture
def session() -> MagicMock:
    """
    AsyncSession double.

    ``execute``/``commit``/``rollback``/``connection`` are AsyncMocks.
    ``begin()`` returns an async context manager whose ``__aexit__``
    does not swallow exceptions, like the real transaction context.
    """
    fake = MagicMock(spec=AsyncSession)
    fake.execute = AsyncMock(return_value=result_of())
    fake.commit = AsyncMock()
    fake.rollback = AsyncMock()
    fake.connection = AsyncMock()

    transaction = MagicMock()
    transaction.__aenter__ = AsyncMock(return_value=transaction)
    transaction.__aexit__ = AsyncMock(return_value=False)
    fake.begin = MagicMock(return_value=transaction)
    return fake


@pytest.fixture
def make_row() -> Callable[..., SimpleNamespace]:
    return note_row


@pytest.fixture
def make_result() -> Callable[..., MagicMock]:
    return result_of


# ---------------------------------------------------------------------------
# Live server fixtures
# ---------------------------------------------------------------------------

BASE_URL = os.getenv("NOTES_API_URL", "http://localhost:8080")


@pytest.fixture(scope="session")
def wait_for_api():
    """
    Block until the API is ready or timeout expires.

    Polls /health endpoint with 1s intervals for up to 30s.
    Fails the test session if API is unreachable.
    """
    url = f"{BASE_URL}/health"
    timeout = 30
    start = time.time()

    print("\n[Test] Waiting for API...")
    while time.time() - start < timeout:
        try:
            res = httpx.get(url, timeout=1.0)
            if res.status_code == 200:
                print("API Ready")
                return
        except httpx.RequestError:
            time.sleep(1)

    pytest.fail("API unreachable. Is the server running?")


@pytest.fixture(scope="session")
def api_client(wait_for_api) -> Generator[httpx.Client, None, None]:
    """
    Pre-configured HTTP client for live tests.

    Yields:
        httpx.Client: Session-scoped client, automatically closed after tests.
    """
    with httpx.Client(base_url=BASE_URL, timeout=10.0) as client:
        yield client
