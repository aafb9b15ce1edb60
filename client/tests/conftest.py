"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

from typing import Any, Callable, Optional

import httpx
import pytest

from modules.auth.models import UserRecord
from modules.auth.service import AuthService, reset_auth_service
from shared.config import Settings, get_settings
from shared.storage import InMemoryStore, reset_storage


TEST_BASE_URL = "https://api.billpoint.test/api"


def make_transport(
    status_code: int = 200,
    body: Any = None,
    text: Optional[str] = None,
    recorder: Optional[list[httpx.Request]] = None,
) -> httpx.MockTransport:
    """
    Build a transport that answers every request with one canned response.

    Args:
        status_code: HTTP status to return
        body: JSON-serializable body (ignored when text is given)
        text: Raw body text, for malformed payloads
        recorder: If given, every request is appended to it
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if recorder is not None:
            recorder.append(request)
        if text is not None:
            return httpx.Response(status_code, text=text)
        return httpx.Response(status_code, json=body if body is not None else {})

    return httpx.MockTransport(handler)


def failing_transport(exc: Exception) -> httpx.MockTransport:
    """Build a transport whose every request raises exc."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise exc

    return httpx.MockTransport(handler)


class FailingStore(InMemoryStore):
    """InMemoryStore whose selected operations raise."""

    def __init__(self, fail_on: tuple[str, ...] = ("set",), **kwargs):
        super().__init__(**kwargs)
        self.fail_on = fail_on

    async def get(self, key: str):
        if "get" in self.fail_on:
            raise OSError("disk unavailable")
        return await super().get(key)

    async def set(self, key: str, value: Any) -> None:
        if "set" in self.fail_on:
            raise OSError("disk full")
        await super().set(key, value)

    async def remove(self, key: str) -> None:
        if "remove" in self.fail_on:
            raise OSError("disk unavailable")
        await super().remove(key)


class RecordingStore(InMemoryStore):
    """InMemoryStore that remembers every write."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.writes: list[tuple[str, Any]] = []

    async def set(self, key: str, value: Any) -> None:
        self.writes.append((key, value))
        await super().set(key, value)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings, storage and auth service around each test."""
    get_settings.cache_clear()
    reset_storage()
    reset_auth_service()
    yield
    get_settings.cache_clear()
    reset_storage()
    reset_auth_service()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a fake API and a temp storage file."""
    return Settings(
        api_base_url=TEST_BASE_URL,
        storage_path=str(tmp_path / "storage.json"),
    )


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def user_payload() -> dict[str, Any]:
    """Backend user object with every field populated."""
    return {
        "id": "user-1",
        "username": "ada",
        "email": "ada@example.com",
        "phoneNumber": "+2348000000000",
        "address": "12 Marina Rd, Lagos",
        "profileImage": "https://cdn.example.com/ada.png",
    }


@pytest.fixture
def user(user_payload) -> UserRecord:
    return UserRecord.from_json(user_payload)


@pytest.fixture
def make_service(settings) -> Callable[..., AuthService]:
    """Factory for an AuthService on a canned-response transport."""

    def factory(
        status_code: int = 200,
        body: Any = None,
        text: Optional[str] = None,
        recorder: Optional[list[httpx.Request]] = None,
        raises: Optional[Exception] = None,
    ) -> AuthService:
        if raises is not None:
            transport = failing_transport(raises)
        else:
            transport = make_transport(status_code, body, text, recorder)
        return AuthService(
            http_client=httpx.AsyncClient(transport=transport),
            settings=settings,
        )

    return factory


@pytest.fixture
def failing_store() -> Callable[..., FailingStore]:
    """Factory for a store that raises on the named operations."""

    def factory(*fail_on: str, initial: Optional[dict[str, Any]] = None) -> FailingStore:
        return FailingStore(fail_on=fail_on or ("set",), initial=initial)

    return factory
