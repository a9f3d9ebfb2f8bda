"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Coroutine
from pathlib import Path
from typing import Any

import pytest

from hypermail.config import Settings
from hypermail.exceptions import HypermailError
from hypermail.models import OutgoingEmail, RemoteMessage
from hypermail.store import LocalStore


@pytest.fixture
def mock_settings(tmp_path: Path) -> Settings:
    """Provide settings that keep every file inside the test directory."""
    return Settings(
        config_path=tmp_path / "hypermail" / "config.json",
        log_file=tmp_path / "hypermail" / "hypermail.log",
        resend_api_url="https://api.resend.test",
        resend_timeout=5.0,
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def store(mock_settings: Settings) -> LocalStore:
    """Provide a store backed by a file that does not exist yet."""
    return LocalStore(mock_settings.config_path)


@pytest.fixture
def received_messages() -> list[RemoteMessage]:
    """Provide a small inbox as returned by the list endpoint."""
    return [
        RemoteMessage.model_validate(
            {
                "id": f"m{n}",
                "from": sender,
                "to": ["me@example.com"],
                "subject": subject,
                "created_at": "2024-03-01T10:00:00Z",
            }
        )
        for n, (sender, subject) in enumerate(
            [
                ("alice@example.com", "Lunch tomorrow?"),
                ("bob@example.com", "Quarterly report"),
                ("carol@example.com", "Re: Lunch tomorrow?"),
            ],
            start=1,
        )
    ]


@pytest.fixture
def sample_message_payload() -> dict[str, Any]:
    """Provide a received-message detail payload."""
    return {
        "object": "email",
        "id": "m1",
        "from": "alice@example.com",
        "to": ["me@example.com"],
        "subject": "Lunch tomorrow?",
        "text": "Are you free at noon?\nThe usual place.",
        "html": None,
        "created_at": "2024-03-01T10:00:00Z",
    }


class FakeResendClient:
    """In-memory stand-in for ResendClient used by screen tests."""

    def __init__(
        self,
        received: list[RemoteMessage] | None = None,
        sent: list[RemoteMessage] | None = None,
    ) -> None:
        self.received = list(received or [])
        self.sent = list(sent or [])
        self.outbox: list[OutgoingEmail] = []
        self.error: HypermailError | None = None

    def _check(self) -> None:
        if self.error is not None:
            raise self.error

    async def send_email(self, email: OutgoingEmail) -> str:
        self._check()
        self.outbox.append(email)
        return f"sent-{len(self.outbox)}"

    async def list_received_emails(self) -> list[RemoteMessage]:
        self._check()
        return list(self.received)

    async def get_received_email(self, email_id: str) -> RemoteMessage:
        self._check()
        return next(m for m in self.received if m.id == email_id)

    async def list_sent_emails(self) -> list[RemoteMessage]:
        self._check()
        return list(self.sent)

    async def get_sent_email(self, email_id: str) -> RemoteMessage:
        self._check()
        return next(m for m in self.sent if m.id == email_id)

    async def aclose(self) -> None:
        pass


class FakeApp:
    """Collects what screens ask of the application.

    Spawned coroutines are queued rather than scheduled; ``run_spawned``
    awaits them in order.
    """

    def __init__(self, store: LocalStore, settings: Settings, client: FakeResendClient) -> None:
        self.store = store
        self.settings = settings
        self.fake_client = client
        self.screen: Any = None
        self.went_back = False
        self.quit_requested = False
        self.client_resets = 0
        self.valid_keys: set[str] = set()
        self.pending: list[Coroutine[Any, Any, Any]] = []

    def client(self) -> FakeResendClient:
        return self.fake_client

    def reset_client(self) -> None:
        self.client_resets += 1

    async def validate_api_key(self, api_key: str) -> bool:
        return api_key in self.valid_keys

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        self.pending.append(coro)

    async def run_spawned(self) -> None:
        while self.pending:
            await self.pending.pop(0)

    def show(self, screen: Any) -> None:
        self.screen = screen
        screen.on_enter()

    def back(self) -> None:
        self.went_back = True

    def quit(self) -> None:
        self.quit_requested = True

    def close_pending(self) -> None:
        for coro in self.pending:
            coro.close()
        self.pending.clear()


@pytest.fixture
def fake_client(received_messages: list[RemoteMessage]) -> FakeResendClient:
    return FakeResendClient(received=received_messages)


@pytest.fixture
def fake_app(store: LocalStore, mock_settings: Settings, fake_client: FakeResendClient):
    """Provide a FakeApp; leftover spawned coroutines are closed afterwards."""
    app = FakeApp(store, mock_settings, fake_client)
    yield app
    app.close_pending()


class FakeWindow:
    """Records addstr calls the way a curses window would receive them."""

    def __init__(self, height: int = 24, width: int = 80) -> None:
        self.height = height
        self.width = width
        self.writes: list[tuple[int, int, str, int]] = []

    def getmaxyx(self) -> tuple[int, int]:
        return self.height, self.width

    def addstr(self, y: int, x: int, text: str, attr: int = 0) -> None:
        self.writes.append((y, x, text, attr))

    def text(self) -> str:
        return "\n".join(text for _, _, text, _ in self.writes)


@pytest.fixture
def window() -> FakeWindow:
    return FakeWindow()
