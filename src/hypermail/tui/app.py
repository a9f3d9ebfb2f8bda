"""The curses application: event loop, view switching and shared services.

Key polling and remote calls share one asyncio event loop. The loop polls
the keyboard without blocking, so fetches started as background tasks make
progress while the user keeps typing.
"""

from __future__ import annotations

import asyncio
import curses
from collections.abc import Callable, Coroutine
from typing import Any

import structlog

from hypermail.config import Settings, get_settings
from hypermail.exceptions import ConfigurationError
from hypermail.keys import KeyEvent
from hypermail.models import SettingField
from hypermail.resend import ResendClient, validate_api_key
from hypermail.store import LocalStore
from hypermail.tui.canvas import Canvas
from hypermail.tui.keys import decode_key
from hypermail.tui.menu import MenuScreen
from hypermail.tui.screen import Screen
from hypermail.tui.setup import SetupScreen

logger = structlog.get_logger()

ESCAPE_DELAY_MS = 25


class HypermailApp:
    """Owns the active screen, the Resend client and background tasks."""

    def __init__(
        self,
        store: LocalStore,
        settings: Settings | None = None,
        *,
        client_factory: Callable[[str], ResendClient] | None = None,
    ) -> None:
        """Initialize the application.

        Args:
            store: Local state store.
            settings: Application settings. If None, uses default settings.
            client_factory: Builds a client from an API key. Defaults to
                ``ResendClient``.
        """
        self.settings = settings or get_settings()
        self.store = store
        self.screen: Screen | None = None
        self.status = ""
        self._client: ResendClient | None = None
        self._client_factory = client_factory or (lambda key: ResendClient(key, self.settings))
        self._tasks: set[asyncio.Task[Any]] = set()
        self._styles: dict[str, int] = {}
        self._running = False

    # Services for screens

    def client(self) -> ResendClient:
        """Return the shared client, creating it from the stored API key.

        Raises:
            ConfigurationError: If no API key is configured.
        """

        if self._client is None:
            api_key = self.store.get_field(SettingField.API_KEY)
            if not api_key:
                raise ConfigurationError("No API key configured")
            self._client = self._client_factory(api_key)
        return self._client

    def reset_client(self) -> None:
        """Drop the client so the next call picks up a changed API key."""

        old, self._client = self._client, None
        if old is not None:
            self.spawn(old.aclose())

    async def validate_api_key(self, api_key: str) -> bool:
        return await validate_api_key(api_key, self.settings)

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def show(self, screen: Screen) -> None:
        logger.debug("screen_shown", screen=type(screen).__name__)
        self.screen = screen
        screen.on_enter()

    def back(self) -> None:
        self.show(MenuScreen(self))

    def quit(self) -> None:
        logger.info("quit_requested")
        self._running = False

    def first_screen(self) -> Screen:
        if self.store.has_api_key():
            return MenuScreen(self)
        return SetupScreen(self)

    def dispatch(self, key: KeyEvent) -> None:
        if key.ctrl and key.name == "c":
            self.quit()
            return
        if key.name == "resize" or self.screen is None:
            return
        self.status = ""
        self.screen.handle_key(key)

    # Event loop

    def run(self, stdscr: Any) -> None:
        """Entry point for ``curses.wrapper``."""
        asyncio.run(self._main(stdscr))

    async def _main(self, stdscr: Any) -> None:
        self._setup_terminal(stdscr)
        self._running = True
        logger.info("tui_started", config_path=str(self.store.path))
        self.show(self.first_screen())

        try:
            while self._running:
                self._draw(stdscr)
                key = self._read_key(stdscr)
                if key is None:
                    await asyncio.sleep(self.settings.poll_interval)
                    continue
                logger.debug("key", name=key.name, ctrl=key.ctrl, screen=type(self.screen).__name__)
                self.dispatch(key)
                await asyncio.sleep(0)
        finally:
            await self._shutdown()
            logger.info("tui_stopped")

    async def _shutdown(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("background_task_failed", error=str(exc), exc_info=exc)
            self.status = f"Error: {exc}"

    def _setup_terminal(self, stdscr: Any) -> None:
        # raw() so Ctrl+S/Ctrl+O reach us instead of the tty driver.
        curses.raw()
        curses.noecho()
        stdscr.keypad(True)
        stdscr.nodelay(True)
        try:
            curses.set_escdelay(ESCAPE_DELAY_MS)
            curses.curs_set(0)
        except curses.error:
            pass
        self._styles = self._build_styles()

    @staticmethod
    def _build_styles() -> dict[str, int]:
        styles = {"normal": curses.A_NORMAL, "hint": curses.A_DIM, "selected": curses.A_BOLD}
        if not curses.has_colors():
            styles.update(title=curses.A_BOLD, error=curses.A_BOLD, unread=curses.A_BOLD)
            return styles

        curses.start_color()
        try:
            curses.use_default_colors()
            background = -1
        except curses.error:
            background = curses.COLOR_BLACK
        palette = {
            "cyan": curses.COLOR_CYAN,
            "yellow": curses.COLOR_YELLOW,
            "red": curses.COLOR_RED,
            "green": curses.COLOR_GREEN,
            "magenta": curses.COLOR_MAGENTA,
        }
        pairs: dict[str, int] = {}
        for number, (name, color) in enumerate(palette.items(), start=1):
            curses.init_pair(number, color, background)
            pairs[name] = curses.color_pair(number)

        styles.update(
            title=pairs["cyan"] | curses.A_BOLD,
            selected=pairs["cyan"] | curses.A_BOLD,
            accent=pairs["yellow"],
            warn=pairs["yellow"],
            error=pairs["red"] | curses.A_BOLD,
            ok=pairs["green"],
            unread=pairs["magenta"] | curses.A_BOLD,
        )
        return styles

    def _read_key(self, stdscr: Any) -> KeyEvent | None:
        try:
            raw = stdscr.get_wch()
        except curses.error:
            return None
        return decode_key(raw)

    def _draw(self, stdscr: Any) -> None:
        stdscr.erase()
        canvas = Canvas(stdscr, self._styles)
        if self.screen is not None:
            self.screen.draw(canvas)
        if self.status:
            canvas.status(self.status, "error")
        stdscr.refresh()
