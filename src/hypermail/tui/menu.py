"""Main menu and help screens."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from hypermail.keys import KeyEvent
from hypermail.tui.canvas import Canvas
from hypermail.tui.compose import ComposeScreen
from hypermail.tui.contacts import ContactsScreen
from hypermail.tui.drafts import DraftsScreen
from hypermail.tui.messages import InboxScreen, SentScreen
from hypermail.tui.screen import Screen, draw_header
from hypermail.tui.settings import SettingsScreen

if TYPE_CHECKING:
    from hypermail.tui.app import HypermailApp

BANNER = (
    "╦ ╦╦ ╦╔═╗╔═╗╦═╗╔╦╗╔═╗╦╦  ",
    "╠═╣╚╦╝╠═╝║╣ ╠╦╝║║║╠═╣║║  ",
    "╩ ╩ ╩ ╩  ╚═╝╩╚═╩ ╩╩ ╩╩╩═╝",
)


@dataclass(frozen=True)
class MenuItem:
    key: str
    label: str
    description: str


MENU_ITEMS: tuple[MenuItem, ...] = (
    MenuItem("c", "Compose", "Write a new email"),
    MenuItem("i", "Inbox", "View received emails"),
    MenuItem("t", "Sent", "View sent emails"),
    MenuItem("d", "Drafts", "Continue a saved draft"),
    MenuItem("a", "Contacts", "Manage your address book"),
    MenuItem("s", "Settings", "Configure email & signature"),
    MenuItem("?", "Help", "Keyboard shortcuts"),
    MenuItem("q", "Quit", "Exit hypermail"),
)


class MenuScreen(Screen):
    def __init__(self, app: HypermailApp) -> None:
        super().__init__(app)
        self.selection = 0

    def handle_key(self, key: KeyEvent) -> None:
        if key.is_any("up", "k"):
            self.selection = max(0, self.selection - 1)
        elif key.is_any("down", "j"):
            self.selection = min(len(MENU_ITEMS) - 1, self.selection + 1)
        elif key.is_any("return"):
            self.activate(MENU_ITEMS[self.selection].key)
        elif not key.ctrl:
            self.activate(key.name)

    def activate(self, hotkey: str) -> None:
        if hotkey == "q":
            self.app.quit()
            return
        factory = self._screens().get(hotkey)
        if factory is not None:
            self.app.show(factory())

    def _screens(self) -> dict[str, Callable[[], Screen]]:
        return {
            "c": lambda: ComposeScreen(self.app),
            "i": lambda: InboxScreen(self.app),
            "t": lambda: SentScreen(self.app),
            "d": lambda: DraftsScreen(self.app),
            "a": lambda: ContactsScreen(self.app),
            "s": lambda: SettingsScreen(self.app),
            "?": lambda: HelpScreen(self.app),
        }

    def draw(self, canvas: Canvas) -> None:
        for line in BANNER:
            canvas.write(line, "title")
        canvas.write("Terminal email client powered by Resend", "hint")
        canvas.skip()

        for index, item in enumerate(MENU_ITEMS):
            selected = index == self.selection
            canvas.write_parts(
                [
                    ("> " if selected else "  ", "selected" if selected else "normal"),
                    (f"[{item.key}]", "accent"),
                    (f" {item.label}", "selected" if selected else "normal"),
                    (f" - {item.description}", "hint"),
                ]
            )

        canvas.skip()
        canvas.write("Use j/k or arrows to navigate, Enter to select, or press the hotkey", "hint")


HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "Main Menu",
        (
            ("c", "Compose new email"),
            ("i", "Open inbox"),
            ("t", "View sent emails"),
            ("d", "View drafts"),
            ("a", "Contacts"),
            ("s", "Settings"),
            ("?", "This help screen"),
            ("q", "Quit"),
        ),
    ),
    (
        "Lists (Inbox/Sent/Drafts/Contacts)",
        (
            ("j/k", "Navigate up/down"),
            ("n/p", "Next/previous page"),
            ("/", "Search"),
            ("Enter", "Open selected item"),
            ("r", "Refresh list (inbox/sent)"),
            ("a", "Mark all as read (inbox) / add contact"),
            ("d", "Delete (inbox archives locally)"),
            ("Esc", "Clear search or go back"),
        ),
    ),
    (
        "Email Detail",
        (
            ("r", "Reply to email"),
            ("f", "Forward email"),
            ("d", "Delete email"),
            ("Esc/Q", "Back to list"),
        ),
    ),
    (
        "Compose",
        (
            ("Tab", "Next field"),
            ("Shift+Tab", "Previous field"),
            ("Ctrl+S", "Send email"),
            ("Ctrl+D", "Save as draft"),
            ("Ctrl+O", "Pick recipient from contacts"),
            ("Esc", "Cancel and go back"),
        ),
    ),
    (
        "Settings",
        (
            ("Tab", "Next field"),
            ("Ctrl+S", "Save settings"),
            ("Esc", "Go back"),
        ),
    ),
)


class HelpScreen(Screen):
    def handle_key(self, key: KeyEvent) -> None:
        if key.is_any("escape", "q", "?"):
            self.app.back()

    def draw(self, canvas: Canvas) -> None:
        draw_header(canvas, "Keyboard Shortcuts", "Press Esc, Q, or ? to close")
        for title, bindings in HELP_SECTIONS:
            canvas.write(title, "accent")
            for keys, description in bindings:
                canvas.write(f"  {keys:<10}{description}")
            canvas.skip()
