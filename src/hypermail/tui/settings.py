"""Settings screen: default sender, API key and signature."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

import structlog

from hypermail.exceptions import HypermailError
from hypermail.keys import KeyEvent
from hypermail.models import SettingField
from hypermail.tui.canvas import Canvas
from hypermail.tui.screen import Screen, draw_header, edit_text

if TYPE_CHECKING:
    from hypermail.tui.app import HypermailApp

logger = structlog.get_logger()

FIELD_ORDER: tuple[SettingField, ...] = (
    SettingField.DEFAULT_FROM,
    SettingField.API_KEY,
    SettingField.SIGNATURE,
)

FIELD_LABELS: dict[SettingField, str] = {
    SettingField.DEFAULT_FROM: "Default From Email",
    SettingField.API_KEY: "API Key",
    SettingField.SIGNATURE: "Signature (Enter for newlines)",
}


class SaveStatus(str, Enum):
    EDITING = "editing"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class SettingsScreen(Screen):
    def __init__(self, app: HypermailApp) -> None:
        super().__init__(app)
        doc = app.store.load()
        self.values: dict[SettingField, str] = {
            SettingField.DEFAULT_FROM: doc.default_from or "",
            SettingField.API_KEY: doc.api_key or "",
            SettingField.SIGNATURE: doc.signature or "",
        }
        self.field = SettingField.DEFAULT_FROM
        self.status = SaveStatus.EDITING
        self.error = ""

    def handle_key(self, key: KeyEvent) -> None:
        if self.status is SaveStatus.SAVING:
            return
        if self.status is SaveStatus.SAVED:
            if key.is_any("escape", "q", "return"):
                self.app.back()
            return
        if self.status is SaveStatus.ERROR:
            # Edits are kept so the user can fix them and retry.
            if key.is_any("escape", "q"):
                self.app.back()
            elif key.is_any("return"):
                self.status = SaveStatus.EDITING
            return

        if key.is_any("escape"):
            self.app.back()
        elif key.is_any("tab", "down"):
            self._move(1)
        elif key.is_any("btab", "up"):
            self._move(-1)
        elif key.ctrl and key.name == "s":
            self.status = SaveStatus.SAVING
            self.error = ""
            self.app.spawn(self.save())
        elif key.is_any("return") and self.field is not SettingField.SIGNATURE:
            self._move(1)
        else:
            multiline = self.field is SettingField.SIGNATURE
            edited = edit_text(self.values[self.field], key, multiline=multiline)
            if edited is not None:
                self.values[self.field] = edited

    def _move(self, delta: int) -> None:
        index = FIELD_ORDER.index(self.field)
        self.field = FIELD_ORDER[(index + delta) % len(FIELD_ORDER)]

    async def save(self) -> None:
        store = self.app.store
        try:
            api_key = self.values[SettingField.API_KEY].strip()
            if api_key and api_key != store.get_field(SettingField.API_KEY):
                if not await self.app.validate_api_key(api_key):
                    self.error = "Invalid API key"
                    self.status = SaveStatus.ERROR
                    return
                store.set_field(SettingField.API_KEY, api_key)
                self.app.reset_client()

            for field in (SettingField.DEFAULT_FROM, SettingField.SIGNATURE):
                if self.values[field]:
                    store.set_field(field, self.values[field])
        except HypermailError as exc:
            logger.warning("settings_save_failed", error=str(exc))
            self.error = str(exc)
            self.status = SaveStatus.ERROR
            return

        self.status = SaveStatus.SAVED

    def draw(self, canvas: Canvas) -> None:
        if self.status is SaveStatus.SAVED:
            canvas.write("Settings saved!", "ok")
            canvas.skip()
            canvas.write("Press Enter or Esc to go back", "hint")
            return
        if self.status is SaveStatus.ERROR:
            canvas.write("Failed to save settings", "error")
            canvas.write(self.error, "error")
            canvas.skip()
            canvas.write("Press Enter to edit again, or Esc to go back", "hint")
            return

        draw_header(canvas, "Settings", "Tab/Arrows: navigate | Ctrl+S: save | Esc: back")
        for field in FIELD_ORDER:
            active = field is self.field
            value = self.values[field]
            if field is SettingField.API_KEY:
                value = "*" * len(value)
            canvas.write(f"{FIELD_LABELS[field]}:", "selected" if active else "hint")
            lines = value.split("\n")
            for number, line in enumerate(lines):
                prefix = "> " if active and number == 0 else "  "
                cursor = "_" if active and number == len(lines) - 1 else ""
                canvas.write_parts([(prefix, "ok"), (line, "normal"), (cursor, "hint")])
            canvas.skip()

        if self.status is SaveStatus.SAVING:
            canvas.write("Saving...", "warn")
