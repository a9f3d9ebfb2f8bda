"""First-run setup: API key, then an optional default sender."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

import structlog

from hypermail.exceptions import HypermailError
from hypermail.keys import KeyEvent
from hypermail.models import SettingField
from hypermail.tui.canvas import Canvas
from hypermail.tui.screen import Screen, edit_text

if TYPE_CHECKING:
    from hypermail.tui.app import HypermailApp

logger = structlog.get_logger()


class SetupStep(str, Enum):
    API_KEY = "api_key"
    VALIDATING = "validating"
    DEFAULT_FROM = "default_from"


class SetupScreen(Screen):
    def __init__(self, app: HypermailApp) -> None:
        super().__init__(app)
        self.step = SetupStep.API_KEY
        self.api_key_input = ""
        self.from_input = ""
        self.error = ""

    def handle_key(self, key: KeyEvent) -> None:
        if self.step is SetupStep.API_KEY:
            self._handle_api_key(key)
        elif self.step is SetupStep.DEFAULT_FROM:
            self._handle_default_from(key)

    def _handle_api_key(self, key: KeyEvent) -> None:
        if key.is_any("escape"):
            self.app.quit()
        elif key.is_any("return"):
            candidate = self.api_key_input.strip()
            if candidate:
                self.step = SetupStep.VALIDATING
                self.error = ""
                self.app.spawn(self.validate(candidate))
        elif key.is_printable and not key.is_any("space"):
            self.api_key_input += key.char or ""
        elif key.is_any("backspace"):
            self.api_key_input = self.api_key_input[:-1]

    async def validate(self, candidate: str) -> None:
        try:
            valid = await self.app.validate_api_key(candidate)
        except HypermailError as exc:
            self.error = f"Could not validate API key: {exc}"
            self.step = SetupStep.API_KEY
            return

        if not valid:
            self.error = "Invalid API key. Please try again."
            self.step = SetupStep.API_KEY
            return

        try:
            self.app.store.set_field(SettingField.API_KEY, candidate)
        except HypermailError as exc:
            self.error = str(exc)
            self.step = SetupStep.API_KEY
            return

        logger.info("setup_api_key_saved")
        self.step = SetupStep.DEFAULT_FROM

    def _handle_default_from(self, key: KeyEvent) -> None:
        if key.is_any("return"):
            self._finish()
            return
        edited = edit_text(self.from_input, key)
        if edited is not None:
            self.from_input = edited

    def _finish(self) -> None:
        sender = self.from_input.strip()
        if sender:
            try:
                self.app.store.set_field(SettingField.DEFAULT_FROM, sender)
            except HypermailError as exc:
                self.error = str(exc)
                return
        self.app.reset_client()
        self.app.back()

    def draw(self, canvas: Canvas) -> None:
        canvas.write("Welcome to Hypermail", "title")
        canvas.skip()
        canvas.write("Let's set up your Resend API key.")
        canvas.skip()

        if self.step is SetupStep.API_KEY:
            canvas.write("Get your API key from: https://resend.com/api-keys")
            canvas.skip()
            canvas.write("Enter your Resend API key (Esc to quit):")
            canvas.write_parts([("> ", "ok"), ("*" * len(self.api_key_input), "normal"), ("_", "hint")])
        elif self.step is SetupStep.VALIDATING:
            canvas.write("Validating API key...", "warn")
        else:
            canvas.write("API key saved!", "ok")
            canvas.skip()
            canvas.write('Enter default "From" email (optional, press Enter to skip):')
            canvas.write_parts([("> ", "ok"), (self.from_input, "normal"), ("_", "hint")])

        if self.error:
            canvas.skip()
            canvas.write(self.error, "error")
