"""Contacts screen, also used as a recipient picker from compose."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from hypermail.exceptions import StoreError
from hypermail.keys import KeyEvent
from hypermail.lists import CommandKind, ListModel, contact_matches
from hypermail.models import Contact
from hypermail.tui.canvas import Canvas, pad
from hypermail.tui.screen import Screen, draw_confirm, draw_count, draw_header, draw_rows, draw_search, edit_text

if TYPE_CHECKING:
    from hypermail.tui.app import HypermailApp

ADD_FIELDS = ("name", "email")


class ContactsScreen(Screen):
    def __init__(
        self,
        app: HypermailApp,
        *,
        on_select: Callable[[Contact], None] | None = None,
        on_back: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(app)
        self.on_select = on_select
        self.on_back = on_back
        self.model: ListModel[Contact] = ListModel(contact_matches, allow_delete=not self.select_mode)
        self.adding = False
        self.add_field = "name"
        self.new_values = {"name": "", "email": ""}
        self.error = ""

    @property
    def select_mode(self) -> bool:
        return self.on_select is not None

    def on_enter(self) -> None:
        self.reload()

    def reload(self) -> None:
        self.model.set_items(self.app.store.list_contacts())

    def handle_key(self, key: KeyEvent) -> None:
        if self.adding:
            self._handle_add_key(key)
            return

        command = self.model.handle_key(key)
        if command is None:
            return
        if command.kind is CommandKind.OPEN and command.item is not None:
            if self.on_select is not None:
                self.on_select(command.item)
        elif command.kind is CommandKind.DELETE_CONFIRMED and command.item is not None:
            self.delete(command.item)
        elif command.kind is CommandKind.LEAVE:
            if self.on_back is not None:
                self.on_back()
            else:
                self.app.back()
        elif command.kind is CommandKind.KEY and command.key is not None:
            if command.key.is_any("a") and not self.select_mode:
                self.adding = True
                self.error = ""

    def delete(self, contact: Contact) -> None:
        try:
            self.app.store.delete_contact(contact.id)
        except StoreError as exc:
            self.error = str(exc)
            return
        self.reload()

    def _handle_add_key(self, key: KeyEvent) -> None:
        if key.is_any("escape"):
            self._reset_form()
        elif key.is_any("tab", "btab", "down", "up", "return"):
            self.add_field = "email" if self.add_field == "name" else "name"
        elif key.ctrl and key.name == "s":
            self.save_contact()
        else:
            edited = edit_text(self.new_values[self.add_field], key)
            if edited is not None:
                self.new_values[self.add_field] = edited

    def save_contact(self) -> None:
        name = self.new_values["name"].strip()
        email = self.new_values["email"].strip()
        if not name or not email:
            self.error = "Name and email are required"
            return
        try:
            self.app.store.add_contact(name=name, email=email)
        except StoreError as exc:
            # Keep the form filled in so nothing is lost.
            self.error = str(exc)
            return
        self._reset_form()
        self.reload()

    def _reset_form(self) -> None:
        self.adding = False
        self.add_field = "name"
        self.new_values = {"name": "", "email": ""}
        self.error = ""

    def draw(self, canvas: Canvas) -> None:
        if self.adding:
            self._draw_add(canvas)
        elif self.model.pending_delete is not None:
            contact = self.model.pending_delete
            draw_confirm(canvas, "Delete Contact?", [f"Name: {contact.name}", f"Email: {contact.email}"])
        else:
            self._draw_list(canvas)

        if self.error:
            canvas.skip()
            canvas.write(self.error, "error")

    def _draw_add(self, canvas: Canvas) -> None:
        draw_header(canvas, "Add Contact", "Tab: next field | Ctrl+S: save | Esc: cancel")
        for field in ADD_FIELDS:
            active = field == self.add_field
            canvas.write_parts(
                [
                    (f"{field.capitalize()}: ", "selected" if active else "normal"),
                    (self.new_values[field], "normal"),
                    ("_" if active else "", "hint"),
                ]
            )

    def _draw_list(self, canvas: Canvas) -> None:
        if self.select_mode:
            draw_header(canvas, "Select Contact", "j/k: navigate | n/p: page | /: search | Enter: select | Esc: back")
        else:
            draw_header(canvas, "Contacts", "j/k: navigate | n/p: page | /: search | a: add | d: delete | Esc: back")
        draw_search(canvas, self.model)

        if not self.model.items:
            canvas.write("No contacts yet.", "warn")
            if not self.select_mode:
                canvas.skip()
                canvas.write("Press 'a' to add a contact.")
        elif not self.model.filtered:
            canvas.write(f'No contacts match "{self.model.query}"', "warn")
        else:
            draw_rows(canvas, self.model, self._render_row)
            draw_count(canvas, self.model, "contact")

    @staticmethod
    def _render_row(contact: Contact, selected: bool) -> list[tuple[str, str]]:
        return [
            (pad(contact.name, 20), "unread"),
            (" | ", "hint"),
            (contact.email[:35], "selected" if selected else "normal"),
        ]
