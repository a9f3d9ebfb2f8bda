"""Filter, paginate, select and navigate over a list of items.

Every list screen (inbox, sent, drafts, contacts) drives one ``ListModel``.
The model has three modes, checked in order: confirming a delete, editing
the search query, and normal navigation. Each mode has its own transition
method. Keys the model does not consume in normal mode are handed back to
the screen as ``CommandKind.KEY`` commands.
"""

from __future__ import annotations

import math
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

import structlog

from hypermail.exceptions import HypermailError
from hypermail.keys import KeyEvent

logger = structlog.get_logger()

T = TypeVar("T")

PAGE_SIZE = 10


class ListMode(str, Enum):
    """Which transition table the next key goes through."""

    NORMAL = "normal"
    SEARCHING = "searching"
    CONFIRMING = "confirming"


class CommandKind(str, Enum):
    """Intents emitted to the owning screen."""

    OPEN = "open"
    DELETE_CONFIRMED = "delete_confirmed"
    LEAVE = "leave"
    KEY = "key"


@dataclass(frozen=True)
class ListCommand(Generic[T]):
    kind: CommandKind
    item: T | None = None
    key: KeyEvent | None = None


class ListModel(Generic[T]):
    """State machine behind a searchable, paginated list."""

    def __init__(
        self,
        predicate: Callable[[T, str], bool],
        *,
        page_size: int = PAGE_SIZE,
        allow_delete: bool = True,
    ) -> None:
        """Create an empty list.

        Args:
            predicate: ``predicate(item, lowered_query)`` decides whether an
                item matches a non-empty search query.
            page_size: Rows per page.
            allow_delete: Whether ``d`` asks to delete the selected row.
        """

        self._predicate = predicate
        self.page_size = page_size
        self.allow_delete = allow_delete

        self._items: list[T] = []
        self.query = ""
        self.searching = False
        self.selection = 0
        self.page = 0
        self.pending_delete: T | None = None

        self.loading = False
        self.error: str | None = None

    # Derived values

    @property
    def items(self) -> list[T]:
        return list(self._items)

    @property
    def filtered(self) -> list[T]:
        if not self.query:
            return list(self._items)
        needle = self.query.lower()
        return [item for item in self._items if self._predicate(item, needle)]

    @property
    def page_count(self) -> int:
        return math.ceil(len(self.filtered) / self.page_size)

    @property
    def visible(self) -> list[T]:
        start = self.page * self.page_size
        return self.filtered[start : start + self.page_size]

    @property
    def selected(self) -> T | None:
        visible = self.visible
        if not visible:
            return None
        return visible[self.selection]

    @property
    def mode(self) -> ListMode:
        if self.pending_delete is not None:
            return ListMode.CONFIRMING
        if self.searching:
            return ListMode.SEARCHING
        return ListMode.NORMAL

    # Commands

    async def refresh(self, loader: Callable[[], Awaitable[Sequence[T]]]) -> bool:
        """Replace the items with whatever ``loader`` returns.

        On failure the previous items stay and ``error`` holds the message.
        Concurrent refreshes are not fenced: the last one to finish wins.
        """

        self.loading = True
        self.error = None
        try:
            items = await loader()
        except HypermailError as exc:
            self.error = str(exc) or type(exc).__name__
            logger.warning("list_refresh_failed", error=self.error)
            return False
        finally:
            self.loading = False

        self.set_items(items)
        return True

    def set_items(self, items: Iterable[T]) -> None:
        self._items = list(items)
        self._clamp()

    def remove(self, item: T) -> None:
        """Drop one item, keeping the cursor on a valid row."""

        index = self._index_of(item)
        if index is None:
            return
        del self._items[index]
        if self.pending_delete is not None and self.pending_delete is item:
            self.pending_delete = None
        self._clamp()

    def set_query(self, query: str) -> None:
        self.query = query
        self._reset_position()

    def start_search(self) -> None:
        self.searching = True

    def move_selection(self, delta: int) -> None:
        visible = self.visible
        if not visible:
            return
        self.selection = max(0, min(len(visible) - 1, self.selection + delta))

    def next_page(self) -> None:
        page_count = self.page_count
        if page_count <= 1:
            return
        self.page = min(page_count - 1, self.page + 1)
        self.selection = 0

    def prev_page(self) -> None:
        self.page = max(0, self.page - 1)
        self.selection = 0

    def request_delete(self, item: T | None = None) -> bool:
        """Ask for confirmation before deleting ``item`` (default: selected)."""

        if not self.allow_delete:
            return False
        target = item if item is not None else self.selected
        if target is None:
            return False
        self.pending_delete = target
        return True

    def confirm_delete(self, confirmed: bool) -> T | None:
        item = self.pending_delete
        self.pending_delete = None
        return item if confirmed else None

    def open_selected(self) -> T | None:
        return self.selected

    def handle_key(self, key: KeyEvent) -> ListCommand[T] | None:
        mode = self.mode
        if mode is ListMode.CONFIRMING:
            return self._handle_confirm_key(key)
        if mode is ListMode.SEARCHING:
            return self._handle_search_key(key)
        return self._handle_normal_key(key)

    # Transitions

    def _handle_confirm_key(self, key: KeyEvent) -> ListCommand[T] | None:
        if key.is_any("y", "Y"):
            item = self.confirm_delete(True)
            return ListCommand(CommandKind.DELETE_CONFIRMED, item=item)
        if key.is_any("n", "N", "escape"):
            self.confirm_delete(False)
        return None

    def _handle_search_key(self, key: KeyEvent) -> ListCommand[T] | None:
        if key.is_any("escape"):
            self.searching = False
            self.set_query("")
        elif key.is_any("return"):
            self.searching = False
        elif key.is_any("backspace"):
            self.set_query(self.query[:-1])
        elif key.is_printable:
            self.set_query(self.query + key.char)
        return None

    def _handle_normal_key(self, key: KeyEvent) -> ListCommand[T] | None:
        if key.is_any("up", "k"):
            self.move_selection(-1)
        elif key.is_any("down", "j"):
            self.move_selection(1)
        elif key.is_any("/"):
            self.start_search()
        elif key.is_any("n"):
            self.next_page()
        elif key.is_any("p"):
            self.prev_page()
        elif key.is_any("return"):
            item = self.open_selected()
            if item is not None:
                return ListCommand(CommandKind.OPEN, item=item)
        elif key.is_any("d") and self.allow_delete:
            self.request_delete()
        elif key.is_any("escape", "q"):
            if self.query:
                self.set_query("")
            else:
                return ListCommand(CommandKind.LEAVE)
        else:
            return ListCommand(CommandKind.KEY, key=key)
        return None

    # Internals

    def _reset_position(self) -> None:
        self.selection = 0
        self.page = 0

    def _clamp(self) -> None:
        self.page = max(0, min(self.page, self.page_count - 1))
        self.selection = max(0, min(self.selection, len(self.visible) - 1))

    def _index_of(self, item: T) -> int | None:
        for index, candidate in enumerate(self._items):
            if candidate is item:
                return index
        for index, candidate in enumerate(self._items):
            if candidate == item:
                return index
        return None
