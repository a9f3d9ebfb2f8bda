"""Unit tests for the list interaction model."""

import pytest

from hypermail.exceptions import ResendAPIError
from hypermail.keys import KeyEvent
from hypermail.lists import PAGE_SIZE, CommandKind, ListMode, ListModel, contact_matches
from hypermail.models import Contact


def key(name: str) -> KeyEvent:
    if len(name) == 1:
        return KeyEvent.printable(name)
    return KeyEvent(name)


def press(model: ListModel, *names: str):
    command = None
    for name in names:
        command = model.handle_key(key(name))
    return command


def substring(item: str, query: str) -> bool:
    return query in item.lower()


@pytest.fixture
def fifteen() -> ListModel[str]:
    model: ListModel[str] = ListModel(substring)
    model.set_items([f"item{n:02d}" for n in range(15)])
    return model


@pytest.fixture
def contacts() -> ListModel[Contact]:
    model: ListModel[Contact] = ListModel(contact_matches)
    model.set_items(
        [
            Contact(id="1", name="Alice Smith", email="alice@example.com"),
            Contact(id="2", name="Bob", email="bob@example.com"),
            Contact(id="3", name="Carol", email="carol@example.com"),
            Contact(id="4", name="Dave", email="dave@alice.dev"),
            Contact(id="5", name="Eve", email="eve@example.com"),
        ]
    )
    return model


class TestPagination:
    """Test suite for paging and cursor movement."""

    def test_fifteen_items_make_two_pages(self, fifteen: ListModel[str]) -> None:
        assert PAGE_SIZE == 10
        assert fifteen.page_count == 2
        assert fifteen.visible == [f"item{n:02d}" for n in range(10)]

    def test_next_page_shows_the_rest(self, fifteen: ListModel[str]) -> None:
        press(fifteen, "j", "j", "n")

        assert fifteen.page == 1
        assert fifteen.selection == 0
        assert fifteen.visible == [f"item{n:02d}" for n in range(10, 15)]

    def test_next_page_stops_at_last_page(self, fifteen: ListModel[str]) -> None:
        press(fifteen, "n", "n", "n")

        assert fifteen.page == 1

    def test_next_page_ignored_with_single_page(self) -> None:
        model: ListModel[str] = ListModel(substring)
        model.set_items(["a", "b", "c"])
        press(model, "j")

        press(model, "n")

        assert model.page == 0
        assert model.selection == 1

    def test_prev_page_resets_selection(self, fifteen: ListModel[str]) -> None:
        press(fifteen, "n", "j", "p")

        assert fifteen.page == 0
        assert fifteen.selection == 0

        press(fifteen, "p")

        assert fifteen.page == 0

    def test_cursor_is_clamped_to_visible_rows(self, fifteen: ListModel[str]) -> None:
        press(fifteen, "k")
        assert fifteen.selection == 0

        press(fifteen, *["down"] * 20)
        assert fifteen.selection == 9
        assert fifteen.selected == "item09"

    def test_replacing_items_clamps_position(self, fifteen: ListModel[str]) -> None:
        press(fifteen, "n", "j", "j", "j")

        fifteen.set_items(["a", "b"])

        assert fifteen.page == 0
        assert fifteen.selection == 1


class TestSearch:
    """Test suite for search mode."""

    def test_query_filters_in_order(self, contacts: ListModel[Contact]) -> None:
        press(contacts, "/", "a", "l", "i", "c", "e")

        assert contacts.mode is ListMode.SEARCHING
        assert [c.id for c in contacts.filtered] == ["1", "4"]
        assert [c.id for c in contacts.visible] == ["1", "4"]

    def test_query_is_case_insensitive(self, contacts: ListModel[Contact]) -> None:
        contacts.set_query("ALICE")

        assert [c.id for c in contacts.filtered] == ["1", "4"]

    def test_typing_resets_position(self, fifteen: ListModel[str]) -> None:
        press(fifteen, "n", "j", "/", "i")

        assert fifteen.page == 0
        assert fifteen.selection == 0

    def test_backspace_drops_last_character(self, contacts: ListModel[Contact]) -> None:
        press(contacts, "/", "b", "o", "x", "backspace")

        assert contacts.query == "bo"
        assert [c.id for c in contacts.filtered] == ["2"]

    def test_enter_keeps_query(self, contacts: ListModel[Contact]) -> None:
        press(contacts, "/", "b", "o", "return")

        assert contacts.mode is ListMode.NORMAL
        assert contacts.query == "bo"

    def test_escape_clears_query(self, contacts: ListModel[Contact]) -> None:
        press(contacts, "/", "b", "o", "escape")

        assert contacts.mode is ListMode.NORMAL
        assert contacts.query == ""
        assert len(contacts.filtered) == 5

    def test_navigation_keys_are_text_while_searching(self, contacts: ListModel[Contact]) -> None:
        command = press(contacts, "/", "q", "d", "n")

        assert command is None
        assert contacts.query == "qdn"
        assert contacts.pending_delete is None

    def test_escape_in_normal_mode_clears_query_before_leaving(
        self, contacts: ListModel[Contact]
    ) -> None:
        press(contacts, "/", "b", "return")

        assert press(contacts, "escape") is None
        assert contacts.query == ""

        command = press(contacts, "q")
        assert command is not None
        assert command.kind is CommandKind.LEAVE

    def test_no_matches(self, contacts: ListModel[Contact]) -> None:
        contacts.set_query("zzz")

        assert contacts.page_count == 0
        assert contacts.visible == []
        assert contacts.selected is None
        assert press(contacts, "return") is None


class TestDeleteConfirmation:
    """Test suite for the confirm mode."""

    def test_y_emits_confirmed_item(self, contacts: ListModel[Contact]) -> None:
        press(contacts, "j", "d")
        assert contacts.mode is ListMode.CONFIRMING

        command = press(contacts, "y")

        assert command is not None
        assert command.kind is CommandKind.DELETE_CONFIRMED
        assert command.item is not None and command.item.id == "2"
        assert contacts.pending_delete is None

    @pytest.mark.parametrize("answer", ["n", "N", "escape"])
    def test_cancel(self, contacts: ListModel[Contact], answer: str) -> None:
        press(contacts, "d")

        assert press(contacts, answer) is None
        assert contacts.pending_delete is None
        assert len(contacts.items) == 5

    def test_other_keys_ignored(self, contacts: ListModel[Contact]) -> None:
        press(contacts, "d")

        assert press(contacts, "j", "/", "q", "return") is None
        assert contacts.mode is ListMode.CONFIRMING
        assert contacts.selection == 0

    def test_delete_disabled_passes_key_through(self) -> None:
        model: ListModel[str] = ListModel(substring, allow_delete=False)
        model.set_items(["a"])

        command = press(model, "d")

        assert command is not None
        assert command.kind is CommandKind.KEY
        assert model.pending_delete is None

    def test_delete_on_empty_list_is_noop(self) -> None:
        model: ListModel[str] = ListModel(substring)

        assert press(model, "d") is None
        assert model.pending_delete is None


class TestRemove:
    """Test suite for removing items after a confirmed delete."""

    def test_removing_only_item(self) -> None:
        model: ListModel[str] = ListModel(substring)
        model.set_items(["only"])

        model.remove("only")

        assert model.visible == []
        assert model.selection == 0
        assert model.page == 0

    def test_removing_middle_row_keeps_index(self, fifteen: ListModel[str]) -> None:
        press(fifteen, "j", "j")

        fifteen.remove("item02")

        assert fifteen.selection == 2
        assert fifteen.selected == "item03"

    def test_removing_last_row_moves_back(self, fifteen: ListModel[str]) -> None:
        press(fifteen, "n", *["j"] * 4)
        assert fifteen.selected == "item14"

        fifteen.remove("item14")

        assert fifteen.page == 1
        assert fifteen.selection == 3
        assert fifteen.selected == "item13"

    def test_emptied_page_falls_back(self, fifteen: ListModel[str]) -> None:
        press(fifteen, "n")

        for n in range(10, 15):
            fifteen.remove(f"item{n:02d}")

        assert fifteen.page_count == 1
        assert fifteen.page == 0
        assert fifteen.selected is not None

    def test_removing_unknown_item_is_noop(self, fifteen: ListModel[str]) -> None:
        fifteen.remove("missing")

        assert len(fifteen.items) == 15


class TestCommands:
    """Test suite for open, leave and pass-through commands."""

    def test_enter_opens_selected(self, fifteen: ListModel[str]) -> None:
        command = press(fifteen, "n", "j", "return")

        assert command is not None
        assert command.kind is CommandKind.OPEN
        assert command.item == "item11"

    def test_unbound_key_is_passed_through(self, fifteen: ListModel[str]) -> None:
        command = press(fifteen, "r")

        assert command is not None
        assert command.kind is CommandKind.KEY
        assert command.key == KeyEvent.printable("r")

    def test_ctrl_keys_are_passed_through(self, fifteen: ListModel[str]) -> None:
        command = fifteen.handle_key(KeyEvent.control("d"))

        assert command is not None
        assert command.kind is CommandKind.KEY
        assert fifteen.pending_delete is None


class TestRefresh:
    """Test suite for asynchronous refreshes."""

    @pytest.mark.asyncio
    async def test_refresh_replaces_items(self) -> None:
        model: ListModel[str] = ListModel(substring)

        async def loader() -> list[str]:
            assert model.loading is True
            return ["a", "b"]

        assert await model.refresh(loader) is True
        assert model.items == ["a", "b"]
        assert model.loading is False
        assert model.error is None

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_last_good_items(self, fifteen: ListModel[str]) -> None:
        async def loader() -> list[str]:
            raise ResendAPIError("Service unavailable", status_code=503)

        assert await fifteen.refresh(loader) is False
        assert len(fifteen.items) == 15
        assert fifteen.error == "Service unavailable"
        assert fifteen.loading is False
