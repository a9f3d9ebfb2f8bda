"""Unit tests for the application shell."""

import asyncio

import pytest

from hypermail.exceptions import ConfigurationError
from hypermail.keys import KeyEvent
from hypermail.models import SettingField
from hypermail.tui import HypermailApp
from hypermail.tui.menu import HelpScreen, MenuScreen
from hypermail.tui.setup import SetupScreen


@pytest.fixture
def app(store, mock_settings, fake_client) -> HypermailApp:
    return HypermailApp(store, mock_settings, client_factory=lambda api_key: fake_client)


class TestHypermailApp:
    """Test suite for HypermailApp class."""

    def test_first_run_shows_setup(self, app: HypermailApp) -> None:
        assert isinstance(app.first_screen(), SetupScreen)

    def test_configured_run_shows_menu(self, app: HypermailApp) -> None:
        app.store.set_field(SettingField.API_KEY, "re_123")

        assert isinstance(app.first_screen(), MenuScreen)

    def test_client_requires_api_key(self, app: HypermailApp) -> None:
        with pytest.raises(ConfigurationError):
            app.client()

    def test_client_is_built_once(self, store, mock_settings, fake_client) -> None:
        built: list[str] = []

        def factory(api_key: str):
            built.append(api_key)
            return fake_client

        app = HypermailApp(store, mock_settings, client_factory=factory)
        store.set_field(SettingField.API_KEY, "re_123")

        assert app.client() is fake_client
        assert app.client() is fake_client
        assert built == ["re_123"]

    def test_dispatch_routes_to_screen(self, app: HypermailApp) -> None:
        app.show(HelpScreen(app))

        app.dispatch(KeyEvent("escape"))

        assert isinstance(app.screen, MenuScreen)

    def test_resize_is_ignored(self, app: HypermailApp) -> None:
        help_screen = HelpScreen(app)
        app.show(help_screen)

        app.dispatch(KeyEvent("resize"))

        assert app.screen is help_screen

    @pytest.mark.asyncio
    async def test_reset_client_closes_old_client(self, app: HypermailApp, fake_client) -> None:
        closed: list[bool] = []

        async def aclose() -> None:
            closed.append(True)

        fake_client.aclose = aclose
        app.store.set_field(SettingField.API_KEY, "re_123")
        app.client()

        app.reset_client()
        await asyncio.sleep(0)

        assert closed == [True]

    @pytest.mark.asyncio
    async def test_failed_background_task_sets_status(self, app: HypermailApp) -> None:
        async def boom() -> None:
            raise RuntimeError("kaboom")

        task = app.spawn(boom())
        await asyncio.gather(task, return_exceptions=True)
        await asyncio.sleep(0)

        assert app.status == "Error: kaboom"
