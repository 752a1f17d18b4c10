import logging
from typing import Any

import flet as ft

from src.adapters.token_store import ClientStorageTokenStore, FileTokenStore
from src.app_shell.config import AppConfig, validate_rules
from src.app_shell.router import Router
from src.app_shell.screens import build_screen
from src.domain.entities import SessionSnapshot
from src.ports.token_store import TokenStorePort
from src.rules.loader import load_rules
from src.rules.models import Rules
from src.ui.context import ServiceContext
from src.ui.layout import MainLayout
from src.ui.state import AppState
from src.ui.theme import AppTheme
from src.ui.views.login import LoginView
from src.ui.views.register import RegisterView

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def make_token_store(page: ft.Page, config: AppConfig, rules: Rules) -> TokenStorePort:
    if config.token_file:
        logger.info(f"Persisting session token in {config.token_file}")
        return FileTokenStore(config.token_file, rules.session.token_key)
    return ClientStorageTokenStore(page, rules.session.token_key)


def main(page: ft.Page) -> None:
    config = AppConfig.from_env()
    configure_logging(config.log_level)

    page.title = "University Management System"
    page.theme = AppTheme.light_theme()
    page.dark_theme = AppTheme.dark_theme()
    page.theme_mode = ft.ThemeMode.LIGHT

    # 1. Rules
    try:
        rules = config.apply(load_rules(config.rules_path))
        validate_rules(rules)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Cannot start: {e}")
        page.add(ft.Text(f"Error: {e}", color="red", size=20))
        return
    logger.info(f"Rules loaded from {config.rules_path}; backend at {rules.api.base_url}")

    # 2. Services
    ctx = ServiceContext.create(rules, make_token_store(page, config, rules))
    state = AppState()
    router = Router(page, rules.session, lambda: ctx.session.is_authenticated)
    shell: dict[str, MainLayout | None] = {"layout": None}

    def on_unread(count: int) -> None:
        state.unread_count = count
        layout = shell["layout"]
        if layout is not None:
            layout.set_unread(count)

    poller = ctx.unread_poller(on_unread)

    def toggle_theme() -> None:
        if page.theme_mode == ft.ThemeMode.LIGHT:
            page.theme_mode = ft.ThemeMode.DARK
        else:
            page.theme_mode = ft.ThemeMode.LIGHT
        router.show(page.route)

    # --- Builders ---

    def home_builder(_: ft.Page) -> ft.View:
        user = ctx.session.current_user
        nav = ctx.navigation.sync(user)

        def select(tab_id: str) -> None:
            try:
                ctx.navigation.select(ctx.session.current_user, tab_id)
            except PermissionError:
                return
            router.show(rules.session.home_route)

        layout = MainLayout(
            page=page,
            app_state=state,
            tabs=nav.tabs,
            active_tab=nav.active_tab,
            content=build_screen(page, ctx, state, nav.active_tab, on_read=poller.poll_once),
            on_select=select,
            on_logout=ctx.session.logout,
            toggle_theme=toggle_theme,
        )
        shell["layout"] = layout
        return ft.View(rules.session.home_route, [layout], padding=0)

    def guest_view(route: str, content: ft.Control) -> ft.View:
        shell["layout"] = None
        return ft.View(
            route,
            [content],
            vertical_alignment=ft.MainAxisAlignment.CENTER,
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
        )

    def login_builder(_: ft.Page) -> ft.View:
        return guest_view(rules.session.login_route, LoginView(page, ctx, state))

    def register_builder(_: ft.Page) -> ft.View:
        return guest_view(rules.session.register_route, RegisterView(page, ctx, state))

    router.register(rules.session.home_route, home_builder, protected=True)
    router.register(rules.session.login_route, login_builder, protected=False, guest_only=True)
    router.register(rules.session.register_route, register_builder, protected=False, guest_only=True)

    # 3. Session
    ctx.session.hydrate()
    state.apply(ctx.session.snapshot)

    def on_session(snapshot: SessionSnapshot) -> None:
        state.apply(snapshot)
        if not snapshot.is_authenticated:
            ctx.navigation.reset()
        router.on_session_change(snapshot)
        if snapshot.is_authenticated:
            poller.poll_once()

    ctx.session.subscribe(on_session)

    # 4. Events
    def on_disconnect(_: Any) -> None:
        poller.stop()
        ctx.close()

    page.on_route_change = router.handle_route_change
    page.on_view_pop = router.view_pop
    page.on_disconnect = on_disconnect

    poller.start()
    page.go(page.route or rules.session.home_route)


if __name__ == "__main__":
    ft.app(target=main)
