from collections.abc import Callable
from typing import Any

import flet as ft

from src.rules.models import TabRule
from src.ui.state import AppState
from src.ui.theme import AppTheme

TITLE = "University Management System"


def tab_icon(tab: TabRule) -> str:
    return getattr(ft.Icons, tab.icon, ft.Icons.CIRCLE)


def badge_text(count: int) -> str:
    return "99+" if count > 99 else str(count)


class MainLayout(ft.Row):  # type: ignore
    """
    Signed-in frame. The rail lists only the tabs the role may open; the
    right side holds the app bar and whichever screen is active.
    """

    def __init__(
        self,
        page: ft.Page,
        app_state: AppState,
        tabs: list[TabRule],
        active_tab: str | None,
        content: ft.Control,
        on_select: Callable[[str], None],
        on_logout: Callable[[], None],
        toggle_theme: Callable[[], None],
    ):
        super().__init__(expand=True, spacing=0)
        self.page = page
        self.app_state = app_state
        self.tabs = tabs
        self.on_select = on_select
        self.on_logout = on_logout
        self.toggle_theme = toggle_theme

        self.unread_text = ft.Text(size=11, color="white")
        self.unread_badge = ft.Container(
            self.unread_text,
            bgcolor="error",
            border_radius=10,
            padding=ft.padding.symmetric(horizontal=6, vertical=1),
        )
        self.set_unread(app_state.unread_count, update=False)

        self.rail = self._build_rail(active_tab)
        self.app_bar = self._build_app_bar()
        self.content_area = ft.Container(
            content, expand=True, padding=20, alignment=ft.alignment.top_left
        )

        self.controls = [
            self.rail,
            ft.VerticalDivider(width=1, color="outlineVariant"),
            ft.Column([self.app_bar, self.content_area], expand=True, spacing=0),
        ]

    def _build_rail(self, active_tab: str | None) -> ft.NavigationRail:
        ids = [t.id for t in self.tabs]
        return ft.NavigationRail(
            destinations=[
                ft.NavigationRailDestination(icon=tab_icon(t), label=t.label) for t in self.tabs
            ],
            selected_index=ids.index(active_tab) if active_tab in ids else None,
            label_type=ft.NavigationRailLabelType.ALL,
            leading=ft.Container(ft.Icon(ft.Icons.SCHOOL, size=32, color="primary"), padding=20),
            min_width=100,
            group_alignment=-0.9,
            bgcolor="surface",
            on_change=self._rail_change,
        )

    def _build_app_bar(self) -> ft.Container:
        user = self.app_state.current_user
        role = self.app_state.role
        role_chip = ft.Container(
            ft.Text(role or "", size=12, color="white"),
            bgcolor=AppTheme.role_color(role),
            border_radius=8,
            padding=ft.padding.symmetric(horizontal=8, vertical=2),
        )
        mail = ft.Row(
            [
                ft.IconButton(
                    ft.Icons.MAIL_OUTLINE,
                    tooltip="Messages",
                    on_click=lambda _: self._select_id("messages"),
                ),
                self.unread_badge,
            ],
            spacing=0,
        )
        dark = self.page.theme_mode == ft.ThemeMode.DARK
        theme_button = ft.IconButton(
            ft.Icons.LIGHT_MODE if dark else ft.Icons.DARK_MODE,
            tooltip="Toggle theme",
            on_click=lambda _: self.toggle_theme(),
        )
        account = ft.PopupMenuButton(
            icon=ft.Icons.ACCOUNT_CIRCLE,
            items=[ft.PopupMenuItem(text="Logout", on_click=lambda _: self.on_logout())],
        )

        return ft.Container(
            ft.Row(
                [
                    ft.Text(TITLE, size=20, weight=ft.FontWeight.BOLD, color="primary"),
                    ft.Container(expand=True),
                    mail,
                    ft.Text(user.username if user else "", weight=ft.FontWeight.W_500),
                    role_chip,
                    theme_button,
                    account,
                ],
            ),
            padding=ft.padding.symmetric(horizontal=20, vertical=10),
            bgcolor="surfaceVariant",
        )

    def set_unread(self, count: int, update: bool = True) -> None:
        self.unread_text.value = badge_text(count)
        self.unread_badge.visible = count > 0
        if update:
            self.unread_badge.update()

    def _select_id(self, tab_id: str) -> None:
        if any(t.id == tab_id for t in self.tabs):
            self.on_select(tab_id)

    def _rail_change(self, e: Any) -> None:
        idx = e.control.selected_index
        if idx is not None and 0 <= idx < len(self.tabs):
            self.on_select(self.tabs[idx].id)
