from collections.abc import Callable

import flet as ft

from src.app_shell.admin.dashboard import AdminDashboardContent
from src.app_shell.admin.resource_screen import ResourceScreen
from src.app_shell.messages import MessagesContent
from src.app_shell.profile import ProfileContent
from src.ui.context import ServiceContext
from src.ui.state import AppState


def build_screen(
    page: ft.Page,
    ctx: ServiceContext,
    state: AppState,
    tab_id: str | None,
    on_read: Callable[[], None] | None = None,
) -> ft.Control:
    """The one screen rendered for the active tab."""
    if tab_id is None:
        return ft.Text("No screens are available for your role.")
    if tab_id == "dashboard":
        return AdminDashboardContent(page, ctx, state)
    if tab_id == "profile":
        return ProfileContent(page, ctx, state)
    if tab_id == "messages":
        return MessagesContent(page, ctx, state, on_read=on_read)
    return ResourceScreen(page, ctx, state, tab_id)
