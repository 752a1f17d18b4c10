import logging
from collections.abc import Callable
from typing import Any

import flet as ft

from src.adapters.http.errors import ApiError
from src.components.messaging import PRIORITIES
from src.ui.context import ServiceContext
from src.ui.notify import show_message
from src.ui.state import AppState

logger = logging.getLogger(__name__)


def sender_name(message: dict[str, Any]) -> str:
    sender = message.get("senderId")
    if isinstance(sender, dict):
        return sender.get("username") or sender.get("email") or "Unknown"
    return "Unknown"


def is_mine(message: dict[str, Any], user_id: str) -> bool:
    sender = message.get("senderId")
    sender_id = sender.get("_id") if isinstance(sender, dict) else sender
    return str(sender_id) == user_id


class MessagesContent(ft.Row):  # type: ignore
    """Message center: contacts, conversation thread, compose box and unread list."""

    def __init__(
        self,
        page: ft.Page,
        ctx: ServiceContext,
        state: AppState,
        on_read: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(expand=True, vertical_alignment=ft.CrossAxisAlignment.START)
        self.page = page
        self.ctx = ctx
        self.state = state
        self.on_read = on_read
        self.selected: dict[str, Any] | None = None

        self.contacts = ft.ListView(expand=True, spacing=2)
        self.unread_list = ft.Column(spacing=2)
        self.thread = ft.ListView(expand=True, spacing=8, auto_scroll=True)
        self.thread_title = ft.Text("Select a contact", size=18, weight=ft.FontWeight.BOLD)

        self.subject = ft.TextField(label="Subject", dense=True)
        self.message_field = ft.TextField(label="Message", multiline=True, min_lines=2, max_lines=5)
        self.priority = ft.Dropdown(
            label="Priority",
            value="normal",
            width=140,
            dense=True,
            options=[ft.dropdown.Option(p) for p in PRIORITIES],
        )
        self.send_button = ft.FilledButton(
            "Send", icon=ft.Icons.SEND, on_click=self.send, disabled=True
        )

        self.controls = [
            ft.Container(
                content=ft.Column(
                    [
                        ft.Text("Unread", size=16, weight=ft.FontWeight.BOLD),
                        self.unread_list,
                        ft.Divider(),
                        ft.Text("Contacts", size=16, weight=ft.FontWeight.BOLD),
                        self.contacts,
                    ],
                    expand=True,
                ),
                width=300,
                padding=10,
            ),
            ft.VerticalDivider(width=1),
            ft.Container(
                content=ft.Column(
                    [
                        self.thread_title,
                        ft.Divider(),
                        self.thread,
                        ft.Row([self.subject, self.priority]),
                        self.message_field,
                        ft.Row([self.send_button], alignment=ft.MainAxisAlignment.END),
                    ],
                    expand=True,
                ),
                expand=True,
                padding=10,
            ),
        ]

    def did_mount(self) -> None:
        self.load_contacts()
        self.load_unread()

    # --- loading ---

    def load_contacts(self) -> None:
        try:
            users = self.ctx.messages.users()
        except ApiError as e:
            logger.error(f"Error fetching contacts: {e}")
            show_message(self.page, "Could not load contacts", error=True)
            return
        self.contacts.controls = [
            ft.ListTile(
                leading=ft.Icon(ft.Icons.PERSON),
                title=ft.Text(u.get("username", "")),
                subtitle=ft.Text(u.get("role", "")),
                on_click=lambda _, u=u: self.open_conversation(u),
            )
            for u in users
        ]
        self.update()

    def load_unread(self) -> None:
        try:
            summary = self.ctx.messages.unread()
        except ApiError as e:
            logger.error(f"Error fetching unread messages: {e}")
            return
        self.unread_list.controls = [
            ft.ListTile(
                dense=True,
                title=ft.Text(m.get("subject") or "(no subject)"),
                subtitle=ft.Text(sender_name(m)),
                trailing=ft.IconButton(
                    ft.Icons.MARK_EMAIL_READ,
                    tooltip="Mark as read",
                    on_click=lambda _, m=m: self.mark_read(m),
                ),
            )
            for m in summary.messages
        ] or [ft.Text("No unread messages", italic=True)]
        self.update()

    def open_conversation(self, user: dict[str, Any]) -> None:
        self.selected = user
        self.thread_title.value = f"Conversation with {user.get('username', '')}"
        self.send_button.disabled = False
        try:
            messages = self.ctx.messages.conversation(str(user.get("_id")))
        except ApiError as e:
            logger.error(f"Error fetching conversation: {e}")
            show_message(self.page, "Could not load conversation", error=True)
            return

        me = self.state.current_user.id if self.state.current_user else ""
        self.thread.controls = [self._bubble(m, is_mine(m, me)) for m in messages]
        self.update()
        # Opening a thread marks its incoming messages read server-side.
        self.load_unread()
        if self.on_read:
            self.on_read()

    def _bubble(self, message: dict[str, Any], mine: bool) -> ft.Control:
        return ft.Row(
            [
                ft.Container(
                    content=ft.Column(
                        [
                            ft.Text(message.get("subject", ""), weight=ft.FontWeight.BOLD, size=13),
                            ft.Text(message.get("content", "")),
                            ft.Text(
                                f"{message.get('priority', 'normal')} - {str(message.get('createdAt', ''))[:16]}",
                                size=11,
                                color="onSurfaceVariant",
                            ),
                        ],
                        tight=True,
                        spacing=2,
                    ),
                    bgcolor="primaryContainer" if mine else "surfaceVariant",
                    border_radius=10,
                    padding=10,
                    width=420,
                )
            ],
            alignment=ft.MainAxisAlignment.END if mine else ft.MainAxisAlignment.START,
        )

    # --- actions ---

    def send(self, _: Any) -> None:
        if not self.selected:
            return
        try:
            self.ctx.messages.send(
                str(self.selected.get("_id")),
                self.subject.value or "",
                self.message_field.value or "",
                self.priority.value or "normal",
            )
        except ValueError as e:
            show_message(self.page, str(e), error=True)
            return
        except ApiError as e:
            logger.error(f"Error sending message: {e}")
            show_message(self.page, e.message, error=True)
            return

        self.subject.value = ""
        self.message_field.value = ""
        show_message(self.page, "Message sent")
        self.open_conversation(self.selected)

    def mark_read(self, message: dict[str, Any]) -> None:
        try:
            self.ctx.messages.mark_read(str(message.get("_id")))
        except ApiError as e:
            logger.error(f"Error marking message read: {e}")
            return
        self.load_unread()
        if self.on_read:
            self.on_read()
