from typing import Any

import flet as ft

from src.components.profile import PROFILE_FIELDS, ProfileEditor
from src.ui.context import ServiceContext
from src.ui.notify import show_message
from src.ui.state import AppState


def flatten_profile(profile: dict[str, Any] | None, prefix: str = "") -> list[tuple[str, str]]:
    """Nested student profile as (label, value) rows, e.g. familyInfo.city."""
    rows: list[tuple[str, str]] = []
    for key, value in (profile or {}).items():
        if key.startswith("_") or key in ("__v", "userId"):
            continue
        label = f"{prefix}{key}"
        if isinstance(value, dict):
            rows.extend(flatten_profile(value, prefix=f"{label}."))
        elif isinstance(value, list):
            rows.append((label, f"{len(value)} entries"))
        elif value not in (None, ""):
            rows.append((label, str(value)))
    return rows


def record_table(rows: list[tuple[str, str]]) -> ft.DataTable:
    return ft.DataTable(
        columns=[ft.DataColumn(ft.Text("Field")), ft.DataColumn(ft.Text("Value"))],
        rows=[ft.DataRow(cells=[ft.DataCell(ft.Text(k)), ft.DataCell(ft.Text(v))]) for k, v in rows],
    )


class ProfileContent(ft.Column):  # type: ignore
    """My Profile: read-only until Edit (or Create Profile) is pressed."""

    def __init__(self, page: ft.Page, ctx: ServiceContext, state: AppState) -> None:
        super().__init__(expand=True, scroll=ft.ScrollMode.AUTO, spacing=12)
        self.page = page
        self.ctx = ctx
        self.state = state
        self.editor: ProfileEditor = ctx.profile_editor()
        self.editing = False
        self.inputs: list[ft.Control] = []
        self._render()

    def _header(self) -> list[ft.Control]:
        user = self.state.current_user
        return [
            ft.Text("My Profile", size=28, weight=ft.FontWeight.BOLD, color="primary"),
            ft.Divider(),
            ft.ListTile(
                leading=ft.Icon(ft.Icons.ACCOUNT_CIRCLE, size=40),
                title=ft.Text(user.username if user else "", weight=ft.FontWeight.BOLD),
                subtitle=ft.Text(user.email if user else ""),
            ),
        ]

    def _render(self) -> None:
        if self.state.current_user is None:
            self.controls = [ft.Text("Not signed in.")]
            return
        if self.editing:
            self.controls = [*self._header(), *self._form()]
        elif self.editor.has_profile:
            self.controls = [
                *self._header(),
                ft.Row([ft.FilledButton("Edit Profile", icon=ft.Icons.EDIT, on_click=self._edit)]),
                record_table(flatten_profile(self.editor.profile)),
            ]
        else:
            self.controls = [
                *self._header(),
                ft.Text("Complete your student profile to access all features.", italic=True),
                ft.Row([ft.FilledButton("Create Profile", icon=ft.Icons.ADD, on_click=self._edit)]),
            ]

    def _form(self) -> list[ft.Control]:
        values = self.editor.values()
        self.inputs = []
        for rule in PROFILE_FIELDS:
            label = f"{rule.label} *" if rule.required else rule.label
            error = self.editor.errors.get(rule.name)
            if rule.choices:
                control: ft.Control = ft.Dropdown(
                    label=label,
                    value=values[rule.name] or None,
                    options=[ft.dropdown.Option(c) for c in rule.choices],
                    error_text=error,
                    data=rule.name,
                    width=420,
                )
            else:
                control = ft.TextField(
                    label=label, value=values[rule.name], error_text=error, data=rule.name, width=420
                )
            self.inputs.append(control)

        error_text = ft.Text(self.editor.last_error or "", color="error", visible=bool(self.editor.last_error))
        return [
            *self.inputs,
            error_text,
            ft.Row(
                [
                    ft.TextButton("Cancel", on_click=self._cancel),
                    ft.FilledButton("Save", on_click=self._save),
                ]
            ),
        ]

    def _refresh(self) -> None:
        self._render()
        self.update()

    def _edit(self, _: Any) -> None:
        self.editing = True
        self._refresh()

    def _cancel(self, _: Any) -> None:
        self.editing = False
        self.editor.errors = {}
        self._refresh()

    def _save(self, _: Any) -> None:
        values = {c.data: c.value or "" for c in self.inputs}
        if not self.editor.save(values):
            for control in self.inputs:
                control.error_text = self.editor.errors.get(control.data)
            if self.editor.last_error:
                show_message(self.page, self.editor.last_error, error=True)
            self.update()
            return
        self.editing = False
        show_message(self.page, "Profile saved")
        # The hydrate inside save() re-renders the home view through the router.
