import json
import logging
from typing import Any

import flet as ft

from src.adapters.http.errors import ApiError
from src.app_shell.profile import flatten_profile, record_table
from src.components.crud import CrudController
from src.rules.models import FieldRule, ResourceSchema
from src.ui.components.stat_card import StatCard
from src.ui.context import ServiceContext
from src.ui.notify import show_message
from src.ui.state import AppState

logger = logging.getLogger(__name__)

# Keys tried, in order, when a cell holds a populated reference.
REFERENCE_LABELS = ("fullName", "name", "courseName", "username", "title", "email", "_id")


def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, dict):
        for key in REFERENCE_LABELS:
            if value.get(key):
                return str(value[key])
        return ""
    if isinstance(value, list):
        return ", ".join(format_cell(v) for v in value[:3]) + (" ..." if len(value) > 3 else "")
    text = str(value)
    # ISO timestamps: keep the date part only.
    if len(text) >= 19 and text[4] == "-" and text[10] == "T":
        return text[:10]
    return text


def split_actions(schema: ResourceSchema) -> tuple[list[str], list[str]]:
    """Return (toolbar actions, per-row actions) by whether the path needs an id."""
    toolbar = [n for n, a in schema.actions.items() if "{id}" not in a.path]
    row = [n for n, a in schema.actions.items() if "{id}" in a.path]
    return toolbar, row


def action_label(name: str) -> str:
    return name.replace("_", " ").capitalize()


def field_control(rule: FieldRule, value: Any, error: str | None) -> ft.Control:
    label = f"{rule.label} *" if rule.required else rule.label
    text = "" if value is None else str(value)
    if rule.choices:
        return ft.Dropdown(
            label=label,
            value=text or None,
            options=[ft.dropdown.Option(c) for c in rule.choices],
            error_text=error,
            data=rule.name,
        )
    return ft.TextField(
        label=label,
        value=text,
        multiline=rule.kind == "textarea",
        min_lines=3 if rule.kind == "textarea" else None,
        max_length=rule.max_length,
        keyboard_type=ft.KeyboardType.NUMBER if rule.kind == "number" else None,
        hint_text="YYYY-MM-DD" if rule.kind == "date" else None,
        error_text=error,
        data=rule.name,
    )


class ResourceScreen(ft.Column):  # type: ignore
    def __init__(self, page: ft.Page, ctx: ServiceContext, state: AppState, name: str) -> None:
        super().__init__(expand=True, scroll=ft.ScrollMode.AUTO, spacing=12)
        self.page = page
        self.ctx = ctx
        self.state = state
        self.schema: ResourceSchema = ctx.rules.resources[name]
        self.controller: CrudController = ctx.controller(name)
        self._mounted = False
        self._toolbar_actions, self._row_actions = split_actions(self.schema)

        self.search = ft.TextField(
            label="Search",
            prefix_icon=ft.Icons.SEARCH,
            width=280,
            on_submit=lambda e: self.controller.set_search(e.control.value),
            visible=self.schema.searchable,
        )
        self.filter_dropdowns = [
            ft.Dropdown(
                label=f.label,
                value=f.all_value,
                width=180,
                options=[ft.dropdown.Option(c) for c in f.choices],
                data=f.name,
                on_change=lambda e: self.controller.set_filter(e.control.data, e.control.value),
            )
            for f in self.schema.filters
        ]
        self.progress = ft.ProgressRing(width=20, height=20, visible=False)
        self.error_text = ft.Text(color="error", visible=False)
        self.table = ft.DataTable(
            columns=[ft.DataColumn(ft.Text(self._column_label(c))) for c in self.schema.columns]
            + [ft.DataColumn(ft.Text("Actions"))],
            rows=[],
        )
        self.empty_text = ft.Text("No records found.", italic=True, visible=False)
        self.page_text = ft.Text()
        self.prev_button = ft.IconButton(
            ft.Icons.CHEVRON_LEFT, on_click=lambda _: self.controller.previous_page()
        )
        self.next_button = ft.IconButton(
            ft.Icons.CHEVRON_RIGHT, on_click=lambda _: self.controller.next_page()
        )

        header_buttons: list[ft.Control] = []
        if self.controller.can_create:
            header_buttons.append(
                ft.FilledButton("New", icon=ft.Icons.ADD, on_click=lambda _: self.open_form())
            )
        for action in self._toolbar_actions:
            header_buttons.append(
                ft.OutlinedButton(
                    action_label(action),
                    on_click=lambda _, a=action: self.open_action(a, None),
                )
            )
        if self.schema.statistics:
            header_buttons.append(
                ft.OutlinedButton("Statistics", icon=ft.Icons.BAR_CHART, on_click=self.show_statistics)
            )
        header_buttons.append(
            ft.OutlinedButton("Export JSON", icon=ft.Icons.DOWNLOAD, on_click=self.export)
        )

        self.controls = [
            ft.Row(
                [
                    ft.Text(self.schema.title, size=24, weight=ft.FontWeight.BOLD),
                    self.progress,
                    ft.Container(expand=True),
                    *header_buttons,
                ],
                wrap=True,
            ),
            ft.Row([self.search, *self.filter_dropdowns], wrap=True),
            self.error_text,
            ft.Row([self.table], scroll=ft.ScrollMode.AUTO),
            self.empty_text,
            ft.Row(
                [self.prev_button, self.page_text, self.next_button],
                alignment=ft.MainAxisAlignment.CENTER,
            ),
        ]
        self.controller.subscribe(self._render)

    # --- lifecycle ---

    def did_mount(self) -> None:
        self._mounted = True
        self.controller.refresh()

    def will_unmount(self) -> None:
        self._mounted = False

    # --- rendering ---

    def _column_label(self, column: str) -> str:
        rule = self.schema.field(column)
        if rule:
            return rule.label
        return "".join(" " + ch if ch.isupper() else ch for ch in column).strip().capitalize()

    def _render(self, controller: CrudController) -> None:
        self.progress.visible = controller.loading
        self.error_text.value = controller.last_error or ""
        self.error_text.visible = bool(controller.last_error)
        self.table.rows = [self._row(item) for item in controller.items]
        self.empty_text.visible = not controller.items and not controller.loading
        self.page_text.value = f"Page {controller.page} of {controller.total_pages}"
        self.prev_button.disabled = not controller.has_previous
        self.next_button.disabled = not controller.has_next
        if self._mounted:
            self.update()

    def _row(self, item: dict[str, Any]) -> ft.DataRow:
        item_id = self.controller.item_id(item)
        buttons: list[ft.Control] = []
        if item_id is not None:
            buttons.append(
                ft.IconButton(
                    ft.Icons.VISIBILITY_OUTLINED,
                    tooltip="View",
                    on_click=lambda _: self.show_detail(item_id),
                )
            )
        if self.controller.can_manage and self.schema.fields:
            buttons.append(
                ft.IconButton(ft.Icons.EDIT, tooltip="Edit", on_click=lambda _: self.open_form(item))
            )
            buttons.append(
                ft.IconButton(
                    ft.Icons.DELETE_OUTLINE,
                    tooltip="Delete",
                    icon_color="error",
                    on_click=lambda _: self.confirm_delete(item_id),
                )
            )
        if self._row_actions:
            buttons.append(
                ft.PopupMenuButton(
                    icon=ft.Icons.MORE_VERT,
                    items=[
                        ft.PopupMenuItem(
                            text=action_label(a),
                            on_click=lambda _, a=a: self.open_action(a, item_id),
                        )
                        for a in self._row_actions
                    ],
                )
            )
        return ft.DataRow(
            cells=[ft.DataCell(ft.Text(format_cell(item.get(c)))) for c in self.schema.columns]
            + [ft.DataCell(ft.Row(buttons, spacing=0))]
        )

    # --- form ---

    def open_form(self, item: dict[str, Any] | None = None) -> None:
        try:
            if item is None:
                self.controller.open_create()
            else:
                self.controller.open_edit(item)
        except (PermissionError, ValueError) as err:
            show_message(self.page, str(err), error=True)
            return
        self._show_form()

    def _show_form(self) -> None:
        form = self.controller.form
        if form is None:
            return
        inputs = [
            field_control(rule, form.values.get(rule.name), form.errors.get(rule.name))
            for rule in self.schema.fields
        ]
        error = ft.Text(self.controller.last_error or "", color="error", visible=False)

        def save(_: Any) -> None:
            for control in inputs:
                self.controller.set_field(control.data, control.value)
            self.controller.last_error = None
            if self.controller.submit():
                self.page.close(dialog)
                show_message(self.page, f"{self.schema.title} saved")
                return
            if self.controller.errors:
                for control in inputs:
                    control.error_text = self.controller.errors.get(control.data)
            error.value = self.controller.last_error or ""
            error.visible = bool(self.controller.last_error)
            dialog.update()

        def cancel(_: Any) -> None:
            self.controller.close_form()
            self.page.close(dialog)

        title = "Edit" if form.is_edit else "New"
        dialog = ft.AlertDialog(
            modal=True,
            title=ft.Text(f"{title} {self.schema.title}"),
            content=ft.Column([*inputs, error], tight=True, scroll=ft.ScrollMode.AUTO, width=460),
            actions=[
                ft.TextButton("Cancel", on_click=cancel),
                ft.FilledButton("Save", on_click=save),
            ],
        )
        self.page.open(dialog)

    # --- detail ---

    def show_detail(self, item_id: str) -> None:
        record = self.controller.detail(item_id)
        if record is None:
            show_message(self.page, self.controller.last_error or "Record not found", error=True)
            return

        dialog = ft.AlertDialog(
            title=ft.Text(f"{self.schema.title} details"),
            content=ft.Column(
                [record_table(flatten_profile(record))],
                tight=True,
                scroll=ft.ScrollMode.AUTO,
                width=520,
            ),
            actions=[ft.TextButton("Close", on_click=lambda _: self.page.close(dialog))],
        )
        self.page.open(dialog)

    # --- delete ---

    def confirm_delete(self, item_id: str | None) -> None:
        if item_id is None:
            return

        def do_delete(_: Any) -> None:
            self.page.close(dialog)
            if self.controller.delete(item_id, confirm=lambda: True):
                show_message(self.page, f"{self.schema.title} deleted")
            else:
                show_message(self.page, self.controller.last_error or "Delete failed", error=True)

        dialog = ft.AlertDialog(
            modal=True,
            title=ft.Text("Confirm delete"),
            content=ft.Text("This record will be permanently removed."),
            actions=[
                ft.TextButton("Cancel", on_click=lambda _: self.page.close(dialog)),
                ft.FilledButton("Delete", on_click=do_delete),
            ],
        )
        self.page.open(dialog)

    # --- extras ---

    def open_action(self, name: str, item_id: str | None) -> None:
        rule = self.schema.actions[name]
        body_field = ft.TextField(
            label="Request body (JSON)",
            value="{}",
            multiline=True,
            min_lines=4,
            visible=rule.method != "GET",
        )
        result = ft.Text(selectable=True, font_family="monospace", size=12)

        def run(_: Any) -> None:
            try:
                body = json.loads(body_field.value or "{}") if rule.method != "GET" else None
            except json.JSONDecodeError as err:
                body_field.error_text = f"Invalid JSON: {err.msg}"
                dialog.update()
                return
            body_field.error_text = None
            try:
                response = self.controller.service.action(name, item_id, body)
            except ApiError as err:
                logger.error(f"Action {name} on {self.schema.name} failed: {err}")
                result.value = err.message
                result.color = "error"
                dialog.update()
                return
            result.value = json.dumps(response, indent=2, default=str)
            result.color = None
            dialog.update()
            if rule.method != "GET":
                self.controller.refresh()

        dialog = ft.AlertDialog(
            title=ft.Text(action_label(name)),
            content=ft.Column([body_field, result], tight=True, scroll=ft.ScrollMode.AUTO, width=460),
            actions=[
                ft.TextButton("Close", on_click=lambda _: self.page.close(dialog)),
                ft.FilledButton("Run", on_click=run),
            ],
        )
        self.page.open(dialog)

    def show_statistics(self, _: Any) -> None:
        try:
            stats = self.controller.service.statistics()
        except ApiError as err:
            logger.error(f"Error loading {self.schema.name} statistics: {err}")
            show_message(self.page, err.message, error=True)
            return

        data = stats.get("data", stats) if isinstance(stats, dict) else stats
        numbers = (
            {k: v for k, v in data.items() if isinstance(v, (int, float)) and not isinstance(v, bool)}
            if isinstance(data, dict)
            else {}
        )
        content: list[ft.Control] = [
            ft.Row([StatCard(self._column_label(k), v, width=150) for k, v in numbers.items()], wrap=True)
        ]
        content.append(ft.Text(json.dumps(data, indent=2, default=str), selectable=True, size=12))

        dialog = ft.AlertDialog(
            title=ft.Text(f"{self.schema.title} statistics"),
            content=ft.Column(content, tight=True, scroll=ft.ScrollMode.AUTO, width=520),
            actions=[ft.TextButton("Close", on_click=lambda _: self.page.close(dialog))],
        )
        self.page.open(dialog)

    def export(self, _: Any) -> None:
        self.page.set_clipboard(self.controller.export_json())
        show_message(self.page, f"Copied {len(self.controller.items)} {self.schema.title.lower()} as JSON")
