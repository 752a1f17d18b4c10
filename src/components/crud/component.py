"""
Generic resource CRUD: an HTTP-backed service and the headless screen controller.

Every feature screen is one ResourceSchema from rules.yaml. The controller owns
query, form and list state; Flet views only render it.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from src.adapters.http.errors import ApiError
from src.domain.entities import Page
from src.domain.policy import can_manage
from src.domain.query import normalize_page
from src.domain.validation import clean_form, validate_form
from src.rules.models import ResourceSchema

from .models import FormState, ListQuery, form_value, item_id
from .ports import ResourceClientPort, ResourceServicePort

logger = logging.getLogger(__name__)

CrudListener = Callable[["CrudController"], None]

ENVELOPE_KEYS = ("message", "success")


class ResourceService:
    def __init__(self, client: ResourceClientPort, schema: ResourceSchema) -> None:
        self.client = client
        self.schema = schema

    def _item_path(self, item_id: str) -> str:
        return f"{self.schema.path}/{item_id}"

    def list(self, query: ListQuery, role: str | None = None) -> Page:
        path = self.schema.list_paths.get(role, self.schema.path) if role else self.schema.path
        payload = self.client.request("GET", path, params=query.to_params(self.schema))
        return normalize_page(payload, self.schema.items_key, query.page)

    def get(self, item_id: str) -> Any:
        payload = self.client.request("GET", self._item_path(item_id))
        if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
            return payload["data"]
        return payload

    def create(self, data: dict[str, Any]) -> Any:
        return self.client.request("POST", self.schema.path, body=data)

    def update(self, item_id: str, data: dict[str, Any]) -> Any:
        return self.client.request("PUT", self._item_path(item_id), body=data)

    def delete(self, item_id: str) -> Any:
        return self.client.request("DELETE", self._item_path(item_id))

    def statistics(self) -> Any:
        if not self.schema.statistics:
            raise ValueError(f"{self.schema.name} defines no statistics endpoint")
        return self.client.request("GET", self.schema.statistics)

    def action(
        self,
        name: str,
        item_id: str | None = None,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Invoke a schema-declared extra endpoint, e.g. ``review`` on leave."""
        rule = self.schema.actions.get(name)
        if rule is None:
            raise KeyError(f"{self.schema.name} has no action {name!r}")
        rel = rule.path
        if "{id}" in rel:
            if item_id is None:
                raise ValueError(f"Action {name!r} requires an item id")
            rel = rel.replace("{id}", str(item_id))
        path = f"{self.schema.path}/{rel.lstrip('/')}" if rel else self.schema.path
        return self.client.request(rule.method, path, body=body, params=params)


class CrudController:
    """Headless state for one resource screen."""

    def __init__(
        self,
        service: ResourceServicePort,
        schema: ResourceSchema | None = None,
        role: str | None = None,
    ) -> None:
        self.service = service
        self.schema = schema or service.schema
        self.role = role

        self.items: list[dict[str, Any]] = []
        self.total_pages = 1
        self.total: int | None = None
        self.page = 1
        self.search = ""
        self.filters: dict[str, Any] = {
            f.name: f.all_value for f in self.schema.filters
        }
        self.loading = False
        self.form: FormState | None = None
        self.last_error: str | None = None

        self._listeners: list[CrudListener] = []

    # -- state accessors --

    @property
    def can_manage(self) -> bool:
        return can_manage(self.schema, self.role)

    @property
    def can_create(self) -> bool:
        return self.can_manage and self.schema.creatable and bool(self.schema.fields)

    @property
    def editing_id(self) -> str | None:
        return self.form.editing_id if self.form else None

    @property
    def errors(self) -> dict[str, str]:
        return self.form.errors if self.form else {}

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def item_id(self, item: dict[str, Any]) -> str | None:
        return item_id(self.schema, item)

    def query(self) -> ListQuery:
        return ListQuery(
            page=self.page,
            limit=self.schema.page_size,
            search=self.search,
            filters=dict(self.filters),
        )

    # -- observers --

    def subscribe(self, listener: CrudListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"CRUD listener failed for {self.schema.name}: {e}")

    # -- list --

    def refresh(self) -> bool:
        self.loading = True
        self._notify()
        try:
            result = self.service.list(self.query(), self.role)
        except (ApiError, ValueError) as e:
            logger.error(f"Error fetching {self.schema.name}: {e}")
            self.last_error = str(e)
            return False
        else:
            self.items = list(result.items)
            self.total_pages = max(1, result.total_pages)
            self.total = result.total
            self.last_error = None
            return True
        finally:
            self.loading = False
            self._notify()

    def set_search(self, text: str) -> bool:
        self.search = text or ""
        self.page = 1
        return self.refresh()

    def set_filter(self, name: str, value: Any) -> bool:
        if self.schema.filters and name not in {f.name for f in self.schema.filters}:
            raise KeyError(f"{self.schema.name} has no filter {name!r}")
        self.filters[name] = value
        self.page = 1
        return self.refresh()

    def go_to_page(self, page: int) -> bool:
        self.page = min(max(1, page), self.total_pages)
        return self.refresh()

    def next_page(self) -> bool:
        return self.go_to_page(self.page + 1)

    def previous_page(self) -> bool:
        return self.go_to_page(self.page - 1)

    # -- form --

    def open_create(self) -> FormState:
        if not self.schema.creatable:
            raise PermissionError(f"{self.schema.title} cannot be created from this screen")
        self.form = FormState(values={f.name: "" for f in self.schema.fields})
        self._notify()
        return self.form

    def open_edit(self, item: dict[str, Any]) -> FormState:
        editing_id = self.item_id(item)
        if editing_id is None:
            raise ValueError(f"{self.schema.title} record has no {self.schema.id_field}; cannot edit")
        values = {f.name: form_value(f, item.get(f.name)) for f in self.schema.fields}
        self.form = FormState(values=values, editing_id=editing_id)
        self._notify()
        return self.form

    def set_field(self, name: str, value: Any) -> None:
        if self.form is None:
            raise ValueError("No form is open")
        self.form.values[name] = value

    def close_form(self) -> None:
        self.form = None
        self._notify()

    def submit(self) -> bool:
        if self.form is None:
            raise ValueError("No form is open")

        errors = validate_form(self.schema, self.form.values)
        if errors:
            self.form.errors = errors
            self._notify()
            return False

        data = clean_form(self.schema, self.form.values, clear_blank=self.form.is_edit)
        try:
            if self.form.is_edit:
                self.service.update(self.form.editing_id, data)
            else:
                self.service.create(data)
        except ApiError as e:
            logger.error(f"Error saving {self.schema.name}: {e}")
            self.last_error = e.message
            self._notify()
            return False

        self.form = None
        self.refresh()
        return True

    # -- detail --

    def detail(self, item_id: str) -> dict[str, Any] | None:
        """Fetch one record for the read-only detail panel."""
        try:
            record = self.service.get(item_id)
        except ApiError as e:
            logger.error(f"Error loading {self.schema.name} {item_id}: {e}")
            self.last_error = e.message
            self._notify()
            return None
        if not isinstance(record, dict):
            return None
        # {"message": ..., "student": {...}} envelopes
        body = [v for k, v in record.items() if k not in ENVELOPE_KEYS]
        if len(body) == 1 and isinstance(body[0], dict):
            return body[0]
        return record

    # -- delete / export --

    def delete(self, item_id: str, confirm: Callable[[], bool]) -> bool:
        if not confirm():
            return False
        try:
            self.service.delete(item_id)
        except ApiError as e:
            logger.error(f"Error deleting {self.schema.name} {item_id}: {e}")
            self.last_error = e.message
            self._notify()
            return False
        self.refresh()
        return True

    def export_json(self) -> str:
        return json.dumps(self.items, indent=2, default=str)
