from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.domain.entities import Page
from src.domain.query import build_list_params
from src.rules.models import FieldRule, ResourceSchema


@dataclass(frozen=True)
class ListQuery:
    page: int = 1
    limit: int = 10
    search: str = ""
    filters: dict[str, Any] = field(default_factory=dict)

    def to_params(self, schema: ResourceSchema | None = None) -> dict[str, Any]:
        return build_list_params(self.page, self.limit, self.search, self.filters, schema)


@dataclass
class FormState:
    """Modal form bound to one create/edit operation."""

    values: dict[str, Any] = field(default_factory=dict)
    editing_id: str | None = None
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_edit(self) -> bool:
        return self.editing_id is not None


def item_id(schema: ResourceSchema, item: dict[str, Any]) -> str | None:
    """Resolve an item's identifier, unwrapping populated references."""
    value = item.get(schema.id_field)
    if isinstance(value, dict):
        value = value.get("_id") or value.get("id")
    if value is None and schema.id_field != "_id":
        value = item.get("_id")
    return str(value) if value is not None else None


def form_value(rule: FieldRule, value: Any) -> Any:
    """Edit-form value: populated references become their id, timestamps a date."""
    if value is None:
        return ""
    if isinstance(value, dict):
        ref = value.get("_id") or value.get("id")
        return "" if ref is None else str(ref)
    if rule.kind == "date" and isinstance(value, str) and "T" in value:
        return value[:10]
    return value


__all__ = ["FormState", "ListQuery", "Page", "form_value", "item_id"]
