"""In-memory resource backend for screens that have no REST endpoints yet."""

from __future__ import annotations

import copy
import math
from datetime import UTC, datetime
from threading import Lock
from typing import Any
from uuid import uuid4

from src.adapters.http.errors import ApiError
from src.domain.entities import Page
from src.rules.models import ResourceSchema

from .models import ListQuery


class MemoryResourceService:
    def __init__(
        self, schema: ResourceSchema, seed: list[dict[str, Any]] | None = None
    ) -> None:
        self.schema = schema
        self._items: list[dict[str, Any]] = []
        self._lock = Lock()
        for row in schema.seed if seed is None else seed:
            self._insert(row)

    def _insert(self, data: dict[str, Any]) -> dict[str, Any]:
        item = copy.deepcopy(data)
        item.setdefault(self.schema.id_field, uuid4().hex)
        item.setdefault("createdAt", datetime.now(UTC).isoformat())
        self._items.append(item)
        return item

    def _find(self, item_id: str) -> dict[str, Any]:
        for item in self._items:
            if str(item.get(self.schema.id_field)) == str(item_id):
                return item
        raise ApiError(404, f"{self.schema.title} not found")

    def _matches(self, item: dict[str, Any], query: ListQuery) -> bool:
        if query.search:
            needle = query.search.strip().lower()
            haystack = " ".join(str(v) for v in item.values() if isinstance(v, (str, int)))
            if needle not in haystack.lower():
                return False
        params = query.to_params(self.schema)
        for f in self.schema.filters:
            if f.name in params and str(item.get(f.name)) != str(params[f.name]):
                return False
        return True

    def list(self, query: ListQuery, role: str | None = None) -> Page:
        with self._lock:
            rows = [copy.deepcopy(i) for i in self._items if self._matches(i, query)]
        limit = max(1, query.limit)
        total_pages = max(1, math.ceil(len(rows) / limit))
        page = min(max(1, query.page), total_pages)
        start = (page - 1) * limit
        return Page(
            items=rows[start : start + limit],
            total_pages=total_pages,
            current_page=page,
            total=len(rows),
        )

    def get(self, item_id: str) -> dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._find(item_id))

    def create(self, data: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._insert(data))

    def update(self, item_id: str, data: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            item = self._find(item_id)
            item.update({k: v for k, v in data.items() if k != self.schema.id_field})
            return copy.deepcopy(item)

    def delete(self, item_id: str) -> dict[str, Any]:
        with self._lock:
            item = self._find(item_id)
            self._items.remove(item)
        return {"message": f"{self.schema.title} deleted successfully"}

    def statistics(self) -> dict[str, Any]:
        with self._lock:
            stats: dict[str, Any] = {"total": len(self._items)}
            for f in self.schema.filters:
                counts: dict[str, int] = {}
                for item in self._items:
                    key = str(item.get(f.name, ""))
                    counts[key] = counts.get(key, 0) + 1
                stats[f.name] = counts
        return stats

    def action(
        self,
        name: str,
        item_id: str | None = None,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        raise KeyError(f"{self.schema.name} has no action {name!r}")
