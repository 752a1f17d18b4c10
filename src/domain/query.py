from collections.abc import Mapping
from typing import Any

from src.domain.entities import Page
from src.rules.models import ResourceSchema


def build_list_params(
    page: int,
    limit: int,
    search: str | None = None,
    filters: Mapping[str, Any] | None = None,
    schema: ResourceSchema | None = None,
) -> dict[str, Any]:
    """
    Assemble list query parameters.
    Empty search, None values and "all" filter sentinels are left out.
    """
    params: dict[str, Any] = {"page": max(1, page), "limit": limit}

    if search and search.strip():
        params["search"] = search.strip()

    sentinels = {f.name: f.all_value for f in schema.filters} if schema else {}

    for name, value in (filters or {}).items():
        if value is None or value == "":
            continue
        if value == sentinels.get(name, "All"):
            continue
        params[name] = value

    return params


def normalize_page(payload: Any, items_key: str, page: int = 1) -> Page:
    """Accept the list shapes the backend returns and produce a Page."""
    if payload is None:
        return Page(current_page=page)

    if isinstance(payload, list):
        return Page(items=payload, total_pages=1, current_page=page, total=len(payload))

    if not isinstance(payload, dict):
        raise ValueError(f"Unexpected list payload: {type(payload).__name__}")

    body = payload
    data = payload.get("data")
    if isinstance(data, list):
        return Page(items=data, total_pages=1, current_page=page, total=len(data))
    if isinstance(data, dict):
        body = data

    items = body.get(items_key)
    if items is None:
        items = body.get("items", [])

    pagination = body.get("pagination") or {}
    total_pages = pagination.get("totalPages", body.get("totalPages", 1))
    current = pagination.get("currentPage", body.get("currentPage", page))
    total = pagination.get("totalItems", body.get("total"))

    return Page(
        items=list(items),
        total_pages=max(1, int(total_pages or 1)),
        current_page=int(current or page),
        total=total,
    )
