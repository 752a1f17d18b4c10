from typing import Any, Protocol

from src.domain.entities import Page
from src.rules.models import ResourceSchema

from .models import ListQuery


class ResourceClientPort(Protocol):
    """HTTP dispatch used by ResourceService."""

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any: ...


class ResourceServicePort(Protocol):
    """Backend-agnostic CRUD surface a screen controller drives."""

    schema: ResourceSchema

    def list(self, query: ListQuery, role: str | None = None) -> Page: ...

    def get(self, item_id: str) -> Any: ...

    def create(self, data: dict[str, Any]) -> Any: ...

    def update(self, item_id: str, data: dict[str, Any]) -> Any: ...

    def delete(self, item_id: str) -> Any: ...

    def statistics(self) -> Any: ...

    def action(
        self,
        name: str,
        item_id: str | None = None,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any: ...
