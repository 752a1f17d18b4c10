from collections.abc import Callable
from typing import Any, Protocol

from src.ports.token_store import TokenStorePort


class ApiClientPort(Protocol):
    """The slice of the HTTP client the session provider depends on."""

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any: ...

    def post(self, path: str, body: Any = None) -> Any: ...

    def on_unauthorized(self, listener: Callable[[], None]) -> Callable[[], None]: ...


__all__ = ["ApiClientPort", "TokenStorePort"]
