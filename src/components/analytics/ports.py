from typing import Any, Protocol


class AnalyticsClientPort(Protocol):
    def get(self, path: str, params: dict[str, Any] | None = None) -> Any: ...
