from typing import Protocol


class TokenStorePort(Protocol):
    """Durable home of the single bearer token. Nothing else is persisted."""

    def get(self) -> str | None: ...

    def set(self, token: str) -> None: ...

    def clear(self) -> None: ...
