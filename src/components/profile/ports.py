from collections.abc import Callable
from typing import Any, Protocol

from src.domain.entities import SessionSnapshot, User


class ProfileClientPort(Protocol):
    def post(self, path: str, body: Any = None) -> Any: ...

    def put(self, path: str, body: Any = None) -> Any: ...


class ProfileSessionPort(Protocol):
    @property
    def current_user(self) -> User | None: ...

    def hydrate(self) -> SessionSnapshot: ...

    def subscribe(self, listener: Callable[[SessionSnapshot], None]) -> Callable[[], None]: ...
