from typing import Any


class ApiError(Exception):
    """Non-2xx response (or transport failure) from the backend."""

    def __init__(
        self,
        status_code: int | None,
        message: str,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code!r}, message={self.message!r})"


class UnauthorizedError(ApiError):
    """401 from the backend. The stored token has already been cleared."""


class ApiConnectionError(ApiError):
    """The request never produced a response."""

    def __init__(self, message: str) -> None:
        super().__init__(None, message)
