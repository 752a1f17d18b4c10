"""
Backend HTTP client.

Single point of dispatch to the REST backend:
- every request is JSON and carries ``Authorization: Bearer <token>`` when a
  token is stored;
- a 401 clears the stored token and notifies ``on_unauthorized`` subscribers
  before the caller sees ``UnauthorizedError``;
- every other error status is raised unchanged as ``ApiError``.

No retries and no backoff.
"""

import logging
from collections.abc import Callable
from typing import Any

import httpx

from src.adapters.http.errors import ApiConnectionError, ApiError, UnauthorizedError
from src.ports.token_store import TokenStorePort

logger = logging.getLogger(__name__)

UnauthorizedListener = Callable[[], None]


class ApiClient:
    def __init__(
        self,
        base_url: str,
        token_store: TokenStorePort,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token_store = token_store
        self._listeners: list[UnauthorizedListener] = []

        client_kwargs: dict[str, Any] = {
            "base_url": self.base_url,
            "headers": {"Content-Type": "application/json"},
            "event_hooks": {
                "request": [self._attach_token],
                "response": [self._check_unauthorized],
            },
        }
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        if transport is not None:
            client_kwargs["transport"] = transport

        self._http = httpx.Client(**client_kwargs)

    # --- Subscriptions ---

    def on_unauthorized(self, listener: UnauthorizedListener) -> Callable[[], None]:
        """Register a callback fired after a 401 has cleared the token."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Hooks ---

    def _attach_token(self, request: httpx.Request) -> None:
        token = self.token_store.get()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        elif "Authorization" in request.headers:
            del request.headers["Authorization"]

    def _check_unauthorized(self, response: httpx.Response) -> None:
        if response.status_code != 401:
            return
        logger.warning(
            f"401 from {response.request.method} {response.request.url.path}; clearing session"
        )
        self.token_store.clear()
        for listener in list(self._listeners):
            try:
                listener()
            except Exception as e:
                logger.error(f"Unauthorized listener failed: {e}")

    # --- Dispatch ---

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        clean_params = (
            {k: v for k, v in params.items() if v is not None} if params else None
        )
        try:
            response = self._http.request(
                method.upper(),
                path,
                json=body,
                params=clean_params,
            )
        except httpx.TransportError as e:
            raise ApiConnectionError(f"Could not reach backend: {e}") from e

        payload = _decode(response)

        if response.status_code == 401:
            raise UnauthorizedError(401, _message(payload, response), payload)
        if response.is_error:
            raise ApiError(response.status_code, _message(payload, response), payload)

        return payload

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: Any = None) -> Any:
        return self.request("POST", path, body=body)

    def put(self, path: str, body: Any = None) -> Any:
        return self.request("PUT", path, body=body)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _message(payload: Any, response: httpx.Response) -> str:
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.reason_phrase or f"HTTP {response.status_code}"
