"""
Session component - authenticated identity and bearer token lifecycle.

States: loading -> {authenticated, unauthenticated}; authenticated ->
unauthenticated on logout or a 401 observed by the HTTP client.

Invariants:
- A token is stored iff a login/registration succeeded and no logout or
  expiry happened since.
- Only SessionProvider mutates session state; observers receive whole
  SessionSnapshot values.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from threading import Lock
from typing import Any

from pydantic import ValidationError

from src.adapters.http.errors import ApiError, UnauthorizedError
from src.domain.entities import AuthPayload, SessionSnapshot, SessionStatus, User

from .models import AuthError, LoginInput, RegisterInput
from .ports import ApiClientPort, TokenStorePort

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionSnapshot], None]

LOGIN_PATH = "/auth/login"
REGISTER_PATH = "/auth/register"
ME_PATH = "/auth/me"


class SessionProvider:
    def __init__(self, client: ApiClientPort, token_store: TokenStorePort) -> None:
        self.client = client
        self.token_store = token_store
        self._snapshot = SessionSnapshot(status="loading")
        self._listeners: list[SessionListener] = []
        self._lock = Lock()
        self._detach = client.on_unauthorized(self._on_unauthorized)

    # --- Read side ---

    @property
    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    @property
    def status(self) -> SessionStatus:
        return self._snapshot.status

    @property
    def current_user(self) -> User | None:
        return self._snapshot.user

    @property
    def is_loading(self) -> bool:
        return self._snapshot.status == "loading"

    @property
    def is_authenticated(self) -> bool:
        return self._snapshot.is_authenticated

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Transitions ---

    def hydrate(self) -> SessionSnapshot:
        """Exchange a previously stored token for a fresh identity."""
        self._replace(SessionSnapshot(status="loading"))

        if not self.token_store.get():
            self._replace(SessionSnapshot(status="unauthenticated"))
            return self._snapshot

        try:
            payload = self.client.get(ME_PATH)
            body = payload.get("user", payload) if isinstance(payload, Mapping) else payload
            user = User.model_validate(body)
        except (UnauthorizedError, ValidationError) as e:
            logger.info(f"Stored session rejected: {e}")
            self.token_store.clear()
            self._replace(SessionSnapshot(status="unauthenticated"))
            return self._snapshot
        except ApiError as e:
            # Outage or server error; the token stays for the next hydrate.
            logger.warning(f"Could not restore session: {e}")
            self._replace(SessionSnapshot(status="unauthenticated"))
            return self._snapshot

        self._replace(SessionSnapshot(status="authenticated", user=user))
        return self._snapshot

    def login(self, email: str, password: str) -> User:
        inp = LoginInput(email=email, password=password)
        self._check(inp.validate())
        return self._authenticate(
            LOGIN_PATH,
            {"email": inp.email.strip(), "password": inp.password},
            fallback="Login failed",
        )

    def register(self, user_data: RegisterInput | Mapping[str, Any]) -> User:
        inp = user_data if isinstance(user_data, RegisterInput) else RegisterInput.from_mapping(user_data)
        self._check(inp.validate())
        return self._authenticate(REGISTER_PATH, inp.to_payload(), fallback="Registration failed")

    def logout(self) -> None:
        """Synchronous; no backend round-trip is awaited."""
        self.token_store.clear()
        self._replace(SessionSnapshot(status="unauthenticated"))
        logger.info("Logged out")

    def close(self) -> None:
        self._detach()
        self._listeners.clear()

    # --- Internals ---

    def _authenticate(self, path: str, body: dict[str, Any], fallback: str) -> User:
        try:
            payload = self.client.post(path, body)
            auth = AuthPayload.model_validate(payload)
        except ApiError as e:
            self._fail()
            message = e.payload.get("message") if isinstance(e.payload, Mapping) else None
            raise AuthError(message or fallback) from e
        except ValidationError as e:
            self._fail()
            raise AuthError(fallback) from e

        self.token_store.set(auth.token)
        self._replace(SessionSnapshot(status="authenticated", user=auth.user))
        logger.info(f"Authenticated {auth.user.email} as {auth.user.role}")
        return auth.user

    def _check(self, error: str | None) -> None:
        """Reject invalid input before any request is made."""
        if error:
            self._fail()
            raise AuthError(error)

    def _fail(self) -> None:
        self.token_store.clear()
        self._replace(SessionSnapshot(status="unauthenticated"))

    def _on_unauthorized(self) -> None:
        # Token is already cleared by the client.
        if self._snapshot.status != "unauthenticated":
            logger.warning("Session expired; returning to login")
        self._replace(SessionSnapshot(status="unauthenticated"))

    def _replace(self, snapshot: SessionSnapshot) -> None:
        with self._lock:
            if snapshot == self._snapshot:
                return
            self._snapshot = snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Session listener failed: {e}")
