"""Token store adapters.

Each adapter keeps exactly one value under a fixed key. The Flet client
storage adapter maps to the browser's localStorage when the app runs in web
mode; the file adapter serves desktop and local development runs.
"""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class InMemoryTokenStore:
    """Process-local token storage - suitable for tests."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStore:
    """JSON file holding a single ``{key: token}`` entry."""

    def __init__(self, path: str | Path, key: str = "token") -> None:
        self.path = Path(path)
        self.key = key

    def get(self) -> str | None:
        if not self.path.exists():
            return None
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable token file {self.path}: {e}")
            return None
        token = data.get(self.key) if isinstance(data, dict) else None
        return token or None

    def set(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump({self.key: token}, f)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class ClientStorageTokenStore:
    """Flet ``page.client_storage`` (browser localStorage in web mode)."""

    def __init__(self, page: Any, key: str = "token") -> None:
        self._storage = page.client_storage
        self.key = key

    def get(self) -> str | None:
        value = self._storage.get(self.key)
        return str(value) if value else None

    def set(self, token: str) -> None:
        self._storage.set(self.key, token)

    def clear(self) -> None:
        self._storage.remove(self.key)
