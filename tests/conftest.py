import json
from pathlib import Path
from typing import Any
from uuid import uuid4

import httpx
import pytest

from src.adapters.token_store import InMemoryTokenStore
from src.rules.loader import load_rules
from src.rules.models import Rules
from src.ui.context import ServiceContext

ROOT = Path(__file__).resolve().parents[1]

USERS = [
    {"id": "u-admin", "username": "registrar", "email": "admin@uni.edu", "role": "admin", "password": "admin123"},
    {
        "id": "u-student",
        "username": "abebe",
        "email": "abebe@uni.edu",
        "role": "student",
        "password": "student123",
        "studentProfile": {"fullName": "Abebe Kebede", "studentId": "UGR/1001/15"},
    },
    {"id": "u-clinic", "username": "nurse", "email": "clinic@uni.edu", "role": "clinic", "password": "clinic123"},
    {"id": "u-lecturer", "username": "lecturer", "email": "lecturer@uni.edu", "role": "instructor", "password": "lecturer123"},
]


class FakeBackend:
    """
    In-memory stand-in for the REST backend, served through httpx.MockTransport.

    Collections are keyed by path ("/students") and answer list/create/update/
    delete the way the real backend does. Every route except login/register
    requires a valid bearer token.
    """

    def __init__(self, prefix: str = "/api") -> None:
        self.prefix = prefix
        self.users = {u["email"]: dict(u) for u in USERS}
        self.tokens: dict[str, dict[str, Any]] = {}
        self.collections: dict[str, list[dict[str, Any]]] = {}
        self.items_keys: dict[str, str] = {}
        self.requests: list[httpx.Request] = []
        self.unread_count = 0
        self.unread_error: int | None = None

    # --- setup helpers ---

    def collection(self, path: str, items_key: str, rows: list[dict[str, Any]] | None = None) -> None:
        self.items_keys[path] = items_key
        self.collections[path] = [dict(r, _id=r.get("_id", uuid4().hex)) for r in rows or []]

    def issue_token(self, email: str) -> str:
        token = f"tok-{uuid4().hex}"
        self.tokens[token] = self.users[email]
        return token

    def expire_all(self) -> None:
        self.tokens.clear()

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    # --- request handling ---

    @staticmethod
    def _public_user(user: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in user.items() if k != "password"}

    def _caller(self, request: httpx.Request) -> dict[str, Any] | None:
        header = request.headers.get("Authorization", "")
        if not header.startswith("Bearer "):
            return None
        return self.tokens.get(header[len("Bearer "):])

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix(self.prefix)
        body = json.loads(request.content) if request.content else None

        if path == "/auth/login" and request.method == "POST":
            user = self.users.get(body.get("email", ""))
            if not user or user["password"] != body.get("password"):
                return httpx.Response(400, json={"message": "Invalid credentials"})
            token = self.issue_token(user["email"])
            return httpx.Response(200, json={"message": "Login successful", "token": token, "user": self._public_user(user)})

        if path == "/auth/register" and request.method == "POST":
            if body["email"] in self.users:
                return httpx.Response(400, json={"message": "Username or email already exists"})
            user = {"id": f"u-{uuid4().hex[:6]}", **body}
            self.users[body["email"]] = user
            token = self.issue_token(body["email"])
            return httpx.Response(201, json={"token": token, "user": self._public_user(user)})

        caller = self._caller(request)
        if caller is None:
            return httpx.Response(401, json={"message": "Access token required"})

        if path == "/auth/me":
            return httpx.Response(200, json={"user": self._public_user(caller)})

        if path == "/messages/unread":
            if self.unread_error:
                return httpx.Response(self.unread_error, json={"message": "Server error"})
            return httpx.Response(200, json={"count": self.unread_count, "messages": []})

        if path == "/students/register" and request.method == "POST":
            return self._register_student(caller, body)

        own = caller.get("studentProfile") or {}
        if request.method == "PUT" and own.get("_id") and path == f"/students/{own['_id']}":
            own.update(body)
            for row in self.collections.get("/students", []):
                if row["_id"] == own["_id"]:
                    row.update(body)
            return httpx.Response(200, json={"message": "Student updated successfully", "student": own})

        return self._collection_route(request, path, body)

    def _register_student(self, caller: dict[str, Any], body: Any) -> httpx.Response:
        if caller.get("role") != "student":
            return httpx.Response(403, json={"message": "Insufficient permissions"})
        if (caller.get("studentProfile") or {}).get("_id"):
            return httpx.Response(400, json={"message": "Student profile already exists"})
        profile = dict(body, _id=uuid4().hex, userId=caller["id"])
        caller["studentProfile"] = profile
        self.collections.setdefault("/students", []).append(dict(profile))
        return httpx.Response(201, json={"message": "Student registered successfully", "student": profile})

    def _collection_route(self, request: httpx.Request, path: str, body: Any) -> httpx.Response:
        base, _, item_id = path.rpartition("/")
        if path in self.collections:
            rows = self.collections[path]
            if request.method == "GET":
                search = request.url.params.get("search", "").lower()
                matches = [r for r in rows if search in json.dumps(r).lower()]
                limit = int(request.url.params.get("limit", 10))
                page = int(request.url.params.get("page", 1))
                total_pages = max(1, -(-len(matches) // limit))
                return httpx.Response(
                    200,
                    json={
                        self.items_keys[path]: matches[(page - 1) * limit : page * limit],
                        "totalPages": total_pages,
                        "currentPage": page,
                        "total": len(matches),
                    },
                )
            if request.method == "POST":
                row = dict(body, _id=uuid4().hex)
                rows.append(row)
                return httpx.Response(201, json=row)
        if base in self.collections:
            rows = self.collections[base]
            row = next((r for r in rows if r["_id"] == item_id), None)
            if row is None:
                return httpx.Response(404, json={"message": "Not found"})
            if request.method == "PUT":
                row.update(body)
                return httpx.Response(200, json=row)
            if request.method == "DELETE":
                rows.remove(row)
                return httpx.Response(200, json={"message": "Deleted"})
            return httpx.Response(200, json=row)
        return httpx.Response(404, json={"message": f"No route {path}"})


@pytest.fixture(scope="session")
def rules() -> Rules:
    return load_rules(ROOT / "rules.yaml")


@pytest.fixture
def backend() -> FakeBackend:
    fake = FakeBackend()
    fake.collection(
        "/students",
        "students",
        [
            {"fullName": "Abebe Kebede", "studentId": "UGR/1001/15", "city": "Adama"},
            {"fullName": "Sara Tesfaye", "studentId": "UGR/1002/15", "city": "Hawassa"},
        ],
    )
    fake.collection("/leave", "applications")
    return fake


@pytest.fixture
def token_store() -> InMemoryTokenStore:
    return InMemoryTokenStore()


@pytest.fixture
def ctx(rules: Rules, backend: FakeBackend, token_store: InMemoryTokenStore):
    context = ServiceContext.create(rules, token_store, transport=backend.transport())
    yield context
    context.close()
