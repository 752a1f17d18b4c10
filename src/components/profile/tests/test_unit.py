"""
Profile component unit tests.

ProfileEditor against a recording client and a session whose identity can be
swapped, the way a hydrate swaps it in the app.
"""

from __future__ import annotations

from typing import Any

import pytest

from src.adapters.http.errors import ApiConnectionError, ApiError
from src.components.profile import (
    PROFILE_FIELDS,
    ProfileEditor,
    ProfileService,
    profile_values,
    to_payload,
)
from src.domain.entities import User

# --- Mock Implementations ---


class MockClient:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, Any]] = []
        self.error: ApiError | None = None

    def _record(self, method: str, path: str, body: Any) -> Any:
        self.calls.append((method, path, body))
        if self.error:
            raise self.error
        return {"message": "ok"}

    def post(self, path: str, body: Any = None) -> Any:
        return self._record("POST", path, body)

    def put(self, path: str, body: Any = None) -> Any:
        return self._record("PUT", path, body)


class MockSession:
    def __init__(self, user: User | None) -> None:
        self.current_user = user
        self.hydrations = 0

    def hydrate(self) -> None:
        self.hydrations += 1

    def subscribe(self, listener):
        return lambda: None


def make_user(profile: dict[str, Any] | None = None) -> User:
    return User(id="u1", username="abebe", email="abebe@uni.edu", role="student", student_profile=profile)


def filled_values(**overrides: str) -> dict[str, str]:
    values = {rule.name: "x" for rule in PROFILE_FIELDS}
    values["healthInfo.bloodType"] = "O+"
    values.update(overrides)
    return values


# --- Fixtures ---


@pytest.fixture
def client() -> MockClient:
    return MockClient()


@pytest.fixture
def editor(client) -> ProfileEditor:
    return ProfileEditor(ProfileService(client), MockSession(make_user()))


# --- Models ---


def test_values_without_profile_use_health_defaults():
    values = profile_values(None)

    assert values["fullName"] == ""
    assert values["healthInfo.disabilities"] == "None"
    assert values["healthInfo.bloodType"] == ""


def test_values_read_nested_profile():
    profile = {"fullName": "Abebe Kebede", "familyInfo": {"city": "Addis Ababa"}}

    values = profile_values(profile)

    assert values["fullName"] == "Abebe Kebede"
    assert values["familyInfo.city"] == "Addis Ababa"
    assert values["healthInfo.disabilities"] == ""


def test_payload_nests_dotted_fields():
    payload = to_payload(filled_values(**{"familyInfo.city": "  Gondar ", "healthInfo.allergies": ""}))

    assert payload["familyInfo"]["city"] == "Gondar"
    assert payload["backgroundEducation"]["yearsAttended"]["grade1to8"] == "x"
    assert payload["healthInfo"]["allergies"] is None
    assert "familyInfo.city" not in payload


# --- ProfileEditor ---


def test_first_save_registers(editor, client):
    assert not editor.has_profile

    assert editor.save(filled_values())

    method, path, body = client.calls[-1]
    assert (method, path) == ("POST", "/students/register")
    assert body["healthInfo"]["bloodType"] == "O+"
    assert editor.session.hydrations == 1


def test_existing_profile_is_updated(client):
    session = MockSession(make_user({"_id": "s1", "fullName": "Abebe"}))
    editor = ProfileEditor(ProfileService(client), session)

    assert editor.profile_id == "s1"
    assert editor.save(filled_values(fullName="Abebe Kebede"))

    method, path, body = client.calls[-1]
    assert (method, path) == ("PUT", "/students/s1")
    assert body["fullName"] == "Abebe Kebede"
    assert session.hydrations == 1


def test_missing_required_fields_send_nothing(editor, client):
    assert not editor.save(filled_values(**{"familyInfo.city": "", "fullName": " "}))

    assert client.calls == []
    assert set(editor.errors) == {"familyInfo.city", "fullName"}
    assert editor.errors["fullName"] == "Full Name is required"
    assert editor.session.hydrations == 0


def test_unknown_blood_type_is_rejected(editor, client):
    assert not editor.save(filled_values(**{"healthInfo.bloodType": "Z"}))

    assert "healthInfo.bloodType" in editor.errors
    assert client.calls == []


@pytest.mark.parametrize(
    "error",
    [ApiError(400, "Student profile already exists"), ApiConnectionError("Cannot reach the server")],
)
def test_backend_failure_keeps_identity(editor, client, error):
    client.error = error

    assert not editor.save(filled_values())

    assert editor.last_error == error.message
    assert editor.session.hydrations == 0


def test_retry_clears_previous_error(editor, client):
    client.error = ApiError(500, "Server error")
    assert not editor.save(filled_values())

    client.error = None
    assert editor.save(filled_values())
    assert editor.last_error is None


def test_signed_out_editor_has_no_profile(client):
    editor = ProfileEditor(ProfileService(client), MockSession(None))

    assert editor.profile is None
    assert editor.profile_id is None
    assert editor.values()["healthInfo.supportNeeded"] == "None"
