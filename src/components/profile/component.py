"""
Profile component - a student's own profile, created once and then edited.

The profile is embedded in the session identity; after a save the session is
hydrated again so every screen reads the new document.
"""

from __future__ import annotations

import logging
from typing import Any

from src.adapters.http.errors import ApiError
from src.domain.validation import validate_field

from .models import PROFILE_FIELDS, profile_values, to_payload
from .ports import ProfileClientPort, ProfileSessionPort

logger = logging.getLogger(__name__)

STUDENTS_PATH = "/students"


class ProfileService:
    def __init__(self, client: ProfileClientPort) -> None:
        self.client = client

    def register(self, data: dict[str, Any]) -> Any:
        return self.client.post(f"{STUDENTS_PATH}/register", data)

    def update(self, profile_id: str, data: dict[str, Any]) -> Any:
        return self.client.put(f"{STUDENTS_PATH}/{profile_id}", data)


class ProfileEditor:
    """Headless state behind the My Profile screen."""

    def __init__(self, service: ProfileService, session: ProfileSessionPort) -> None:
        self.service = service
        self.session = session
        self.errors: dict[str, str] = {}
        self.last_error: str | None = None

    @property
    def profile(self) -> dict[str, Any] | None:
        user = self.session.current_user
        return user.student_profile if user else None

    @property
    def has_profile(self) -> bool:
        return bool(self.profile)

    @property
    def profile_id(self) -> str | None:
        profile = self.profile or {}
        value = profile.get("_id") or profile.get("id")
        return str(value) if value else None

    def values(self) -> dict[str, str]:
        return profile_values(self.profile)

    def validate(self, values: dict[str, Any]) -> dict[str, str]:
        errors = {}
        for rule in PROFILE_FIELDS:
            message = validate_field(rule, values.get(rule.name))
            if message:
                errors[rule.name] = message
        return errors

    def save(self, values: dict[str, Any]) -> bool:
        self.last_error = None
        self.errors = self.validate(values)
        if self.errors:
            return False

        payload = to_payload(values)
        try:
            if self.profile_id:
                self.service.update(self.profile_id, payload)
            else:
                self.service.register(payload)
        except ApiError as e:
            logger.error(f"Error saving student profile: {e}")
            self.last_error = e.message
            return False

        logger.info("Student profile saved; refreshing identity")
        self.session.hydrate()
        return True
