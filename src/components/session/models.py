from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from src.domain.entities import SessionSnapshot, SessionStatus, User


class AuthError(Exception):
    """Login/registration failure carrying the backend's message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass
class LoginInput:
    email: str
    password: str

    def validate(self) -> str | None:
        if not self.email.strip() or not self.password:
            return "Please enter email and password."
        return None


@dataclass
class RegisterInput:
    username: str
    email: str
    password: str
    role: str = "student"
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RegisterInput":
        known = {"username", "email", "password", "role"}
        return cls(
            username=str(data.get("username") or ""),
            email=str(data.get("email") or ""),
            password=str(data.get("password") or ""),
            role=str(data.get("role") or "student"),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def validate(self) -> str | None:
        if not self.username.strip() or not self.email.strip() or not self.password:
            return "Username, email and password are required."
        if len(self.password) < 6:
            return "Password must be at least 6 characters."
        return None

    def to_payload(self) -> dict[str, Any]:
        return {
            **self.extra,
            "username": self.username.strip(),
            "email": self.email.strip(),
            "password": self.password,
            "role": self.role,
        }


__all__ = [
    "AuthError",
    "LoginInput",
    "RegisterInput",
    "SessionSnapshot",
    "SessionStatus",
    "User",
]
