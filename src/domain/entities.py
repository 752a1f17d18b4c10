from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

# --- Enums / Literals ---
RoleType = Literal["admin", "student", "clinic"]
SessionStatus = Literal["loading", "authenticated", "unauthenticated"]
MessagePriority = Literal["low", "normal", "high"]

ROLES: tuple[RoleType, ...] = ("admin", "student", "clinic")

# --- User & Auth ---

class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    username: str
    email: str
    role: str | None = None
    student_profile: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("student_profile", "studentProfile"),
    )


class AuthPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    token: str = Field(min_length=1)
    user: User
    message: str | None = None


class SessionSnapshot(BaseModel):
    """Whole-value view of the session handed to observers."""

    model_config = ConfigDict(frozen=True)

    status: SessionStatus
    user: User | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.status == "authenticated" and self.user is not None

# --- Resources ---

class Page(BaseModel):
    items: list[dict[str, Any]] = Field(default_factory=list)
    total_pages: int = 1
    current_page: int = 1
    total: int | None = None


class UnreadSummary(BaseModel):
    model_config = ConfigDict(extra="ignore")

    count: int = 0
    messages: list[dict[str, Any]] = Field(default_factory=list)
