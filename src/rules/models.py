from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.domain.entities import RoleType

FieldKind = Literal["text", "textarea", "email", "number", "date", "select", "url"]
HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]


class ApiRules(BaseModel):
    base_url: str
    timeout_seconds: float | None = None


class SessionRules(BaseModel):
    token_key: str = "token"
    login_route: str = "/login"
    register_route: str = "/register"
    home_route: str = "/"


class PollingRules(BaseModel):
    unread_interval_seconds: float = 30.0


class TabRule(BaseModel):
    id: str
    label: str
    icon: str = "CIRCLE"
    roles: list[RoleType] = Field(default_factory=list)


class NavigationRules(BaseModel):
    tabs: list[TabRule]

    @field_validator("tabs")
    @classmethod
    def _unique_ids(cls, tabs: list[TabRule]) -> list[TabRule]:
        seen: set[str] = set()
        for tab in tabs:
            if tab.id in seen:
                raise ValueError(f"Duplicate navigation tab: {tab.id}")
            seen.add(tab.id)
        return tabs


class FieldRule(BaseModel):
    name: str
    label: str
    kind: FieldKind = "text"
    required: bool = False
    max_length: int | None = None
    min: float | None = None
    max: float | None = None
    choices: list[str] | None = None


class FilterRule(BaseModel):
    name: str
    label: str
    choices: list[str]
    all_value: str = "All"


class ActionRule(BaseModel):
    method: HttpMethod
    # Relative to the resource path; "{id}" is substituted when given.
    path: str


class ResourceSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    title: str
    path: str
    items_key: str = "items"
    id_field: str = "_id"
    page_size: int = 10
    searchable: bool = True
    backend: Literal["http", "memory"] = "http"
    manage_roles: list[RoleType] = Field(default_factory=lambda: ["admin"])
    # False when the backend has no POST on the collection path.
    creatable: bool = True
    # Per-role list endpoint overrides, e.g. a student's own registrations.
    list_paths: dict[RoleType, str] = Field(default_factory=dict)
    statistics: str | None = None
    seed: list[dict[str, Any]] = Field(default_factory=list)
    fields: list[FieldRule] = Field(default_factory=list)
    columns: list[str] = Field(default_factory=list)
    filters: list[FilterRule] = Field(default_factory=list)
    actions: dict[str, ActionRule] = Field(default_factory=dict)

    def field(self, name: str) -> FieldRule | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None


class Rules(BaseModel):
    api: ApiRules
    session: SessionRules = Field(default_factory=SessionRules)
    polling: PollingRules = Field(default_factory=PollingRules)
    navigation: NavigationRules
    resources: dict[str, ResourceSchema] = Field(default_factory=dict)

    @field_validator("resources")
    @classmethod
    def _name_resources(
        cls, resources: dict[str, ResourceSchema]
    ) -> dict[str, ResourceSchema]:
        # The mapping key is the canonical resource name.
        return {
            key: schema.model_copy(update={"name": key})
            for key, schema in resources.items()
        }
