import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from src.domain.entities import ROLES
from src.rules.models import Rules

# Tabs rendered by dedicated screens rather than a resource schema.
BUILTIN_SCREENS = frozenset({"dashboard", "profile", "messages"})

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class AppConfig:
    rules_path: Path = Path("rules.yaml")
    api_base_url: str | None = None
    log_level: str = "INFO"
    token_file: Path | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AppConfig":
        env = os.environ if environ is None else environ

        log_level = env.get("UMS_LOG_LEVEL", "INFO").upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"UMS_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")

        token_file = env.get("UMS_TOKEN_FILE")
        return cls(
            rules_path=Path(env.get("UMS_RULES_PATH", "rules.yaml")),
            api_base_url=env.get("UMS_API_BASE_URL") or None,
            log_level=log_level,
            token_file=Path(token_file) if token_file else None,
        )

    def apply(self, rules: Rules) -> Rules:
        """Overlay environment overrides onto the loaded rules."""
        if not self.api_base_url:
            return rules
        api = rules.api.model_copy(update={"base_url": self.api_base_url})
        return rules.model_copy(update={"api": api})


def validate_rules(rules: Rules) -> None:
    """
    Cross-check sections that pydantic validates independently.
    Raises ValueError listing every problem found.
    """
    problems: list[str] = []

    for tab in rules.navigation.tabs:
        if tab.id not in BUILTIN_SCREENS and tab.id not in rules.resources:
            problems.append(f"tab {tab.id!r} has no screen or resource")
        for role in tab.roles:
            if role not in ROLES:
                problems.append(f"tab {tab.id!r} names unknown role {role!r}")

    for name, schema in rules.resources.items():
        if schema.backend == "memory" and not schema.fields:
            problems.append(f"memory resource {name!r} declares no fields")
        if schema.page_size < 1:
            problems.append(f"resource {name!r} page_size must be positive")

    if not rules.api.base_url:
        problems.append("api.base_url is empty")

    if problems:
        raise ValueError("Invalid rules: " + "; ".join(problems))
