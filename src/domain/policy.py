from collections.abc import Sequence

from src.domain.entities import ROLES
from src.rules.models import ResourceSchema, TabRule


class NavigationPolicy:
    """Evaluates the role -> screen capability table once, for the shell."""

    def __init__(self, tabs: Sequence[TabRule]):
        self.tabs = list(tabs)
        self._by_role: dict[str, list[TabRule]] = {
            role: [t for t in self.tabs if role in t.roles] for role in ROLES
        }

    def visible_tabs(self, role: str | None) -> list[TabRule]:
        """Tabs permitted for ``role`` in table order. Unknown roles see nothing."""
        if not role:
            return []
        return list(self._by_role.get(role, []))

    def visible_ids(self, role: str | None) -> list[str]:
        return [t.id for t in self.visible_tabs(role)]

    def can_access(self, role: str | None, tab_id: str) -> bool:
        return tab_id in self.visible_ids(role)


def can_manage(schema: ResourceSchema, role: str | None) -> bool:
    return role is not None and role in schema.manage_roles
