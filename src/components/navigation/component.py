"""
Navigation component - role-gated tab selection.

Invariants:
- The visible tab set is the capability table filtered by the user's role.
- An unknown or absent role yields an empty menu.
- Exactly one tab (or none, for an empty menu) is active at a time.
"""

from __future__ import annotations

import logging

from src.domain.entities import User
from src.domain.policy import NavigationPolicy
from src.rules.models import TabRule

from .models import NavigationView

logger = logging.getLogger(__name__)


class NavigationState:
    def __init__(self, policy: NavigationPolicy) -> None:
        self.policy = policy
        self.active_tab: str | None = None

    def tabs_for(self, user: User | None) -> list[TabRule]:
        return self.policy.visible_tabs(user.role if user else None)

    def sync(self, user: User | None) -> NavigationView:
        """Keep the active tab inside the user's permitted set."""
        tabs = self.tabs_for(user)
        ids = [t.id for t in tabs]
        if self.active_tab not in ids:
            self.active_tab = ids[0] if ids else None
        return NavigationView(tabs=tabs, active_tab=self.active_tab)

    def select(self, user: User | None, tab_id: str) -> NavigationView:
        role = user.role if user else None
        if not self.policy.can_access(role, tab_id):
            logger.warning(f"Role {role!r} may not open tab {tab_id!r}")
            raise PermissionError(f"Tab not available: {tab_id}")
        self.active_tab = tab_id
        return NavigationView(tabs=self.tabs_for(user), active_tab=tab_id)

    def reset(self) -> None:
        self.active_tab = None
