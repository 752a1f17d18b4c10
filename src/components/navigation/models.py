from dataclasses import dataclass

from src.rules.models import TabRule


@dataclass(frozen=True)
class NavigationView:
    """What the shell should render for the current user."""

    tabs: list[TabRule]
    active_tab: str | None

    @property
    def is_empty(self) -> bool:
        return not self.tabs

    @property
    def active_index(self) -> int | None:
        for i, tab in enumerate(self.tabs):
            if tab.id == self.active_tab:
                return i
        return None
