from dataclasses import dataclass

from src.domain.entities import SessionSnapshot, User


@dataclass
class AppState:
    """Per-page UI state. The session itself lives in SessionProvider."""

    current_user: User | None = None
    unread_count: int = 0

    def apply(self, snapshot: SessionSnapshot) -> None:
        self.current_user = snapshot.user if snapshot.is_authenticated else None
        if self.current_user is None:
            self.unread_count = 0

    @property
    def role(self) -> str | None:
        return self.current_user.role if self.current_user else None
