from dataclasses import dataclass
from typing import Any, get_args

from src.domain.entities import MessagePriority, UnreadSummary

PRIORITIES: tuple[str, ...] = get_args(MessagePriority)


@dataclass(frozen=True)
class ComposeInput:
    receiver_id: str
    subject: str
    content: str
    priority: str = "normal"

    def validate(self) -> str | None:
        if not self.receiver_id:
            return "Please choose a recipient."
        if not self.subject or not self.subject.strip():
            return "Subject is required."
        if not self.content or not self.content.strip():
            return "Message content is required."
        if self.priority not in PRIORITIES:
            return f"Priority must be one of: {', '.join(PRIORITIES)}"
        return None

    def to_payload(self) -> dict[str, Any]:
        return {
            "receiverId": self.receiver_id,
            "subject": self.subject.strip(),
            "content": self.content.strip(),
            "priority": self.priority,
        }


__all__ = ["PRIORITIES", "ComposeInput", "UnreadSummary"]
