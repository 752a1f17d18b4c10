from .component import MessageService, UnreadPoller
from .models import PRIORITIES, ComposeInput, UnreadSummary
from .ports import MessagingClientPort

__all__ = [
    "PRIORITIES",
    "ComposeInput",
    "MessageService",
    "MessagingClientPort",
    "UnreadPoller",
    "UnreadSummary",
]
