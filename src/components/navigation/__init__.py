"""
Navigation component - which feature screens a role may open.
"""

from src.domain.policy import NavigationPolicy

from .component import NavigationState
from .models import NavigationView

__all__ = [
    "NavigationPolicy",
    "NavigationState",
    "NavigationView",
]
