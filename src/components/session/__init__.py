"""
Session component - login, registration, logout and identity hydration.
"""

from .component import SessionListener, SessionProvider
from .models import AuthError, LoginInput, RegisterInput
from .ports import ApiClientPort, TokenStorePort

__all__ = [
    # Entry points
    "SessionProvider",
    "SessionListener",
    # Models
    "AuthError",
    "LoginInput",
    "RegisterInput",
    # Ports
    "ApiClientPort",
    "TokenStorePort",
]
