"""
Profile component - register or update the signed-in student's profile.
"""

from .component import ProfileEditor, ProfileService
from .models import PROFILE_FIELDS, profile_values, to_payload
from .ports import ProfileClientPort, ProfileSessionPort

__all__ = [
    "PROFILE_FIELDS",
    "ProfileClientPort",
    "ProfileEditor",
    "ProfileService",
    "ProfileSessionPort",
    "profile_values",
    "to_payload",
]
