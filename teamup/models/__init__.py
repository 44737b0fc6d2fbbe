# teamup/models/__init__.py
# Import models in dependency order
from .user import User, Profile
from .skill import Skill, UserSkill
from .interest import Interest, UserInterest
from .connection import Connection
from .allowed_domain import AllowedDomain

__all__ = [
    "User",
    "Profile",
    "Skill",
    "UserSkill",
    "Interest",
    "UserInterest",
    "Connection",
    "AllowedDomain",
]
