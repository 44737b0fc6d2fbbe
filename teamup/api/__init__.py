# teamup/api/__init__.py
# This file makes the api directory a Python package.

from . import admin
from . import auth
from . import connections
from . import profile
from . import recommendations
from . import skill

__all__ = [
    "admin",
    "auth",
    "connections",
    "profile",
    "recommendations",
    "skill",
]
