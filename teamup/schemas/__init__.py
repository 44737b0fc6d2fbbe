# teamup/schemas/__init__.py

# Profile schemas
from .user import (
    ProfileUpdate,
    ProfileOut,
    MyProfileOut,
    BrowseProfileOut,
)

# Auth schemas
from .auth import Token, TokenData, LoginRequest, RegisterRequest

# Connection schemas
from .connection import ConnectionRequest, ConnectionActionResponse, ConnectionCount

# Recommendation schemas
from .recommendation import (
    RecommendedProfile,
    RecommendationExplanation,
    RecommendationCacheStatus,
    RecommendationRefreshResponse,
)

__all__ = [
    "ProfileUpdate",
    "ProfileOut",
    "MyProfileOut",
    "BrowseProfileOut",
    "Token",
    "TokenData",
    "LoginRequest",
    "RegisterRequest",
    "ConnectionRequest",
    "ConnectionActionResponse",
    "ConnectionCount",
    "RecommendedProfile",
    "RecommendationExplanation",
    "RecommendationCacheStatus",
    "RecommendationRefreshResponse",
]
