from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def normalize_name_list(values: Optional[List[str]]) -> List[str]:
    """Strip blanks and drop case-insensitive duplicates, keeping first spelling."""
    if not values:
        return []
    seen = set()
    cleaned: List[str] = []
    for raw in values:
        name = (raw or "").strip()
        key = name.lower()
        if not name or key in seen:
            continue
        seen.add(key)
        cleaned.append(name)
    return cleaned


# ======================
# PROFILE SCHEMAS
# ======================

class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    college: Optional[str] = None
    branch: Optional[str] = None
    year: Optional[str] = None
    bio: Optional[str] = None
    open_for: Optional[List[str]] = None
    # None leaves the current set untouched; a list replaces it.
    skills: Optional[List[str]] = None
    interests: Optional[List[str]] = None

    @field_validator("open_for", "skills", "interests")
    @classmethod
    def _clean_names(cls, value):
        if value is None:
            return None
        return normalize_name_list(value)


class ProfileOut(BaseModel):
    user_id: int
    display_name: str
    college: Optional[str] = None
    branch: Optional[str] = None
    year: Optional[str] = None
    bio: Optional[str] = None
    open_for: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    connection_count: int = 0


class MyProfileOut(ProfileOut):
    email: str
    role: str


class BrowseProfileOut(ProfileOut):
    connection_status: str = "NONE"
