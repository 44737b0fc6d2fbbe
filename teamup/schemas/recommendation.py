# teamup/schemas/recommendation.py
"""
Recommendation Pydantic Schemas
Response models for teammate recommendations
"""

from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional

from teamup.schemas.user import ProfileOut


# ======================
# RECOMMENDATION RESPONSE
# ======================

class RecommendedProfile(ProfileOut):
    """Candidate teammate profile"""
    is_recommended: bool = Field(
        True,
        description="False when the entry came from the unranked fallback pool",
    )


# ======================
# RECOMMENDATION EXPLANATION
# ======================

class RecommendationExplanation(BaseModel):
    """Score breakdown for one candidate"""
    candidate_id: int = Field(..., description="Candidate user ID")
    complementary_skills: List[str] = Field(..., description="Skills the candidate has that you do not")
    shared_interests: List[str] = Field(..., description="Interests you both list")
    score: float = Field(..., ge=0, description="Weighted match score")
    weight_skill: float
    weight_interest: float

    class Config:
        json_schema_extra = {
            "example": {
                "candidate_id": 7,
                "complementary_skills": ["rust"],
                "shared_interests": ["ml"],
                "score": 3.5,
                "weight_skill": 2.0,
                "weight_interest": 1.5,
            }
        }


# ======================
# CACHE STATUS
# ======================

class RecommendationCacheStatus(BaseModel):
    service: str = "recommendation"
    fresh: bool
    last_generated: Optional[datetime] = None
    users_cached: int = Field(..., ge=0)
    ttl_minutes: int


class RecommendationRefreshResponse(BaseModel):
    """Response after forcing a regeneration"""
    message: str
    users_cached: int = Field(..., ge=0)
    status: str
