# teamup/api/recommendations.py
"""
Recommendation API Router

Endpoints:
- GET /recommendations - Ranked teammate suggestions for the current user
- GET /recommendations/explain/{candidate_id} - Score breakdown for one candidate
- GET /recommendations/health - Cache status
- POST /recommendations/refresh - Force a cache rebuild (admin)
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from teamup import models
from teamup.crud import user as user_crud
from teamup.database import get_db
from teamup.ml.recommender import explain_pair
from teamup.schemas.recommendation import (
    RecommendationCacheStatus,
    RecommendationExplanation,
    RecommendationRefreshResponse,
    RecommendedProfile,
)
from teamup.services.recommendation_service import RecommendationService, get_recommendation_service
from teamup.utils.security import get_current_user, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


# ======================
# GET RECOMMENDATIONS
# ======================
@router.get("", response_model=List[RecommendedProfile])
def get_recommendations(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: RecommendationService = Depends(get_recommendation_service),
):
    """
    Suggested teammates for the current user.

    Ranked by complementary skills and shared interests. People you have
    already connected with or exchanged a request with are left out. When
    nothing ranked remains, up to 20 other unconnected users are returned
    unranked. An empty list means there is nobody left to suggest.
    """
    try:
        return service.recommend(db, current_user.id)
    except SQLAlchemyError:
        logger.exception("Failed to load recommendations for user %s", current_user.id)
        raise HTTPException(status_code=500, detail="Failed to load recommendations")


# ======================
# GET RECOMMENDATION EXPLANATION
# ======================
@router.get("/explain/{candidate_id}", response_model=RecommendationExplanation)
def explain_recommendation(
    candidate_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Why a candidate scores the way they do against the current user."""
    if candidate_id == current_user.id:
        raise HTTPException(status_code=400, detail="Cannot explain a match with yourself")

    if not user_crud.get_user(db, candidate_id):
        raise HTTPException(status_code=404, detail="User not found")

    return explain_pair(db, current_user.id, candidate_id)


# ======================
# CACHE HEALTH
# ======================
@router.get("/health", response_model=RecommendationCacheStatus)
def recommendation_health(
    current_user: models.User = Depends(get_current_user),
    service: RecommendationService = Depends(get_recommendation_service),
):
    return service.status()


# ======================
# FORCE REBUILD
# ======================
@router.post("/refresh", response_model=RecommendationRefreshResponse)
def refresh_recommendations(
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
    service: RecommendationService = Depends(get_recommendation_service),
):
    try:
        users_cached = service.regenerate(db)
    except Exception as e:
        logger.exception("Manual recommendation rebuild failed")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to refresh recommendations: {str(e)}"
        )

    return {
        "message": "Recommendations regenerated",
        "users_cached": users_cached,
        "status": "ready",
    }
