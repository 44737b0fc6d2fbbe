from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from teamup import models
from teamup.crud import connection as connection_crud
from teamup.crud import profile as profile_crud
from teamup.database import get_db
from teamup.schemas.user import BrowseProfileOut, MyProfileOut, ProfileOut, ProfileUpdate
from teamup.utils.security import get_current_user

router = APIRouter(prefix="/profile", tags=["Profiles"])


# ======================
# GET: Current user profile
# ======================
@router.get("/me", response_model=MyProfileOut)
def get_my_profile(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    record = profile_crud.get_profile_record(db, current_user.id)
    if not record:
        raise HTTPException(status_code=404, detail="Profile not found")
    return {**record, "email": current_user.email, "role": current_user.role}


# ======================
# GET: Other profiles with my connection status
# ======================
@router.get("/browse", response_model=List[BrowseProfileOut])
def browse_profiles(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    other_ids = [
        row.user_id
        for row in db.query(models.Profile.user_id).filter(
            models.Profile.user_id != current_user.id
        ).all()
    ]
    records = profile_crud.get_profile_batch(db, other_ids)
    for record in records:
        record["connection_status"] = connection_crud.connection_status(
            db, current_user.id, record["user_id"]
        )
    return records


# ======================
# GET: Public profile
# ======================
@router.get("/{user_id}", response_model=ProfileOut)
def get_profile(user_id: int, db: Session = Depends(get_db)):
    record = profile_crud.get_profile_record(db, user_id)
    if not record:
        raise HTTPException(status_code=404, detail="Profile not found")
    return record


# ======================
# PUT: Update my profile, skills and interests
# ======================
@router.put("/", response_model=ProfileOut)
def update_my_profile(
    update: ProfileUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        profile_crud.update_profile(db, current_user.id, update)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return profile_crud.get_profile_record(db, current_user.id)
