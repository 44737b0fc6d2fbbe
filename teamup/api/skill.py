from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from teamup.crud import profile as profile_crud
from teamup.database import get_db

router = APIRouter(tags=["Skills & Interests"])


# ======================
# GET: Skill vocabulary
# ======================
@router.get("/skills")
def get_all_skills(db: Session = Depends(get_db)):
    return [{"id": skill.id, "name": skill.name} for skill in profile_crud.list_skills(db)]


# ======================
# GET: Interest vocabulary
# ======================
@router.get("/interests")
def get_all_interests(db: Session = Depends(get_db)):
    return [
        {"id": interest.id, "name": interest.name}
        for interest in profile_crud.list_interests(db)
    ]
