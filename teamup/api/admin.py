# teamup/api/admin.py
"""
Admin console endpoints: dashboard stats, user moderation and the
registration domain allowlist.

Every route depends on `require_admin`, which checks the role stored on the
user row rather than the token claim.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy import desc
from sqlalchemy.orm import Session

from teamup.crud import user as user_crud
from teamup.database import get_db
from teamup.models.connection import Connection
from teamup.models.user import User, Profile
from teamup.utils.security import require_admin

router = APIRouter(prefix="/admin", tags=["Admin"])

VALID_ROLES = {"student", "admin"}


class RoleUpdate(BaseModel):
    role: str


class AllowedDomainCreate(BaseModel):
    domain: str = Field(..., min_length=3, max_length=255)
    college_name: Optional[str] = None


def _user_row(user: User) -> dict:
    profile = user.profile
    return {
        "id":          user.id,
        "email":       user.email,
        "display_name": profile.display_name if profile else None,
        "role":        user.role,
        "is_verified": user.is_verified,
        "is_blocked":  user.is_blocked,
        "created_at":  user.created_at.isoformat() if user.created_at else None,
    }


def _get_target_user(db: Session, user_id: int) -> User:
    user = user_crud.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# ─────────────────────────────────────────
# GET /admin/stats  — Dashboard overview
# ─────────────────────────────────────────
@router.get("/stats")
def get_dashboard_stats(
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    total_users    = db.query(User).count()
    blocked_users  = db.query(User).filter(User.is_blocked.is_(True)).count()
    verified_users = db.query(User).filter(User.is_verified.is_(True)).count()
    total_requests = db.query(Connection).count()

    return {
        "users": {
            "total":    total_users,
            "blocked":  blocked_users,
            "verified": verified_users,
        },
        "connections": {
            "requests": total_requests,
        },
    }


# ─────────────────────────────────────────
# GET /admin/users  — List users
# ─────────────────────────────────────────
@router.get("/users")
def get_all_users(
    search: Optional[str] = Query(None, description="Search by email or display name"),
    is_blocked: Optional[bool] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    query = db.query(User).outerjoin(Profile, Profile.user_id == User.id)

    if search:
        like = f"%{search}%"
        query = query.filter(
            (User.email.ilike(like)) | (Profile.display_name.ilike(like))
        )
    if is_blocked is not None:
        query = query.filter(User.is_blocked.is_(is_blocked))

    users = query.order_by(desc(User.created_at), desc(User.id)).offset(skip).limit(limit).all()
    return [_user_row(u) for u in users]


# ─────────────────────────────────────────
# Moderation
# ─────────────────────────────────────────
@router.post("/users/{user_id}/block")
def block_user(
    user_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="You cannot block yourself")
    user = _get_target_user(db, user_id)
    user.is_blocked = True
    db.commit()
    return _user_row(user)


@router.post("/users/{user_id}/unblock")
def unblock_user(
    user_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    user = _get_target_user(db, user_id)
    user.is_blocked = False
    db.commit()
    return _user_row(user)


@router.post("/users/{user_id}/verify")
def verify_user(
    user_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    user = _get_target_user(db, user_id)
    user.is_verified = True
    db.commit()
    return _user_row(user)


@router.put("/users/{user_id}/role")
def change_role(
    user_id: int,
    payload: RoleUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    role = payload.role.strip().lower()
    if role not in VALID_ROLES:
        raise HTTPException(status_code=400, detail="Role must be one of: student, admin")
    user = _get_target_user(db, user_id)
    user.role = role
    db.commit()
    return _user_row(user)


# ─────────────────────────────────────────
# Registration allowlist
# ─────────────────────────────────────────
@router.get("/allowed-domains")
def list_allowed_domains(
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return [
        {
            "id": row.id,
            "domain": row.domain,
            "college_name": row.college_name,
            "is_active": row.is_active,
        }
        for row in user_crud.list_allowed_domains(db)
    ]


@router.post("/allowed-domains", status_code=201)
def add_allowed_domain(
    payload: AllowedDomainCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    row = user_crud.add_allowed_domain(db, payload.domain, payload.college_name)
    return {"id": row.id, "domain": row.domain, "is_active": row.is_active}


@router.delete("/allowed-domains/{domain_id}")
def deactivate_allowed_domain(
    domain_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    if not user_crud.deactivate_allowed_domain(db, domain_id):
        raise HTTPException(status_code=404, detail="Domain not found")
    return {"message": "Domain deactivated"}
