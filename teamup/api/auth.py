import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from teamup import models
from teamup.config import settings
from teamup.crud import user as user_crud
from teamup.database import get_db
from teamup.schemas.auth import LoginRequest, RegisterRequest, Token
from teamup.utils.security import create_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


# ===== REGISTER ENDPOINT =====

@router.post("/register", status_code=201)
def register(user_data: RegisterRequest, db: Session = Depends(get_db)):
    """Register a new user with a college email and create their profile"""
    normalized_email = user_data.email.strip().lower()
    domain = user_crud.email_domain(normalized_email)

    if not user_crud.is_allowed_domain(db, domain):
        raise HTTPException(status_code=400, detail="Only college email addresses are allowed")

    if user_crud.get_user_by_email(db, normalized_email):
        raise HTTPException(status_code=400, detail="Email already registered")

    try:
        new_user = models.User(
            email=normalized_email,
            password_hash=get_password_hash(user_data.password),
            role="student",
            is_verified=not settings.REQUIRE_EMAIL_VERIFICATION,
            is_blocked=False,
            college_domain=domain,
        )
        db.add(new_user)
        db.flush()

        profile = models.Profile(
            user_id=new_user.id,
            display_name=user_data.display_name.strip(),
            college=user_data.college,
            branch=user_data.branch,
            year=user_data.year,
            open_for=[],
        )
        db.add(profile)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email already registered")
    except Exception:
        db.rollback()
        logger.exception("Registration failed for %s", normalized_email)
        raise HTTPException(status_code=500, detail="Internal server error")

    return {"message": "Registration successful", "user_id": new_user.id}


# ===== LOGIN ENDPOINT =====

@router.post("/login", response_model=Token)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Verify credentials and return access token"""
    user = user_crud.get_user_by_email(db, credentials.email)

    if not user or not verify_password(credentials.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if user.is_blocked:
        raise HTTPException(status_code=403, detail="Account is blocked")

    if settings.REQUIRE_EMAIL_VERIFICATION and not user.is_verified:
        raise HTTPException(status_code=403, detail="Email not verified")

    access_token = create_access_token(data={"sub": user.email, "role": user.role})

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "role": user.role
    }
