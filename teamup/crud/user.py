from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from teamup import models
from teamup.config import settings


def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(
        models.User.email == email.strip().lower()
    ).first()


def get_all_user_ids(db: Session) -> List[int]:
    return [row.id for row in db.query(models.User.id).order_by(models.User.id.asc()).all()]


def find_unconnected_user_ids(db: Session, excluded_ids, limit: int) -> List[int]:
    """Return up to `limit` user ids outside `excluded_ids`, lowest id first."""
    query = db.query(models.User.id)
    excluded = list(excluded_ids)
    if excluded:
        query = query.filter(models.User.id.notin_(excluded))
    return [row.id for row in query.order_by(models.User.id.asc()).limit(limit).all()]


# ============================
# REGISTRATION ALLOWLIST
# ============================

def email_domain(email: str) -> str:
    return email.strip().lower().rsplit("@", 1)[-1]


def is_allowed_domain(db: Session, domain: str) -> bool:
    domain = (domain or "").strip().lower()
    if not domain:
        return False
    if domain in settings.default_allowed_domains:
        return True
    return db.query(models.AllowedDomain.id).filter(
        func.lower(models.AllowedDomain.domain) == domain,
        models.AllowedDomain.is_active.is_(True),
    ).first() is not None


def list_allowed_domains(db: Session) -> List[models.AllowedDomain]:
    return db.query(models.AllowedDomain).order_by(models.AllowedDomain.domain.asc()).all()


def add_allowed_domain(db: Session, domain: str, college_name: Optional[str] = None) -> models.AllowedDomain:
    normalized = domain.strip().lower()
    existing = db.query(models.AllowedDomain).filter(
        models.AllowedDomain.domain == normalized
    ).first()
    if existing:
        existing.is_active = True
        if college_name:
            existing.college_name = college_name
        db.commit()
        db.refresh(existing)
        return existing

    row = models.AllowedDomain(domain=normalized, college_name=college_name, is_active=True)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def deactivate_allowed_domain(db: Session, domain_id: int) -> bool:
    row = db.query(models.AllowedDomain).filter(models.AllowedDomain.id == domain_id).first()
    if not row:
        return False
    row.is_active = False
    db.commit()
    return True
