from collections import defaultdict
from typing import Dict, List, Optional, Set

from sqlalchemy import func
from sqlalchemy.orm import Session

from teamup import models, schemas
from teamup.crud import connection as connection_crud


# ============================
# VOCABULARIES (SKILLS / INTERESTS)
# ============================

def _get_or_create(db: Session, model, name: str):
    row = db.query(model).filter(func.lower(model.name) == name.lower()).first()
    if row:
        return row
    row = model(name=name)
    db.add(row)
    db.flush()
    return row


def get_or_create_skill(db: Session, name: str) -> models.Skill:
    return _get_or_create(db, models.Skill, name)


def get_or_create_interest(db: Session, name: str) -> models.Interest:
    return _get_or_create(db, models.Interest, name)


def list_skills(db: Session) -> List[models.Skill]:
    return db.query(models.Skill).order_by(models.Skill.name.asc()).all()


def list_interests(db: Session) -> List[models.Interest]:
    return db.query(models.Interest).order_by(models.Interest.name.asc()).all()


def get_user_skill_names(db: Session, user_id: int) -> Set[str]:
    rows = (
        db.query(models.Skill.name)
        .join(models.UserSkill, models.UserSkill.skill_id == models.Skill.id)
        .filter(models.UserSkill.user_id == user_id)
        .all()
    )
    return {row.name.lower() for row in rows}


def get_user_interest_names(db: Session, user_id: int) -> Set[str]:
    rows = (
        db.query(models.Interest.name)
        .join(models.UserInterest, models.UserInterest.interest_id == models.Interest.id)
        .filter(models.UserInterest.user_id == user_id)
        .all()
    )
    return {row.name.lower() for row in rows}


def get_skill_sets(db: Session) -> Dict[int, Set[str]]:
    """user id -> lowercased skill names, for every user holding a skill."""
    rows = (
        db.query(models.UserSkill.user_id, models.Skill.name)
        .join(models.Skill, models.UserSkill.skill_id == models.Skill.id)
        .all()
    )
    result: Dict[int, Set[str]] = defaultdict(set)
    for user_id, name in rows:
        result[user_id].add(name.lower())
    return dict(result)


def get_interest_sets(db: Session) -> Dict[int, Set[str]]:
    rows = (
        db.query(models.UserInterest.user_id, models.Interest.name)
        .join(models.Interest, models.UserInterest.interest_id == models.Interest.id)
        .all()
    )
    result: Dict[int, Set[str]] = defaultdict(set)
    for user_id, name in rows:
        result[user_id].add(name.lower())
    return dict(result)


def _names_by_user(db: Session, link_model, vocab_model, fk_column, user_ids) -> Dict[int, List[str]]:
    rows = (
        db.query(link_model.user_id, vocab_model.name)
        .join(vocab_model, fk_column == vocab_model.id)
        .filter(link_model.user_id.in_(user_ids))
        .order_by(link_model.id.asc())
        .all()
    )
    result: Dict[int, List[str]] = defaultdict(list)
    for user_id, name in rows:
        result[user_id].append(name)
    return result


# ============================
# PROFILES
# ============================

def get_profile(db: Session, user_id: int) -> Optional[models.Profile]:
    return db.query(models.Profile).filter(models.Profile.user_id == user_id).first()


def _profile_record(profile: models.Profile, skills, interests, connection_count) -> dict:
    return {
        "user_id": profile.user_id,
        "display_name": profile.display_name,
        "college": profile.college,
        "branch": profile.branch,
        "year": profile.year,
        "bio": profile.bio,
        "open_for": list(profile.open_for or []),
        "skills": list(skills),
        "interests": list(interests),
        "connection_count": connection_count,
    }


def get_profile_batch(db: Session, user_ids) -> List[dict]:
    """
    Profile records for every id in `user_ids` that has a profile.

    Uses one query per table regardless of batch size. Result order follows
    the profile rows, not `user_ids`.
    """
    ids = list(user_ids)
    if not ids:
        return []

    profiles = (
        db.query(models.Profile)
        .filter(models.Profile.user_id.in_(ids))
        .order_by(models.Profile.user_id.asc())
        .all()
    )
    skills = _names_by_user(db, models.UserSkill, models.Skill, models.UserSkill.skill_id, ids)
    interests = _names_by_user(
        db, models.UserInterest, models.Interest, models.UserInterest.interest_id, ids
    )
    counts = connection_crud.get_mutual_counts(db, ids)

    return [
        _profile_record(
            profile,
            skills.get(profile.user_id, []),
            interests.get(profile.user_id, []),
            counts.get(profile.user_id, 0),
        )
        for profile in profiles
    ]


def get_profile_record(db: Session, user_id: int) -> Optional[dict]:
    records = get_profile_batch(db, [user_id])
    return records[0] if records else None


def _replace_skills(db: Session, user_id: int, names: List[str]) -> None:
    db.query(models.UserSkill).filter(models.UserSkill.user_id == user_id).delete(
        synchronize_session=False
    )
    for name in names:
        skill = get_or_create_skill(db, name)
        db.add(models.UserSkill(user_id=user_id, skill_id=skill.id))


def _replace_interests(db: Session, user_id: int, names: List[str]) -> None:
    db.query(models.UserInterest).filter(models.UserInterest.user_id == user_id).delete(
        synchronize_session=False
    )
    for name in names:
        interest = get_or_create_interest(db, name)
        db.add(models.UserInterest(user_id=user_id, interest_id=interest.id))


def update_profile(db: Session, user_id: int, update: schemas.ProfileUpdate) -> models.Profile:
    profile = get_profile(db, user_id)
    if profile is None:
        raise LookupError("Profile not found")

    data = update.model_dump(exclude_unset=True)
    skills = data.pop("skills", None)
    interests = data.pop("interests", None)

    try:
        for key, value in data.items():
            if key == "open_for" and value is None:
                value = []
            if key == "display_name" and not value:
                continue
            setattr(profile, key, value)

        if skills is not None:
            _replace_skills(db, user_id, skills)
        if interests is not None:
            _replace_interests(db, user_id, interests)

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(profile)
    return profile
