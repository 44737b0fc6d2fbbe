from typing import List

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session, aliased

from teamup import models


# ============================
# READS
# ============================

def is_requested(db: Session, user_id: int, target_user_id: int) -> bool:
    return db.query(models.Connection.id).filter(
        models.Connection.user_id == user_id,
        models.Connection.target_user_id == target_user_id,
    ).first() is not None


def is_mutual(db: Session, user_a: int, user_b: int) -> bool:
    return is_requested(db, user_a, user_b) and is_requested(db, user_b, user_a)


def connection_status(db: Session, user_id: int, other_id: int) -> str:
    sent = is_requested(db, user_id, other_id)
    received = is_requested(db, other_id, user_id)
    if sent and received:
        return "CONNECTED"
    if sent:
        return "SENT"
    if received:
        return "RECEIVED"
    return "NONE"


def get_connection_pairs(db: Session, user_id: int) -> List[int]:
    """Every user linked to `user_id` by a request row in either direction."""
    rows = db.query(models.Connection.user_id, models.Connection.target_user_id).filter(
        or_(
            models.Connection.user_id == user_id,
            models.Connection.target_user_id == user_id,
        )
    ).all()

    linked = set()
    for requester, target in rows:
        linked.add(target if requester == user_id else requester)
    linked.discard(user_id)
    return sorted(linked)


def _mutual_query(db: Session):
    reverse = aliased(models.Connection)
    return db.query(models.Connection).join(
        reverse,
        and_(
            reverse.user_id == models.Connection.target_user_id,
            reverse.target_user_id == models.Connection.user_id,
        ),
    )


def get_mutual_ids(db: Session, user_id: int) -> List[int]:
    rows = _mutual_query(db).filter(models.Connection.user_id == user_id).all()
    return sorted(row.target_user_id for row in rows)


def get_mutual_counts(db: Session, user_ids) -> dict:
    """Mutual connection count per user id; users with none are omitted."""
    ids = list(user_ids)
    if not ids:
        return {}
    reverse = aliased(models.Connection)
    rows = (
        db.query(models.Connection.user_id, func.count(models.Connection.id))
        .join(
            reverse,
            and_(
                reverse.user_id == models.Connection.target_user_id,
                reverse.target_user_id == models.Connection.user_id,
            ),
        )
        .filter(models.Connection.user_id.in_(ids))
        .group_by(models.Connection.user_id)
        .all()
    )
    return {user_id: int(count) for user_id, count in rows}


def get_pending_request_ids(db: Session, user_id: int) -> List[int]:
    """Users who requested `user_id` and have not been requested back."""
    incoming = db.query(models.Connection.user_id).filter(
        models.Connection.target_user_id == user_id
    ).all()
    outgoing = set(
        row.target_user_id
        for row in db.query(models.Connection.target_user_id).filter(
            models.Connection.user_id == user_id
        ).all()
    )
    return sorted(row.user_id for row in incoming if row.user_id not in outgoing)


# ============================
# WRITES
# ============================

def create_request(db: Session, user_id: int, target_user_id: int) -> bool:
    """
    Insert the user -> target row if missing.

    Returns True when the pair is mutual afterwards. Accepting an incoming
    request is the same operation.
    """
    if user_id == target_user_id:
        raise ValueError("You cannot connect with yourself")

    target = db.query(models.User.id).filter(models.User.id == target_user_id).first()
    if not target:
        raise LookupError("Target user not found")

    if not is_requested(db, user_id, target_user_id):
        db.add(models.Connection(user_id=user_id, target_user_id=target_user_id))
        db.commit()

    return is_requested(db, target_user_id, user_id)


def reject_request(db: Session, user_id: int, requester_id: int) -> int:
    deleted = db.query(models.Connection).filter(
        models.Connection.user_id == requester_id,
        models.Connection.target_user_id == user_id,
    ).delete(synchronize_session=False)
    db.commit()
    return int(deleted)


def remove_connection(db: Session, user_id: int, other_id: int) -> int:
    deleted = db.query(models.Connection).filter(
        or_(
            and_(models.Connection.user_id == user_id, models.Connection.target_user_id == other_id),
            and_(models.Connection.user_id == other_id, models.Connection.target_user_id == user_id),
        )
    ).delete(synchronize_session=False)
    db.commit()
    return int(deleted)
