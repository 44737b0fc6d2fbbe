from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from teamup import models
from teamup.crud import connection as connection_crud
from teamup.crud import profile as profile_crud
from teamup.database import get_db
from teamup.schemas.connection import ConnectionActionResponse, ConnectionCount, ConnectionRequest
from teamup.schemas.user import ProfileOut
from teamup.utils.security import get_current_user

router = APIRouter(prefix="/connections", tags=["Connections"])


def _send_request(db: Session, user_id: int, target_user_id: int) -> bool:
    try:
        return connection_crud.create_request(db, user_id, target_user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


# ======================
# POST: Send a request
# ======================
@router.post("/create", response_model=ConnectionActionResponse)
def create_connection(
    payload: ConnectionRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    already_sent = connection_crud.is_requested(db, current_user.id, payload.target_user_id)
    is_mutual = _send_request(db, current_user.id, payload.target_user_id)
    return {
        "message": "Request already sent" if already_sent else "Connection request sent",
        "is_mutual": is_mutual,
    }


# ======================
# POST: Accept an incoming request (adds my row)
# ======================
@router.post("/accept", response_model=ConnectionActionResponse)
def accept_connection(
    payload: ConnectionRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    is_mutual = _send_request(db, current_user.id, payload.target_user_id)
    return {"message": "Connection accepted", "is_mutual": is_mutual}


# ======================
# POST: Reject an incoming request (deletes their row)
# ======================
@router.post("/reject", response_model=ConnectionActionResponse)
def reject_connection(
    payload: ConnectionRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    connection_crud.reject_request(db, current_user.id, payload.target_user_id)
    return {"message": "Request rejected"}


# ======================
# GET: My mutual connections
# ======================
@router.get("/", response_model=List[ProfileOut])
def get_my_connections(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return profile_crud.get_profile_batch(db, connection_crud.get_mutual_ids(db, current_user.id))


# ======================
# GET: Incoming requests I have not answered
# ======================
@router.get("/requests", response_model=List[ProfileOut])
def get_pending_requests(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return profile_crud.get_profile_batch(
        db, connection_crud.get_pending_request_ids(db, current_user.id)
    )


# ======================
# GET: Public mutual connection count
# ======================
@router.get("/count/{user_id}", response_model=ConnectionCount)
def get_connection_count(user_id: int, db: Session = Depends(get_db)):
    return {"count": connection_crud.get_mutual_counts(db, [user_id]).get(user_id, 0)}


# ======================
# DELETE: Disconnect (removes both directions)
# ======================
@router.delete("/{target_user_id}", response_model=ConnectionActionResponse)
def remove_connection(
    target_user_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    connection_crud.remove_connection(db, current_user.id, target_user_id)
    return {"message": "Connection removed"}
