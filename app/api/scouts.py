from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.database import get_db
from app.models.users import User
from app.schemas.projects import (
    ScoutCreate,
    ScoutListOut,
    ScoutOut,
    ScoutRejectIn,
    ScoutResponseOut,
    ScoutStatus,
)
from app.services import scout_service

router = APIRouter(prefix="/api/scouts", tags=["scouts"])


@router.post("", response_model=ScoutResponseOut, status_code=status.HTTP_201_CREATED)
def send_scout(
    payload: ScoutCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ScoutResponseOut:
    scout = scout_service.send_scout_invitation(
        db, current_user, payload.project_id, payload.influencer_id, payload.message
    )
    return ScoutResponseOut(message="Scout sent", scout=ScoutOut.model_validate(scout))


@router.put("/{scout_id}/accept", response_model=ScoutResponseOut)
def accept_scout(
    scout_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ScoutResponseOut:
    scout = scout_service.accept_scout(db, current_user, scout_id)
    return ScoutResponseOut(
        message="Scout accepted", scout=ScoutOut.model_validate(scout)
    )


@router.put("/{scout_id}/reject", response_model=ScoutResponseOut)
def reject_scout(
    scout_id: int,
    payload: ScoutRejectIn | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ScoutResponseOut:
    reason = payload.reason if payload else None
    scout = scout_service.reject_scout(db, current_user, scout_id, reason)
    return ScoutResponseOut(
        message="Scout rejected", scout=ScoutOut.model_validate(scout)
    )


@router.get("/my/invitations", response_model=ScoutListOut)
def my_invitations(
    status_filter: ScoutStatus | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ScoutListOut:
    scouts = scout_service.list_my_scout_invitations(db, current_user, status_filter)
    return ScoutListOut(scouts=[ScoutOut.model_validate(s) for s in scouts])


@router.get("/my/sent", response_model=ScoutListOut)
def my_sent(
    status_filter: ScoutStatus | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ScoutListOut:
    scouts = scout_service.list_my_sent_scouts(db, current_user, status_filter)
    return ScoutListOut(scouts=[ScoutOut.model_validate(s) for s in scouts])


@router.get("/{scout_id}", response_model=ScoutOut)
def get_scout(
    scout_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return scout_service.get_scout(db, current_user, scout_id)
