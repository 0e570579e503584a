from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_influencer, get_current_user, require_admin
from app.core.database import get_db
from app.models.social import SocialAccount
from app.models.users import Influencer, User
from app.schemas.social import (
    SocialAccountCreate,
    SocialAccountOut,
    SyncResultOut,
    SyncStatusOut,
)
from app.services import social_sync_service

router = APIRouter(prefix="/api/sns", tags=["sns"])


@router.post(
    "/accounts",
    response_model=SocialAccountOut,
    status_code=status.HTTP_201_CREATED,
)
def register_account(
    payload: SocialAccountCreate,
    db: Session = Depends(get_db),
    influencer: Influencer = Depends(get_current_influencer),
) -> SocialAccount:
    return social_sync_service.register_social_account(
        db, influencer, payload.platform, payload.username
    )


@router.post("/sync/{account_id}", response_model=SocialAccountOut)
def sync_account(
    account_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SocialAccount:
    return social_sync_service.sync_social_account(db, current_user, account_id)


@router.post("/sync-all", response_model=SyncResultOut)
def sync_my_accounts(
    db: Session = Depends(get_db),
    influencer: Influencer = Depends(get_current_influencer),
):
    return social_sync_service.sync_all_influencer_accounts(db, influencer.id)


@router.post("/admin/sync-all", status_code=status.HTTP_202_ACCEPTED)
def sync_everyone(
    bg: BackgroundTasks,
    _: User = Depends(require_admin),
):
    bg.add_task(social_sync_service.sync_all_influencers)
    return {"message": "Sync started"}


@router.get("/status", response_model=SyncStatusOut)
def sync_status(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    accounts = social_sync_service.get_sync_status(db, current_user)
    return {"total_accounts": len(accounts), "accounts": accounts}
