from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.database import get_db
from app.core.errors import NotFound
from app.models.users import User
from app.schemas.onboarding import (
    OnboardingProgressOut,
    OnboardingStepDefinition,
    OnboardingStepIn,
)
from app.services import onboarding_service

router = APIRouter(prefix="/api/onboarding", tags=["onboarding"])


@router.get("", response_model=OnboardingProgressOut)
def get_progress(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    progress = onboarding_service.get_onboarding_progress(db, current_user.id)
    if progress is None:
        raise NotFound("Onboarding progress not found")
    return progress


@router.post("/initialize", response_model=OnboardingProgressOut)
def initialize(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    onboarding_service.initialize_onboarding(db, current_user.id, current_user.role)
    return onboarding_service.get_onboarding_progress(db, current_user.id)


@router.post("/steps/complete", response_model=OnboardingProgressOut)
def complete_step(
    payload: OnboardingStepIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    onboarding_service.complete_onboarding_step(db, current_user.id, payload.step)
    return onboarding_service.get_onboarding_progress(db, current_user.id)


@router.post("/skip", response_model=OnboardingProgressOut)
def skip(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    onboarding_service.skip_onboarding(db, current_user.id)
    return onboarding_service.get_onboarding_progress(db, current_user.id)


@router.get("/steps", response_model=list[OnboardingStepDefinition])
def list_steps(current_user: User = Depends(get_current_user)):
    return onboarding_service.get_onboarding_steps(current_user.role)
