import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.core.timestamps import utcnow
from app.models.onboarding import OnboardingProgress
from app.schemas.onboarding import OnboardingStep
from app.schemas.users import UserRole

logger = logging.getLogger(__name__)

TOTAL_STEPS = len(OnboardingStep)

_COMPANY_STEPS = [
    (OnboardingStep.dashboard, "Reading the dashboard", "Learn the basics of the dashboard", "2 min"),
    (OnboardingStep.influencer_search, "Finding influencers", "Search for influencers that match your criteria", "3 min"),
    (OnboardingStep.project_creation, "Creating a project", "Create and publish a new project", "5 min"),
    (OnboardingStep.scouting, "Sending scouts", "Invite influencers to your project", "3 min"),
    (OnboardingStep.matching_flow, "After matching", "From chat to delivery", "4 min"),
    (OnboardingStep.billing, "Invoices and payment", "How invoices are issued and paid", "3 min"),
    (OnboardingStep.completed, "Setup complete", "You are ready to go", "1 min"),
]

_INFLUENCER_STEPS = [
    (OnboardingStep.dashboard, "Reading the dashboard", "Learn the basics of the dashboard", "2 min"),
    (OnboardingStep.influencer_search, "Completing your profile", "Build a profile companies want to scout", "4 min"),
    (OnboardingStep.project_creation, "Finding projects", "Search for projects that match you", "3 min"),
    (OnboardingStep.scouting, "Applying", "How to apply to a project", "3 min"),
    (OnboardingStep.matching_flow, "After matching", "From chat to delivery", "4 min"),
    (OnboardingStep.billing, "Getting paid", "How and when rewards are transferred", "3 min"),
    (OnboardingStep.completed, "Setup complete", "You are ready to go", "1 min"),
]

_CATALOG = {
    UserRole.company: _COMPANY_STEPS,
    UserRole.influencer: _INFLUENCER_STEPS,
}


def _get_progress(db: Session, user_id: int) -> OnboardingProgress | None:
    return db.execute(
        select(OnboardingProgress).where(OnboardingProgress.user_id == user_id)
    ).scalar_one_or_none()


def ensure_onboarding(db: Session, user_id: int, role: UserRole) -> OnboardingProgress:
    """Stage a progress row for ``user_id`` unless one exists; never commits."""
    progress = _get_progress(db, user_id)
    if progress is None:
        progress = OnboardingProgress(user_id=user_id, role=role)
        db.add(progress)
    return progress


def initialize_onboarding(db: Session, user_id: int, role: UserRole) -> OnboardingProgress:
    progress = ensure_onboarding(db, user_id, role)
    db.commit()
    db.refresh(progress)
    return progress


def complete_onboarding_step(
    db: Session, user_id: int, step: OnboardingStep
) -> OnboardingProgress:
    progress = _get_progress(db, user_id)
    if progress is None:
        raise NotFound("Onboarding progress not found")

    if step.value in progress.completed_steps:
        return progress

    # JSON columns only track reassignment.
    progress.completed_steps = [*progress.completed_steps, step.value]
    if len(progress.completed_steps) >= TOTAL_STEPS and progress.completed_at is None:
        progress.completed_at = utcnow()
        logger.info("User %s completed onboarding", user_id)
    db.commit()
    db.refresh(progress)
    return progress


def skip_onboarding(db: Session, user_id: int) -> OnboardingProgress:
    progress = _get_progress(db, user_id)
    if progress is None:
        raise NotFound("Onboarding progress not found")

    now = utcnow()
    progress.skipped = True
    progress.skipped_at = now
    progress.completed_at = now
    db.commit()
    db.refresh(progress)
    logger.info("User %s skipped onboarding", user_id)
    return progress


def get_onboarding_progress(db: Session, user_id: int) -> dict[str, Any] | None:
    progress = _get_progress(db, user_id)
    if progress is None:
        return None

    completed = len(progress.completed_steps)
    return {
        "user_id": progress.user_id,
        "role": progress.role,
        "completed_steps": progress.completed_steps,
        "skipped": progress.skipped,
        "started_at": progress.started_at,
        "skipped_at": progress.skipped_at,
        "completed_at": progress.completed_at,
        "progress": {
            "completed": completed,
            "total": TOTAL_STEPS,
            "percentage": round(completed / TOTAL_STEPS * 100),
        },
        "is_completed": progress.completed_at is not None,
    }


def get_onboarding_steps(role: UserRole) -> list[dict[str, str]]:
    return [
        {"step": step, "title": title, "description": description, "duration": duration}
        for step, title, description, duration in _CATALOG.get(role, [])
    ]


def get_onboarding_completion_rate(db: Session) -> dict[str, int]:
    total = db.execute(select(func.count(OnboardingProgress.id))).scalar_one()
    completed = db.execute(
        select(func.count(OnboardingProgress.id)).where(
            OnboardingProgress.completed_at.is_not(None)
        )
    ).scalar_one()
    rate = round(completed / total * 100) if total else 0
    return {"total": total, "completed": completed, "rate": rate}
