from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from app.schemas.users import UserRole


class OnboardingStep(StrEnum):
    dashboard = "DASHBOARD"
    influencer_search = "INFLUENCER_SEARCH"
    project_creation = "PROJECT_CREATION"
    scouting = "SCOUTING"
    matching_flow = "MATCHING_FLOW"
    billing = "BILLING"
    completed = "COMPLETED"


class OnboardingStepIn(BaseModel):
    step: OnboardingStep


class OnboardingStepDefinition(BaseModel):
    step: OnboardingStep
    title: str
    description: str
    duration: str


class OnboardingCounts(BaseModel):
    completed: int
    total: int
    percentage: int


class OnboardingProgressOut(BaseModel):
    user_id: int
    role: UserRole
    completed_steps: list[OnboardingStep]
    skipped: bool
    started_at: datetime
    skipped_at: datetime | None
    completed_at: datetime | None
    progress: OnboardingCounts | None = None
    is_completed: bool | None = None

    model_config = ConfigDict(
        from_attributes=True,
    )


class OnboardingCompletionRateOut(BaseModel):
    total: int
    completed: int
    rate: int
