from pydantic import BaseModel

from app.schemas.documents import DocumentOut
from app.schemas.onboarding import OnboardingProgressOut
from app.schemas.users import UserOut, UserStatus


class RegistrationStatusOut(BaseModel):
    user: UserOut
    status: UserStatus
    email_verified: bool
    business_verified: bool
    documents: list[DocumentOut]
    onboarding: OnboardingProgressOut | None
