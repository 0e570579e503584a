from app.core.database import Base
from app.models.billing import Invoice
from app.models.chat import Message
from app.models.notifications import Notification
from app.models.onboarding import OnboardingProgress
from app.models.projects import Application, Project, Scout
from app.models.social import SocialAccount
from app.models.users import Company, Influencer, User
from app.models.verification import (
    EmailVerificationToken,
    VerificationDocument,
    VerificationRecord,
)

__all__ = [
    "Application",
    "Base",
    "Company",
    "EmailVerificationToken",
    "Influencer",
    "Invoice",
    "Message",
    "Notification",
    "OnboardingProgress",
    "Project",
    "Scout",
    "SocialAccount",
    "User",
    "VerificationDocument",
    "VerificationRecord",
]
