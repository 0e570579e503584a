import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, str_enum
from app.core.timestamps import utcnow
from app.schemas.users import UserRole


class OnboardingProgress(Base):
    __tablename__ = "onboarding_progress"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True
    )
    role: Mapped[UserRole] = mapped_column(str_enum(UserRole, "userrole"))
    # Ordered list of OnboardingStep values; reassigned, never mutated in place.
    completed_steps: Mapped[list[str]] = mapped_column(JSON, default_factory=list)
    skipped: Mapped[bool] = mapped_column(default=False, server_default="0")
    started_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), default_factory=utcnow
    )
    skipped_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
    completed_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=func.now(),
        server_default=func.now(),
        onupdate=func.now(),
        init=False,
    )
