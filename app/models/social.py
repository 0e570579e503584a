from __future__ import annotations

import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, str_enum
from app.models.users import Influencer
from app.schemas.social import Platform


class SocialAccount(Base):
    __tablename__ = "social_accounts"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    influencer_id: Mapped[int] = mapped_column(
        ForeignKey("influencers.id", ondelete="CASCADE"), index=True
    )
    influencer: Mapped[Influencer] = relationship(
        back_populates="social_accounts", init=False
    )
    platform: Mapped[Platform] = mapped_column(str_enum(Platform, "platform"))
    username: Mapped[str] = mapped_column(String(100))
    follower_count: Mapped[int] = mapped_column(default=0, server_default="0")
    engagement_rate: Mapped[float] = mapped_column(default=0.0, server_default="0")
    last_synced_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )

    __table_args__ = (
        UniqueConstraint(
            "influencer_id", "platform", name="uq_social_accounts_influencer_platform"
        ),
    )
