from __future__ import annotations

import datetime

from sqlalchemy import Date, DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, str_enum
from app.models.users import Company, Influencer
from app.schemas.projects import ProjectStatus, ScoutStatus


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id"), index=True)
    company: Mapped[Company] = relationship(init=False)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str]
    category: Mapped[str] = mapped_column(String(100))
    budget: Mapped[int]
    start_date: Mapped[datetime.date] = mapped_column(Date)
    end_date: Mapped[datetime.date] = mapped_column(Date)
    status: Mapped[ProjectStatus] = mapped_column(
        str_enum(ProjectStatus, "projectstatus"),
        default=ProjectStatus.pending,
        server_default=ProjectStatus.pending.value,
    )
    matched_influencer_id: Mapped[int | None] = mapped_column(
        ForeignKey("influencers.id"), default=None
    )
    matched_influencer: Mapped[Influencer | None] = relationship(init=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=func.now(),
        server_default=func.now(),
        init=False,
    )


class Application(Base):
    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    project: Mapped[Project] = relationship(init=False)
    influencer_id: Mapped[int] = mapped_column(ForeignKey("influencers.id"), index=True)
    influencer: Mapped[Influencer] = relationship(init=False)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id"), index=True)
    company: Mapped[Company] = relationship(init=False)
    message: Mapped[str | None] = mapped_column(default=None)
    proposed_price: Mapped[int | None] = mapped_column(default=None)
    is_accepted: Mapped[bool] = mapped_column(default=False, server_default="0")
    applied_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=func.now(),
        server_default=func.now(),
        init=False,
    )

    __table_args__ = (
        UniqueConstraint(
            "project_id", "influencer_id", name="uq_applications_project_influencer"
        ),
    )


class Scout(Base):
    __tablename__ = "scouts"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    project: Mapped[Project] = relationship(init=False)
    influencer_id: Mapped[int] = mapped_column(ForeignKey("influencers.id"), index=True)
    influencer: Mapped[Influencer] = relationship(init=False)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id"), index=True)
    company: Mapped[Company] = relationship(init=False)
    message: Mapped[str | None] = mapped_column(default=None)
    status: Mapped[ScoutStatus] = mapped_column(
        str_enum(ScoutStatus, "scoutstatus"),
        default=ScoutStatus.pending,
        server_default=ScoutStatus.pending.value,
    )
    rejection_reason: Mapped[str | None] = mapped_column(default=None)
    responded_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=func.now(),
        server_default=func.now(),
        init=False,
    )

    __table_args__ = (
        UniqueConstraint(
            "project_id", "influencer_id", name="uq_scouts_project_influencer"
        ),
    )
