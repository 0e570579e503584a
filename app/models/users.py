from __future__ import annotations

import datetime

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, str_enum
from app.schemas.users import CompanyStatus, UserRole, UserStatus


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    role: Mapped[UserRole] = mapped_column(str_enum(UserRole, "userrole"))
    password_hash: Mapped[str | None] = mapped_column(default=None, repr=False)
    status: Mapped[UserStatus] = mapped_column(
        str_enum(UserStatus, "userstatus"),
        default=UserStatus.provisional,
        server_default=UserStatus.provisional.value,
    )
    email_verified_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
    last_login_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=func.now(),
        server_default=func.now(),
        init=False,
    )

    company: Mapped[Company | None] = relationship(
        back_populates="user", init=False, uselist=False
    )
    influencer: Mapped[Influencer | None] = relationship(
        back_populates="user", init=False, uselist=False
    )


class Company(Base):
    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True)
    user: Mapped[User] = relationship(back_populates="company", init=False)
    company_name: Mapped[str] = mapped_column(String(200))
    legal_number: Mapped[str | None] = mapped_column(String(50), default=None)
    representative_name: Mapped[str | None] = mapped_column(
        String(100), default=None
    )
    industry: Mapped[str | None] = mapped_column(String(100), default=None)
    is_verified: Mapped[bool] = mapped_column(default=False, server_default="0")
    verified_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
    status: Mapped[CompanyStatus] = mapped_column(
        str_enum(CompanyStatus, "companystatus"),
        default=CompanyStatus.provisional,
        server_default=CompanyStatus.provisional.value,
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=func.now(),
        server_default=func.now(),
        init=False,
    )

    verification_documents: Mapped[list["VerificationDocument"]] = relationship(  # type: ignore  # noqa: F821
        back_populates="company",
        init=False,
        order_by="VerificationDocument.uploaded_at.desc()",
    )


class Influencer(Base):
    __tablename__ = "influencers"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True)
    user: Mapped[User] = relationship(back_populates="influencer", init=False)
    display_name: Mapped[str] = mapped_column(String(50))
    bio: Mapped[str | None] = mapped_column(default=None)
    prefecture: Mapped[str | None] = mapped_column(String(50), default=None)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=func.now(),
        server_default=func.now(),
        init=False,
    )

    verification_documents: Mapped[list["VerificationDocument"]] = relationship(  # type: ignore  # noqa: F821
        back_populates="influencer",
        init=False,
        order_by="VerificationDocument.uploaded_at.desc()",
    )
    social_accounts: Mapped[list["SocialAccount"]] = relationship(  # type: ignore  # noqa: F821
        back_populates="influencer",
        init=False,
        order_by="SocialAccount.id",
    )
