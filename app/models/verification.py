from __future__ import annotations

import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, str_enum
from app.core.timestamps import utcnow
from app.models.users import Company, Influencer, User
from app.schemas.documents import DocumentStatus, DocumentType
from app.schemas.users import VerificationRecordStatus, VerificationType


class EmailVerificationToken(Base):
    __tablename__ = "email_verification_tokens"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    user: Mapped[User] = relationship(init=False)
    token_hash: Mapped[str] = mapped_column(unique=True, index=True, repr=False)
    expires_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), default_factory=utcnow
    )
    used_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )


class VerificationRecord(Base):
    __tablename__ = "verification_records"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    type: Mapped[VerificationType] = mapped_column(
        str_enum(VerificationType, "verificationtype")
    )
    status: Mapped[VerificationRecordStatus] = mapped_column(
        str_enum(VerificationRecordStatus, "verificationrecordstatus"),
        default=VerificationRecordStatus.pending,
    )
    verified_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )

    __table_args__ = (
        UniqueConstraint("user_id", "type", name="uq_verification_records_user_type"),
    )


class VerificationDocument(Base):
    __tablename__ = "verification_documents"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    document_type: Mapped[DocumentType] = mapped_column(
        str_enum(DocumentType, "documenttype")
    )
    document_url: Mapped[str] = mapped_column(String(1024))
    company_id: Mapped[int | None] = mapped_column(
        ForeignKey("companies.id", ondelete="CASCADE"), index=True, default=None
    )
    company: Mapped[Company | None] = relationship(
        back_populates="verification_documents", init=False
    )
    influencer_id: Mapped[int | None] = mapped_column(
        ForeignKey("influencers.id", ondelete="CASCADE"), index=True, default=None
    )
    influencer: Mapped[Influencer | None] = relationship(
        back_populates="verification_documents", init=False
    )
    file_name: Mapped[str | None] = mapped_column(String(255), default=None)
    file_size: Mapped[int | None] = mapped_column(default=None)
    status: Mapped[DocumentStatus] = mapped_column(
        str_enum(DocumentStatus, "documentstatus"),
        default=DocumentStatus.pending,
        server_default=DocumentStatus.pending.value,
    )
    rejection_reason: Mapped[str | None] = mapped_column(default=None)
    uploaded_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=func.now(),
        server_default=func.now(),
        init=False,
    )
    reviewed_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )

    __table_args__ = (
        CheckConstraint(
            "(company_id IS NULL) <> (influencer_id IS NULL)",
            name="ck_verification_documents_single_owner",
        ),
    )
