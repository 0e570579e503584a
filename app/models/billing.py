from __future__ import annotations

import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, str_enum
from app.core.timestamps import utcnow
from app.models.projects import Project
from app.models.users import Company, Influencer
from app.schemas.invoices import InvoiceStatus


class Invoice(Base):
    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    invoice_number: Mapped[str] = mapped_column(String(32), unique=True, index=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), index=True)
    project: Mapped[Project] = relationship(init=False)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id"), index=True)
    company: Mapped[Company] = relationship(init=False)
    influencer_id: Mapped[int] = mapped_column(ForeignKey("influencers.id"), index=True)
    influencer: Mapped[Influencer] = relationship(init=False)
    amount: Mapped[int]
    tax: Mapped[int]
    total_amount: Mapped[int]
    due_date: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), default_factory=utcnow
    )
    status: Mapped[InvoiceStatus] = mapped_column(
        str_enum(InvoiceStatus, "invoicestatus"),
        default=InvoiceStatus.pending,
        server_default=InvoiceStatus.pending.value,
    )
    paid_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
