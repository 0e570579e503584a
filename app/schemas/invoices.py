from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class InvoiceStatus(StrEnum):
    pending = "PENDING"
    paid = "PAID"
    overdue = "OVERDUE"


class InvoiceCreate(BaseModel):
    project_id: int
    influencer_id: int
    amount: int = Field(gt=0, description="Amount in yen before tax")


class InvoiceOut(BaseModel):
    id: int
    invoice_number: str
    project_id: int
    company_id: int
    influencer_id: int
    amount: int
    tax: int
    total_amount: int
    due_date: datetime
    status: InvoiceStatus
    paid_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
    )


class InvoiceEnvelope(BaseModel):
    invoice: InvoiceOut


class InvoiceListOut(BaseModel):
    invoices: list[InvoiceOut]


class InvoiceSummary(BaseModel):
    total_earnings: int
    pending: int
    paid: int


class InvoiceSummaryOut(BaseModel):
    summary: InvoiceSummary
