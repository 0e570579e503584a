from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_company, get_current_user, require_admin
from app.core.database import get_db
from app.models.users import Company, User
from app.schemas.invoices import (
    InvoiceCreate,
    InvoiceEnvelope,
    InvoiceListOut,
    InvoiceOut,
    InvoiceSummaryOut,
)
from app.services import billing_service

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


def _envelope(invoice) -> InvoiceEnvelope:
    return InvoiceEnvelope(invoice=InvoiceOut.model_validate(invoice))


@router.post("", response_model=InvoiceEnvelope, status_code=status.HTTP_201_CREATED)
def create_invoice(
    payload: InvoiceCreate,
    db: Session = Depends(get_db),
    company: Company = Depends(get_current_company),
) -> InvoiceEnvelope:
    invoice = billing_service.create_invoice(
        db, payload.project_id, company.id, payload.influencer_id, payload.amount
    )
    return _envelope(invoice)


@router.get("/pending", response_model=InvoiceListOut)
def list_pending(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> InvoiceListOut:
    invoices = billing_service.list_pending_invoices(db, current_user)
    return InvoiceListOut(invoices=[InvoiceOut.model_validate(i) for i in invoices])


@router.get("/summary", response_model=InvoiceSummaryOut)
def summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"summary": billing_service.get_invoice_summary(db, current_user.id)}


@router.get("/{invoice_id}", response_model=InvoiceEnvelope)
def get_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> InvoiceEnvelope:
    return _envelope(billing_service.get_invoice(db, current_user, invoice_id))


@router.put("/{invoice_id}/paid", response_model=InvoiceEnvelope)
def mark_paid(
    invoice_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> InvoiceEnvelope:
    billing_service.get_payable_invoice(db, current_user, invoice_id)
    return _envelope(billing_service.mark_as_paid(db, invoice_id))


@router.put("/{invoice_id}/overdue", response_model=InvoiceEnvelope)
def mark_overdue(
    invoice_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> InvoiceEnvelope:
    return _envelope(billing_service.mark_as_overdue(db, invoice_id))
