import logging
import secrets
from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import BadRequest, Conflict, Forbidden, NotFound
from app.core.timestamps import utcnow
from app.models.billing import Invoice
from app.models.projects import Project
from app.models.users import Influencer, User
from app.schemas.invoices import InvoiceStatus
from app.schemas.notifications import NotificationType
from app.schemas.users import UserRole
from app.services.notification_service import create_notification

logger = logging.getLogger(__name__)

TAX_RATE_PERCENT = 10
PAYMENT_TERM = timedelta(days=30)
INVOICE_NUMBER_ATTEMPTS = 5


def generate_invoice_number(now: datetime | None = None) -> str:
    now = now or utcnow()
    return f"INV-{now:%Y%m%d}-{secrets.randbelow(10000):04d}"


def compute_tax(amount: int) -> int:
    return amount * TAX_RATE_PERCENT // 100


def _unique_invoice_number(db: Session, now: datetime) -> str:
    for _ in range(INVOICE_NUMBER_ATTEMPTS):
        number = generate_invoice_number(now)
        taken = db.execute(
            select(Invoice.id).where(Invoice.invoice_number == number)
        ).first()
        if not taken:
            return number
    raise Conflict("Could not allocate an invoice number, please retry")


def create_invoice(
    db: Session,
    project_id: int,
    company_id: int,
    influencer_id: int,
    amount: int,
) -> Invoice:
    project = db.get(Project, project_id)
    if project is None:
        raise NotFound("Project not found")
    if project.company_id != company_id:
        raise Forbidden("Not allowed to invoice this project")
    if db.get(Influencer, influencer_id) is None:
        raise NotFound("Influencer not found")

    now = utcnow()
    tax = compute_tax(amount)
    invoice = Invoice(
        invoice_number=_unique_invoice_number(db, now),
        project_id=project.id,
        company_id=company_id,
        influencer_id=influencer_id,
        amount=amount,
        tax=tax,
        total_amount=amount + tax,
        due_date=now + PAYMENT_TERM,
        created_at=now,
    )
    db.add(invoice)
    create_notification(
        db,
        project.company.user_id,
        NotificationType.invoice_created,
        "Invoice issued",
        f"Invoice {invoice.invoice_number} for {invoice.total_amount} yen was issued.",
        {"invoice_number": invoice.invoice_number, "project_id": project.id},
    )
    db.commit()
    db.refresh(invoice)
    logger.info("Invoice %s created for project %s", invoice.invoice_number, project.id)
    return invoice


def _require_pending(invoice: Invoice, action: str) -> None:
    if invoice.status != InvoiceStatus.pending:
        raise BadRequest(
            f"Only pending invoices can be {action}; this one is {invoice.status}"
        )


def _get_invoice(db: Session, invoice_id: int) -> Invoice:
    invoice = db.get(Invoice, invoice_id)
    if invoice is None:
        raise NotFound("Invoice not found")
    return invoice


def _is_party(user: User, invoice: Invoice) -> bool:
    if user.company is not None and invoice.company_id == user.company.id:
        return True
    return user.influencer is not None and invoice.influencer_id == user.influencer.id


def get_invoice(db: Session, user: User, invoice_id: int) -> Invoice:
    invoice = _get_invoice(db, invoice_id)
    if not _is_party(user, invoice):
        raise Forbidden("Not allowed to view this invoice")
    return invoice


def list_pending_invoices(db: Session, user: User) -> list[Invoice]:
    stmt = select(Invoice).where(Invoice.status == InvoiceStatus.pending)
    if user.role == UserRole.company and user.company is not None:
        stmt = stmt.where(Invoice.company_id == user.company.id)
    elif user.role == UserRole.influencer and user.influencer is not None:
        stmt = stmt.where(Invoice.influencer_id == user.influencer.id)
    else:
        return []
    return list(db.execute(stmt.order_by(Invoice.due_date.asc())).scalars())


def get_payable_invoice(db: Session, user: User, invoice_id: int) -> Invoice:
    invoice = _get_invoice(db, invoice_id)
    if user.company is None or invoice.company_id != user.company.id:
        raise Forbidden("Only the invoiced company can mark this invoice as paid")
    return invoice


def mark_as_paid(db: Session, invoice_id: int) -> Invoice:
    invoice = _get_invoice(db, invoice_id)
    _require_pending(invoice, "marked as paid")
    invoice.status = InvoiceStatus.paid
    invoice.paid_at = utcnow()
    create_notification(
        db,
        invoice.influencer.user_id,
        NotificationType.payment_completed,
        "Payment completed",
        f"Invoice {invoice.invoice_number} has been paid.",
        {"invoice_id": invoice.id, "amount": invoice.total_amount},
    )
    db.commit()
    db.refresh(invoice)
    logger.info("Invoice %s marked as paid", invoice.invoice_number)
    return invoice


def mark_as_overdue(db: Session, invoice_id: int) -> Invoice:
    invoice = _get_invoice(db, invoice_id)
    _require_pending(invoice, "marked as overdue")
    invoice.status = InvoiceStatus.overdue
    db.commit()
    db.refresh(invoice)
    logger.info("Invoice %s marked as overdue", invoice.invoice_number)
    return invoice


def get_invoice_summary(db: Session, user_id: int) -> dict[str, int]:
    influencer = db.execute(
        select(Influencer).where(Influencer.user_id == user_id)
    ).scalar_one_or_none()
    if influencer is None:
        return {"total_earnings": 0, "pending": 0, "paid": 0}

    invoices = db.execute(
        select(Invoice.status, Invoice.total_amount).where(
            Invoice.influencer_id == influencer.id
        )
    ).all()
    total_earnings = sum(total for _, total in invoices)
    paid = sum(total for status, total in invoices if status == InvoiceStatus.paid)
    pending = sum(total for status, total in invoices if status == InvoiceStatus.pending)
    return {"total_earnings": total_earnings, "pending": pending, "paid": paid}
