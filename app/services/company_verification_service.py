import logging
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.core.timestamps import utcnow
from app.models.users import Company
from app.models.verification import VerificationDocument
from app.schemas.documents import DocumentDescriptor, DocumentStatus
from app.schemas.notifications import NotificationType
from app.schemas.users import (
    CompanyStatus,
    UserStatus,
    VerificationRecordStatus,
    VerificationType,
)
from app.services.notification_service import create_notification
from app.services.verification_record_service import upsert_verification_record

logger = logging.getLogger(__name__)


def _get_company(db: Session, company_id: int) -> Company:
    company = db.get(Company, company_id)
    if company is None:
        raise NotFound("Company not found")
    return company


def submit_verification_documents(
    db: Session,
    company_id: int,
    documents: list[DocumentDescriptor],
) -> list[VerificationDocument]:
    company = _get_company(db, company_id)

    created = [
        VerificationDocument(
            document_type=descriptor.document_type,
            document_url=str(descriptor.document_url),
            company_id=company.id,
            file_name=descriptor.file_name,
            file_size=descriptor.file_size,
        )
        for descriptor in documents
    ]
    db.add_all(created)
    company.status = CompanyStatus.verification_pending
    company.user.status = UserStatus.verification_pending
    db.commit()

    for document in created:
        db.refresh(document)
    logger.info(
        "Company %s submitted %d verification documents", company.id, len(created)
    )
    return created


def get_verification_status(db: Session, company_id: int) -> dict[str, Any]:
    company = _get_company(db, company_id)
    return {
        "company_id": company.id,
        "is_verified": company.is_verified,
        "verified_at": company.verified_at,
        "status": company.status,
        "documents": list(company.verification_documents),
    }


def approve_company_verification(db: Session, company_id: int) -> Company:
    """Verify the company, its owner and every document it submitted, atomically."""
    company = _get_company(db, company_id)
    now = utcnow()

    company.is_verified = True
    company.verified_at = now
    company.status = CompanyStatus.verified
    company.user.status = UserStatus.verified

    db.execute(
        update(VerificationDocument)
        .where(VerificationDocument.company_id == company.id)
        .values(status=DocumentStatus.approved, reviewed_at=now)
        .execution_options(synchronize_session="fetch")
    )
    upsert_verification_record(
        db,
        company.user_id,
        VerificationType.business,
        VerificationRecordStatus.approved,
        now,
    )
    create_notification(
        db,
        company.user_id,
        NotificationType.verification_approved,
        "Verification approved",
        f"{company.company_name} has been verified.",
        {"company_id": company.id},
    )
    db.commit()
    db.refresh(company)
    logger.info("Company %s verification approved", company.id)
    return company


def reject_company_verification(db: Session, company_id: int, reason: str) -> Company:
    company = _get_company(db, company_id)
    now = utcnow()

    db.execute(
        update(VerificationDocument)
        .where(VerificationDocument.company_id == company.id)
        .values(
            status=DocumentStatus.rejected,
            rejection_reason=reason,
            reviewed_at=now,
        )
        .execution_options(synchronize_session="fetch")
    )
    company.is_verified = False
    company.verified_at = None
    company.status = CompanyStatus.provisional
    company.user.status = UserStatus.provisional
    create_notification(
        db,
        company.user_id,
        NotificationType.verification_rejected,
        "Verification rejected",
        f"Your verification documents were rejected: {reason}",
        {"company_id": company.id, "reason": reason},
    )
    db.commit()
    db.refresh(company)
    logger.info("Company %s verification rejected", company.id)
    return company


def list_pending_verifications(
    db: Session, limit: int = 20, offset: int = 0
) -> tuple[list[Company], int]:
    pending = (
        Company.is_verified.is_(False),
        Company.verification_documents.any(),
    )
    total = db.execute(select(func.count(Company.id)).where(*pending)).scalar_one()
    companies = db.execute(
        select(Company)
        .where(*pending)
        .order_by(Company.created_at.asc(), Company.id.asc())
        .offset(offset)
        .limit(limit)
    ).scalars()
    return list(companies), total
