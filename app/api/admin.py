from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.core.database import get_db
from app.models.users import User
from app.models.verification import VerificationDocument
from app.schemas.documents import (
    CompanyRejectIn,
    CompanyVerificationOut,
    DocumentOut,
    DocumentRejectIn,
    PendingCompaniesOut,
)
from app.schemas.onboarding import OnboardingCompletionRateOut
from app.services import (
    company_verification_service,
    document_verification_service,
    onboarding_service,
)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/companies/pending", response_model=PendingCompaniesOut)
def list_pending_companies(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    companies, total = company_verification_service.list_pending_verifications(
        db, limit, offset
    )
    return {"companies": companies, "total": total}


@router.put("/companies/{company_id}/approve", response_model=CompanyVerificationOut)
def approve_company(
    company_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    company_verification_service.approve_company_verification(db, company_id)
    return company_verification_service.get_verification_status(db, company_id)


@router.put("/companies/{company_id}/reject", response_model=CompanyVerificationOut)
def reject_company(
    company_id: int,
    payload: CompanyRejectIn,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    company_verification_service.reject_company_verification(
        db, company_id, payload.reason.strip()
    )
    return company_verification_service.get_verification_status(db, company_id)


@router.put("/documents/{document_id}/approve", response_model=DocumentOut)
def approve_document(
    document_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> VerificationDocument:
    return document_verification_service.approve_verification_document(
        db, document_id, admin
    )


@router.put("/documents/{document_id}/reject", response_model=DocumentOut)
def reject_document(
    document_id: int,
    payload: DocumentRejectIn,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> VerificationDocument:
    return document_verification_service.reject_verification_document(
        db, document_id, payload.rejection_reason, admin
    )


@router.get(
    "/onboarding/completion-rate", response_model=OnboardingCompletionRateOut
)
def onboarding_completion_rate(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    return onboarding_service.get_onboarding_completion_rate(db)
