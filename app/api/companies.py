from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_company
from app.core.database import get_db
from app.models.users import Company
from app.schemas.documents import CompanyDocumentsSubmit, CompanyVerificationOut
from app.services import company_verification_service

router = APIRouter(prefix="/api/companies/me/verification", tags=["verification"])


@router.get("", response_model=CompanyVerificationOut)
def get_my_verification(
    db: Session = Depends(get_db),
    company: Company = Depends(get_current_company),
):
    return company_verification_service.get_verification_status(db, company.id)


@router.post(
    "",
    response_model=CompanyVerificationOut,
    status_code=status.HTTP_201_CREATED,
)
def submit_my_documents(
    payload: CompanyDocumentsSubmit,
    db: Session = Depends(get_db),
    company: Company = Depends(get_current_company),
):
    company_verification_service.submit_verification_documents(
        db, company.id, payload.documents
    )
    return company_verification_service.get_verification_status(db, company.id)
