from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from app.schemas.users import CompanyStatus

MAX_DOCUMENT_SIZE = 10 * 1024 * 1024

DOCUMENT_CONTENT_TYPES = {
    "pdf": "application/pdf",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
}


class DocumentType(StrEnum):
    business_registration = "BUSINESS_REGISTRATION"
    id_document = "ID_DOCUMENT"
    invoice_document = "INVOICE_DOCUMENT"


class DocumentStatus(StrEnum):
    pending = "PENDING"
    approved = "APPROVED"
    rejected = "REJECTED"
    resubmit_required = "RESUBMIT_REQUIRED"


class DocumentDescriptor(BaseModel):
    document_type: DocumentType
    document_url: HttpUrl
    file_name: str = Field(min_length=1, max_length=255)
    file_size: int = Field(gt=0, le=MAX_DOCUMENT_SIZE)


class CompanyDocumentsSubmit(BaseModel):
    documents: list[DocumentDescriptor] = Field(min_length=1)


class DocumentOut(BaseModel):
    id: int
    document_type: DocumentType
    document_url: str
    file_name: str | None
    file_size: int | None
    status: DocumentStatus
    rejection_reason: str | None
    uploaded_at: datetime
    reviewed_at: datetime | None

    model_config = ConfigDict(
        from_attributes=True,
    )


class DocumentUploadIn(BaseModel):
    document_type: DocumentType
    file_name: str = Field(min_length=1, max_length=255)
    file_size: int = Field(gt=0)


class DocumentUploadOut(BaseModel):
    key: str
    upload_url: str
    content_type: str


class DocumentRegisterIn(BaseModel):
    document_type: DocumentType
    key: str = Field(min_length=1)
    file_name: str = Field(min_length=1, max_length=255)
    file_size: int = Field(gt=0)


class DocumentRejectIn(BaseModel):
    rejection_reason: str = Field(max_length=1000)


class CompanyVerificationOut(BaseModel):
    company_id: int
    is_verified: bool
    verified_at: datetime | None
    status: CompanyStatus
    documents: list[DocumentOut]


class PendingCompanyOut(BaseModel):
    id: int
    company_name: str
    status: CompanyStatus
    created_at: datetime
    verification_documents: list[DocumentOut]

    model_config = ConfigDict(
        from_attributes=True,
    )


class PendingCompaniesOut(BaseModel):
    companies: list[PendingCompanyOut]
    total: int


class CompanyRejectIn(BaseModel):
    reason: str = Field(min_length=1, max_length=1000)
