from botocore.client import BaseClient
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.aws import get_s3_client
from app.core.database import get_db
from app.models.users import User
from app.models.verification import VerificationDocument
from app.schemas.documents import (
    DocumentOut,
    DocumentRegisterIn,
    DocumentType,
    DocumentUploadIn,
    DocumentUploadOut,
)
from app.schemas.registration import RegistrationStatusOut
from app.schemas.users import (
    RegisterIn,
    RegisterOut,
    ResendVerificationIn,
    UserOut,
    VerifyEmailOut,
)
from app.services import (
    document_verification_service,
    email_verification_service,
    registration_service,
)
from app.services.email_service import send_verification_email

router = APIRouter(prefix="/api/chapter1", tags=["registration"])

RESEND_MESSAGE = "If the account exists and is unverified, a new verification email will be sent."


@router.post("/register", response_model=RegisterOut, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterIn,
    bg: BackgroundTasks,
    db: Session = Depends(get_db),
) -> RegisterOut:
    user, link = registration_service.register_user(db, payload)
    bg.add_task(send_verification_email, user.email, link)
    return RegisterOut(
        message="Registration successful. Please check your email.",
        user=UserOut.model_validate(user),
        next_step=registration_service.NEXT_STEP_VERIFY_EMAIL,
    )


@router.get("/verify-email", response_model=VerifyEmailOut)
def verify_email(
    token: str = Query(min_length=1),
    db: Session = Depends(get_db),
) -> VerifyEmailOut:
    user = email_verification_service.verify_email_token(db, token)
    return VerifyEmailOut(user_id=user.id, email=user.email, status=user.status)


@router.post("/resend-verification")
def resend_verification(
    payload: ResendVerificationIn,
    bg: BackgroundTasks,
    db: Session = Depends(get_db),
):
    user = registration_service.get_user_by_email(db, payload.email)
    if user and user.email_verified_at is None:
        link = email_verification_service.resend_email_verification(db, user.id)
        bg.add_task(send_verification_email, user.email, link)
    return {"message": RESEND_MESSAGE}


@router.get("/registration-status", response_model=RegistrationStatusOut)
def registration_status(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return registration_service.get_registration_status(db, current_user.id)


@router.post("/documents/upload-url", response_model=DocumentUploadOut)
def create_document_upload(
    payload: DocumentUploadIn,
    current_user: User = Depends(get_current_user),
    s3_client: BaseClient = Depends(get_s3_client),
):
    return document_verification_service.create_document_upload(
        s3_client,
        current_user,
        payload.document_type,
        payload.file_name,
        payload.file_size,
    )


@router.post(
    "/documents",
    response_model=DocumentOut,
    status_code=status.HTTP_201_CREATED,
)
def register_document(
    payload: DocumentRegisterIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    s3_client: BaseClient = Depends(get_s3_client),
) -> VerificationDocument:
    return document_verification_service.upload_verification_document(
        db,
        s3_client,
        current_user,
        payload.document_type,
        payload.key,
        payload.file_name,
        payload.file_size,
    )


@router.get("/documents", response_model=list[DocumentOut])
def list_documents(
    document_type: DocumentType | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[VerificationDocument]:
    return document_verification_service.get_verification_document_status(
        db, current_user, document_type
    )
