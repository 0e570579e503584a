import logging
import re
import secrets
from pathlib import PurePath

from botocore.client import BaseClient
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.aws import object_exists, object_url, presign_document_upload
from app.core.errors import BadRequest, Forbidden, NotFound
from app.core.timestamps import utcnow
from app.models.users import User
from app.models.verification import VerificationDocument
from app.schemas.documents import (
    DOCUMENT_CONTENT_TYPES,
    MAX_DOCUMENT_SIZE,
    DocumentStatus,
    DocumentType,
)
from app.schemas.notifications import NotificationType
from app.schemas.users import CompanyStatus, UserRole, UserStatus
from app.services.notification_service import create_notification

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def _content_type_for(file_name: str, file_size: int) -> str:
    if file_size > MAX_DOCUMENT_SIZE:
        raise BadRequest("File size exceeds the 10MB limit")
    extension = PurePath(file_name).suffix.lower().lstrip(".")
    content_type = DOCUMENT_CONTENT_TYPES.get(extension)
    if content_type is None:
        raise BadRequest("Only PDF, JPG and PNG files are accepted")
    return content_type


def _key_prefix(user: User) -> str:
    return f"documents/{user.id}/"


def build_document_key(user: User, document_type: DocumentType, file_name: str) -> str:
    timestamp = int(utcnow().timestamp() * 1000)
    safe_name = _UNSAFE_KEY_CHARS.sub("_", PurePath(file_name).name)
    return (
        f"{_key_prefix(user)}{document_type.value}/"
        f"{timestamp}-{secrets.token_hex(4)}-{safe_name}"
    )


def create_document_upload(
    s3_client: BaseClient,
    user: User,
    document_type: DocumentType,
    file_name: str,
    file_size: int,
) -> dict[str, str]:
    content_type = _content_type_for(file_name, file_size)
    key = build_document_key(user, document_type, file_name)
    upload_url = presign_document_upload(s3_client, key, content_type)
    return {"key": key, "upload_url": upload_url, "content_type": content_type}


def _owner_ids(user: User) -> tuple[int | None, int | None]:
    if user.role == UserRole.company:
        if user.company is None:
            raise NotFound("Company profile not found")
        return user.company.id, None
    if user.role == UserRole.influencer:
        if user.influencer is None:
            raise NotFound("Influencer profile not found")
        return None, user.influencer.id
    raise BadRequest("Administrators do not submit verification documents")


def upload_verification_document(
    db: Session,
    s3_client: BaseClient,
    user: User,
    document_type: DocumentType,
    key: str,
    file_name: str,
    file_size: int,
) -> VerificationDocument:
    """Record a document the caller already PUT to the presigned URL."""
    company_id, influencer_id = _owner_ids(user)
    _content_type_for(file_name, file_size)
    if not key.startswith(_key_prefix(user)):
        raise Forbidden("Document key does not belong to this user")
    if not object_exists(s3_client, key):
        raise BadRequest("Uploaded file was not found in storage")

    document = VerificationDocument(
        document_type=document_type,
        document_url=object_url(key),
        company_id=company_id,
        influencer_id=influencer_id,
        file_name=file_name,
        file_size=file_size,
    )
    db.add(document)
    db.commit()
    db.refresh(document)
    logger.info("User %s uploaded %s document %s", user.id, document_type, document.id)
    return document


def get_verification_document_status(
    db: Session,
    user: User,
    document_type: DocumentType | None = None,
) -> list[VerificationDocument]:
    company_id, influencer_id = _owner_ids(user)
    stmt = select(VerificationDocument)
    if company_id is not None:
        stmt = stmt.where(VerificationDocument.company_id == company_id)
    else:
        stmt = stmt.where(VerificationDocument.influencer_id == influencer_id)
    if document_type is not None:
        stmt = stmt.where(VerificationDocument.document_type == document_type)
    stmt = stmt.order_by(
        VerificationDocument.uploaded_at.desc(), VerificationDocument.id.desc()
    )
    return list(db.execute(stmt).scalars())


def _get_document(db: Session, document_id: int) -> VerificationDocument:
    document = db.get(VerificationDocument, document_id)
    if document is None:
        raise NotFound("Document not found")
    return document


def _all_approved(db: Session, document: VerificationDocument) -> bool:
    if document.company_id is not None:
        owner = VerificationDocument.company_id == document.company_id
    else:
        owner = VerificationDocument.influencer_id == document.influencer_id
    outstanding = db.execute(
        select(VerificationDocument.id)
        .where(owner, VerificationDocument.status != DocumentStatus.approved)
        .limit(1)
    ).first()
    return outstanding is None


def approve_verification_document(
    db: Session, document_id: int, admin: User
) -> VerificationDocument:
    """
    Approve a single document. Once every document of its owner is approved
    the owner is verified in the same transaction.
    """
    document = _get_document(db, document_id)
    now = utcnow()
    document.status = DocumentStatus.approved
    document.rejection_reason = None
    document.reviewed_at = now
    db.flush()

    if _all_approved(db, document):
        if document.company is not None:
            company = document.company
            company.is_verified = True
            company.verified_at = now
            company.status = CompanyStatus.verified
            owner_user = company.user
        else:
            owner_user = document.influencer.user
        owner_user.status = UserStatus.verified
        create_notification(
            db,
            owner_user.id,
            NotificationType.verification_approved,
            "Verification approved",
            "All of your verification documents have been approved.",
            {"document_id": document.id},
        )
        logger.info("User %s verified after document review", owner_user.id)

    db.commit()
    db.refresh(document)
    logger.info("Admin %s approved document %s", admin.id, document.id)
    return document


def reject_verification_document(
    db: Session, document_id: int, reason: str | None, admin: User
) -> VerificationDocument:
    cleaned = (reason or "").strip()
    if not cleaned:
        raise BadRequest("Rejection reason is required")

    document = _get_document(db, document_id)
    document.status = DocumentStatus.resubmit_required
    document.rejection_reason = cleaned
    document.reviewed_at = utcnow()

    owner_user = (
        document.company.user if document.company is not None else document.influencer.user
    )
    create_notification(
        db,
        owner_user.id,
        NotificationType.verification_rejected,
        "Document resubmission required",
        f"Please resubmit your document: {cleaned}",
        {"document_id": document.id, "reason": cleaned},
    )
    db.commit()
    db.refresh(document)
    logger.info("Admin %s rejected document %s", admin.id, document.id)
    return document
