import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import BadRequest, Conflict, Forbidden, NotFound
from app.core.security import check_password, hash_password, password_needs_rehash
from app.core.timestamps import utcnow
from app.models.users import Company, Influencer, User
from app.models.verification import VerificationDocument
from app.schemas.users import (
    RegisterIn,
    UserRole,
    UserStatus,
    VerificationRecordStatus,
    VerificationType,
)
from app.services import onboarding_service
from app.services.email_verification_service import (
    build_verification_link,
    issue_verification_token,
)
from app.services.verification_record_service import get_verification_record

logger = logging.getLogger(__name__)

NEXT_STEP_VERIFY_EMAIL = "VERIFY_EMAIL"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.execute(
        select(User).where(User.email == normalize_email(email))
    ).scalar_one_or_none()


def register_user(db: Session, payload: RegisterIn) -> tuple[User, str]:
    """
    Create a provisional account with its profile, onboarding row and first
    verification token in one commit. Returns the user and the link to email.
    """
    email = normalize_email(payload.email)
    if get_user_by_email(db, email) is not None:
        raise Conflict("Email is already registered")

    if payload.role == UserRole.company and not payload.company_name:
        raise BadRequest("Company name is required")
    if payload.role == UserRole.influencer and not payload.display_name:
        raise BadRequest("Display name is required")

    user = User(
        email=email,
        role=payload.role,
        password_hash=hash_password(payload.password),
    )
    db.add(user)
    try:
        db.flush()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same address.
        db.rollback()
        raise Conflict("Email is already registered")

    if payload.role == UserRole.company:
        db.add(
            Company(
                user_id=user.id,
                company_name=payload.company_name,
                legal_number=payload.legal_number,
                representative_name=payload.representative_name,
                industry=payload.industry,
            )
        )
    else:
        db.add(Influencer(user_id=user.id, display_name=payload.display_name))

    onboarding_service.ensure_onboarding(db, user.id, payload.role)
    _, raw_token = issue_verification_token(db, user.id)
    db.commit()
    db.refresh(user)

    logger.info("Registered %s user %s", user.role, user.id)
    return user, build_verification_link(raw_token)


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Return the user for valid credentials, or None. Suspended accounts are
    refused before anything about the login is recorded."""
    user = get_user_by_email(db, email)
    if not user or not check_password(password, user.password_hash):
        return None
    if user.status == UserStatus.suspended:
        raise Forbidden("Account is suspended")
    if password_needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
    user.last_login_at = utcnow()
    db.commit()
    db.refresh(user)
    return user


def get_registration_status(db: Session, user_id: int) -> dict[str, Any]:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")

    business = get_verification_record(db, user.id, VerificationType.business)
    owner = user.company or user.influencer
    documents: list[VerificationDocument] = (
        list(owner.verification_documents) if owner is not None else []
    )
    return {
        "user": user,
        "status": user.status,
        "email_verified": user.email_verified_at is not None,
        "business_verified": business is not None
        and business.status == VerificationRecordStatus.approved,
        "documents": documents,
        "onboarding": onboarding_service.get_onboarding_progress(db, user.id),
    }
