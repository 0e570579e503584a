import logging
from datetime import timedelta

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.errors import (
    Conflict,
    NotFound,
    TokenAlreadyUsed,
    TokenExpired,
    TokenNotFound,
)
from app.core.security import digest_token, new_email_token
from app.core.timestamps import coerce_utc, utcnow
from app.models.users import User
from app.models.verification import EmailVerificationToken
from app.schemas.users import UserStatus, VerificationRecordStatus, VerificationType
from app.services import email_service
from app.services.verification_record_service import upsert_verification_record

logger = logging.getLogger(__name__)

settings = get_settings()

TOKEN_TTL = timedelta(hours=24)


def build_verification_link(raw_token: str) -> str:
    return f"{settings.frontend_url.rstrip('/')}/verify-email?token={raw_token}"


def _unused_token_pair(db: Session) -> tuple[str, str]:
    raw_token, token_hash = new_email_token()
    exists = db.execute(
        select(EmailVerificationToken.id).where(
            EmailVerificationToken.token_hash == token_hash
        )
    ).first()
    if exists:
        return _unused_token_pair(db)
    return raw_token, token_hash


def issue_verification_token(
    db: Session, user_id: int
) -> tuple[EmailVerificationToken, str]:
    """Stage a fresh token for ``user_id`` and return it with its raw value."""
    raw_token, token_hash = _unused_token_pair(db)
    now = utcnow()
    token = EmailVerificationToken(
        user_id=user_id,
        token_hash=token_hash,
        expires_at=now + TOKEN_TTL,
        created_at=now,
    )
    db.add(token)
    return token, raw_token


def create_email_verification(
    db: Session, user_id: int
) -> tuple[EmailVerificationToken, str]:
    token, raw_token = issue_verification_token(db, user_id)
    db.commit()
    db.refresh(token)
    return token, build_verification_link(raw_token)


def send_email_verification(
    db: Session, user_id: int, email: str
) -> EmailVerificationToken:
    token, link = create_email_verification(db, user_id)
    email_service.send_verification_email(email, link)
    return token


def verify_email_token(db: Session, raw_token: str) -> User:
    token = db.execute(
        select(EmailVerificationToken).where(
            EmailVerificationToken.token_hash == digest_token(raw_token)
        )
    ).scalar_one_or_none()
    if token is None:
        raise TokenNotFound("Invalid verification token")

    now = utcnow()
    if now > coerce_utc(token.expires_at):
        raise TokenExpired("Verification token has expired")
    if token.used_at is not None:
        raise TokenAlreadyUsed("Verification token has already been used")

    user = token.user
    token.used_at = now
    user.email_verified_at = now
    user.status = UserStatus.verification_pending
    upsert_verification_record(
        db,
        user.id,
        VerificationType.email,
        VerificationRecordStatus.approved,
        now,
    )
    db.commit()
    db.refresh(user)
    logger.info("Email verified for user %s", user.id)
    return user


def resend_email_verification(db: Session, user_id: int) -> str:
    """Replace every unused token of the user with a single new one; return its link."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    if user.email_verified_at is not None:
        raise Conflict("Email is already verified")

    db.execute(
        delete(EmailVerificationToken)
        .where(
            EmailVerificationToken.user_id == user_id,
            EmailVerificationToken.used_at.is_(None),
        )
        .execution_options(synchronize_session="fetch")
    )
    _, link = create_email_verification(db, user_id)
    logger.info("Verification token reissued for user %s", user_id)
    return link


def get_email_verification_status(db: Session, user_id: int) -> bool:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user.email_verified_at is not None
