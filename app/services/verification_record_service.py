from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.verification import VerificationRecord
from app.schemas.users import VerificationRecordStatus, VerificationType


def upsert_verification_record(
    db: Session,
    user_id: int,
    type_: VerificationType,
    status: VerificationRecordStatus,
    verified_at: datetime | None,
) -> VerificationRecord:
    """Create or update the single record for ``(user_id, type_)``; never commits."""
    record = db.execute(
        select(VerificationRecord).where(
            VerificationRecord.user_id == user_id,
            VerificationRecord.type == type_,
        )
    ).scalar_one_or_none()
    if record is None:
        record = VerificationRecord(user_id=user_id, type=type_)
        db.add(record)
    record.status = status
    record.verified_at = verified_at
    return record


def get_verification_record(
    db: Session, user_id: int, type_: VerificationType
) -> VerificationRecord | None:
    return db.execute(
        select(VerificationRecord).where(
            VerificationRecord.user_id == user_id,
            VerificationRecord.type == type_,
        )
    ).scalar_one_or_none()
