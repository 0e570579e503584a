import logging
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.core.timestamps import utcnow
from app.models.notifications import Notification
from app.models.users import User
from app.schemas.notifications import NotificationType

logger = logging.getLogger(__name__)


def create_notification(
    db: Session,
    user_id: int,
    type_: NotificationType,
    title: str,
    message: str,
    data: dict[str, Any] | None = None,
) -> Notification:
    """
    Stage a notification in the caller's unit of work.

    Nothing is committed here: the row becomes visible together with the state
    transition that produced it, or not at all.
    """
    notification = Notification(
        user_id=user_id,
        type=type_,
        title=title,
        message=message,
        data=data,
    )
    db.add(notification)
    return notification


def _unread_count(db: Session, user_id: int) -> int:
    return db.execute(
        select(func.count(Notification.id)).where(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        )
    ).scalar_one()


def list_notifications(
    db: Session,
    user: User,
    page: int = 1,
    limit: int = 20,
    unread_only: bool = False,
) -> dict[str, Any]:
    conditions = [Notification.user_id == user.id]
    if unread_only:
        conditions.append(Notification.is_read.is_(False))

    total = db.execute(
        select(func.count(Notification.id)).where(*conditions)
    ).scalar_one()
    notifications = db.execute(
        select(Notification)
        .where(*conditions)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).scalars()

    return {
        "notifications": list(notifications),
        "total": total,
        "unread_count": _unread_count(db, user.id),
        "page": page,
        "limit": limit,
    }


def _get_own_notification(db: Session, user: User, notification_id: int) -> Notification:
    notification = db.get(Notification, notification_id)
    if notification is None or notification.user_id != user.id:
        raise NotFound("Notification not found")
    return notification


def mark_as_read(db: Session, user: User, notification_id: int) -> Notification:
    notification = _get_own_notification(db, user, notification_id)
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = utcnow()
        db.commit()
        db.refresh(notification)
    return notification


def mark_all_as_read(db: Session, user: User) -> int:
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user.id, Notification.is_read.is_(False))
        .values(is_read=True, read_at=utcnow())
        .execution_options(synchronize_session="fetch")
    )
    db.commit()
    return result.rowcount


def get_unread_count(db: Session, user: User) -> int:
    return _unread_count(db, user.id)


def delete_notification(db: Session, user: User, notification_id: int) -> None:
    notification = _get_own_notification(db, user, notification_id)
    db.delete(notification)
    db.commit()
    logger.info("Deleted notification %s for user %s", notification_id, user.id)
