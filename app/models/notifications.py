import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, str_enum
from app.schemas.notifications import NotificationType


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    type: Mapped[NotificationType] = mapped_column(
        str_enum(NotificationType, "notificationtype")
    )
    title: Mapped[str] = mapped_column(String(200))
    message: Mapped[str]
    data: Mapped[dict[str, Any] | None] = mapped_column(JSON, default=None)
    is_read: Mapped[bool] = mapped_column(default=False, server_default="0")
    read_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=func.now(),
        server_default=func.now(),
        init=False,
    )
