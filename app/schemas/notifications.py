from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict


class NotificationType(StrEnum):
    scout_received = "SCOUT_RECEIVED"
    scout_accepted = "SCOUT_ACCEPTED"
    scout_rejected = "SCOUT_REJECTED"
    application_received = "APPLICATION_RECEIVED"
    application_accepted = "APPLICATION_ACCEPTED"
    project_matched = "PROJECT_MATCHED"
    invoice_created = "INVOICE_CREATED"
    payment_completed = "PAYMENT_COMPLETED"
    verification_approved = "VERIFICATION_APPROVED"
    verification_rejected = "VERIFICATION_REJECTED"
    message_received = "MESSAGE_RECEIVED"
    system = "SYSTEM"


class NotificationOut(BaseModel):
    id: int
    type: NotificationType
    title: str
    message: str
    data: dict[str, Any] | None
    is_read: bool
    read_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
    )


class NotificationListOut(BaseModel):
    notifications: list[NotificationOut]
    total: int
    unread_count: int
    page: int
    limit: int


class UnreadCountOut(BaseModel):
    count: int
