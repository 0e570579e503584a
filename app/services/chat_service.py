"""
Project chat between a company and the influencer matched to its project.

A conversation exists per project once an influencer is matched. Only the two
participants can read or write it; every message is addressed to the other
participant and raises a MESSAGE_RECEIVED notification for them.
"""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.core.errors import BadRequest, Forbidden, NotFound
from app.core.timestamps import utcnow
from app.models.chat import Message
from app.models.projects import Project
from app.models.users import Company, Influencer, User
from app.schemas.notifications import NotificationType
from app.services.notification_service import create_notification

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 80


@dataclass
class Conversation:
    project: Project
    company_user_id: int
    influencer_user_id: int | None

    def counterpart_of(self, user_id: int) -> int | None:
        if user_id == self.company_user_id:
            return self.influencer_user_id
        return self.company_user_id


def _matched_influencer_user_id(db: Session, project: Project) -> int | None:
    if project.matched_influencer_id is None:
        return None
    return db.execute(
        select(Influencer.user_id).where(Influencer.id == project.matched_influencer_id)
    ).scalar_one()


def _get_conversation(db: Session, user: User, project_id: int) -> Conversation:
    project = db.get(Project, project_id)
    if project is None:
        raise NotFound("Project not found")

    conversation = Conversation(
        project=project,
        company_user_id=project.company.user_id,
        influencer_user_id=_matched_influencer_user_id(db, project),
    )
    if user.id not in (conversation.company_user_id, conversation.influencer_user_id):
        raise Forbidden("Not a participant in this project's chat")
    return conversation


def send_message(db: Session, sender: User, project_id: int, content: str) -> Message:
    conversation = _get_conversation(db, sender, project_id)
    receiver_id = conversation.counterpart_of(sender.id)
    if receiver_id is None:
        raise BadRequest("No matched influencer for this project")

    message = Message(
        project_id=project_id,
        sender_id=sender.id,
        receiver_id=receiver_id,
        content=content,
    )
    db.add(message)
    db.flush()

    preview = content
    if len(preview) > PREVIEW_LENGTH:
        preview = preview[:PREVIEW_LENGTH] + "..."
    create_notification(
        db,
        receiver_id,
        NotificationType.message_received,
        f"New message on {conversation.project.title}",
        preview,
        {"project_id": project_id, "message_id": message.id},
    )
    db.commit()
    db.refresh(message)
    logger.info(
        "User %s sent message %s on project %s", sender.id, message.id, project_id
    )
    return message


def get_messages(
    db: Session, user: User, project_id: int, page: int = 1, limit: int = 50
) -> list[Message]:
    """Return one page of the conversation in reading order; page 1 is the newest."""
    _get_conversation(db, user, project_id)
    newest_first = db.execute(
        select(Message)
        .where(Message.project_id == project_id)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).scalars()
    return list(reversed(list(newest_first)))


def mark_messages_as_read(db: Session, user: User, project_id: int) -> int:
    _get_conversation(db, user, project_id)
    result = db.execute(
        update(Message)
        .where(
            Message.project_id == project_id,
            Message.receiver_id == user.id,
            Message.is_read.is_(False),
        )
        .values(is_read=True, read_at=utcnow())
        .execution_options(synchronize_session="fetch")
    )
    db.commit()
    return result.rowcount


def _unread_count(db: Session, user_id: int, project_id: int | None = None) -> int:
    conditions = [Message.receiver_id == user_id, Message.is_read.is_(False)]
    if project_id is not None:
        conditions.append(Message.project_id == project_id)
    return db.execute(select(func.count(Message.id)).where(*conditions)).scalar_one()


def get_unread_count(db: Session, user: User) -> int:
    return _unread_count(db, user.id)


def get_chat_list(db: Session, user: User) -> list[dict[str, Any]]:
    """Matched projects the user takes part in, most recently active first."""
    if user.company is not None:
        rows = db.execute(
            select(Project, Influencer.user_id, Influencer.display_name)
            .join(Influencer, Influencer.id == Project.matched_influencer_id)
            .where(Project.company_id == user.company.id)
        ).all()
    elif user.influencer is not None:
        rows = db.execute(
            select(Project, Company.user_id, Company.company_name)
            .join(Company, Company.id == Project.company_id)
            .where(Project.matched_influencer_id == user.influencer.id)
        ).all()
    else:
        raise Forbidden("Chat is only available to companies and influencers")

    chats = []
    for project, counterpart_user_id, counterpart_name in rows:
        last_message = db.execute(
            select(Message)
            .where(Message.project_id == project.id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(1)
        ).scalar_one_or_none()
        chats.append(
            {
                "project_id": project.id,
                "project_title": project.title,
                "counterpart_user_id": counterpart_user_id,
                "counterpart_name": counterpart_name,
                "last_message": last_message,
                "unread_count": _unread_count(db, user.id, project.id),
            }
        )

    chats.sort(
        key=lambda chat: (
            chat["last_message"].id if chat["last_message"] is not None else 0,
            chat["project_id"],
        ),
        reverse=True,
    )
    return chats
