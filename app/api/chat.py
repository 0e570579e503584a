from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.database import get_db
from app.models.chat import Message
from app.models.users import User
from app.schemas.chat import ChatListOut, MessageIn, MessageListOut, MessageOut
from app.schemas.notifications import UnreadCountOut
from app.services import chat_service

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.get("/list", response_model=ChatListOut)
def chat_list(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"chats": chat_service.get_chat_list(db, current_user)}


@router.get("/unread-count", response_model=UnreadCountOut)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"count": chat_service.get_unread_count(db, current_user)}


@router.get("/{project_id}/messages", response_model=MessageListOut)
def list_messages(
    project_id: int,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    messages = chat_service.get_messages(db, current_user, project_id, page, limit)
    return {"messages": messages, "page": page, "limit": limit}


@router.post(
    "/{project_id}/messages",
    response_model=MessageOut,
    status_code=status.HTTP_201_CREATED,
)
def send_message(
    project_id: int,
    payload: MessageIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Message:
    return chat_service.send_message(db, current_user, project_id, payload.content)


@router.put("/{project_id}/read")
def mark_read(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    updated = chat_service.mark_messages_as_read(db, current_user, project_id)
    return {"updated": updated}
