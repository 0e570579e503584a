from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MessageIn(BaseModel):
    content: str = Field(min_length=1, max_length=1000)

    @field_validator("content")
    @classmethod
    def reject_blank_content(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message must not be blank")
        return value


class MessageOut(BaseModel):
    id: int
    project_id: int
    sender_id: int
    receiver_id: int
    content: str
    is_read: bool
    read_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
    )


class MessageListOut(BaseModel):
    messages: list[MessageOut]
    page: int
    limit: int


class ChatSummaryOut(BaseModel):
    project_id: int
    project_title: str
    counterpart_user_id: int
    counterpart_name: str
    last_message: MessageOut | None
    unread_count: int


class ChatListOut(BaseModel):
    chats: list[ChatSummaryOut]
