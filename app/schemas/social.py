from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Platform(StrEnum):
    tiktok = "TIKTOK"
    youtube = "YOUTUBE"
    twitter = "TWITTER"


class SocialAccountCreate(BaseModel):
    platform: Platform
    username: str = Field(min_length=1, max_length=100)

    @field_validator("username")
    @classmethod
    def strip_at_sign(cls, value: str) -> str:
        value = value.strip().lstrip("@")
        if not value:
            raise ValueError("Username is required")
        return value


class SocialAccountOut(BaseModel):
    id: int
    influencer_id: int
    platform: Platform
    username: str
    follower_count: int
    engagement_rate: float
    last_synced_at: datetime | None

    model_config = ConfigDict(
        from_attributes=True,
    )


class SyncFailure(BaseModel):
    account_id: int
    platform: Platform
    error: str


class SyncResultOut(BaseModel):
    synced: list[SocialAccountOut]
    failed: list[SyncFailure]


class SyncStatusOut(BaseModel):
    total_accounts: int
    accounts: list[SocialAccountOut]
