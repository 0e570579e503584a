from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProjectStatus(StrEnum):
    pending = "PENDING"
    matched = "MATCHED"
    in_progress = "IN_PROGRESS"
    completed = "COMPLETED"
    cancelled = "CANCELLED"


class ScoutStatus(StrEnum):
    pending = "PENDING"
    accepted = "ACCEPTED"
    rejected = "REJECTED"


class ProjectCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=2000)
    category: str = Field(min_length=1, max_length=100)
    budget: int = Field(ge=1000, description="Budget in yen")
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def check_dates(self) -> "ProjectCreate":
        if self.start_date >= self.end_date:
            raise ValueError("End date must be after start date")
        return self


class ProjectOut(BaseModel):
    id: int
    company_id: int
    title: str
    description: str
    category: str
    budget: int
    start_date: date
    end_date: date
    status: ProjectStatus
    matched_influencer_id: int | None
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
    )


class ApplicationCreate(BaseModel):
    message: str | None = Field(default=None, max_length=2000)
    proposed_price: int | None = Field(default=None, ge=0)


class ApplicationOut(BaseModel):
    id: int
    project_id: int
    influencer_id: int
    company_id: int
    message: str | None
    proposed_price: int | None
    is_accepted: bool
    applied_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
    )


class ScoutCreate(BaseModel):
    project_id: int
    influencer_id: int
    message: str | None = Field(default=None, max_length=2000)


class ScoutRejectIn(BaseModel):
    reason: str | None = Field(default=None, max_length=1000)


class ScoutOut(BaseModel):
    id: int
    project_id: int
    influencer_id: int
    company_id: int
    message: str | None
    status: ScoutStatus
    rejection_reason: str | None
    responded_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
    )


class ScoutResponseOut(BaseModel):
    message: str
    scout: ScoutOut


class ScoutListOut(BaseModel):
    scouts: list[ScoutOut]
