import re
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserRole(StrEnum):
    company = "COMPANY"
    influencer = "INFLUENCER"
    admin = "ADMIN"


class UserStatus(StrEnum):
    provisional = "PROVISIONAL"
    verification_pending = "VERIFICATION_PENDING"
    verified = "VERIFIED"
    suspended = "SUSPENDED"


class CompanyStatus(StrEnum):
    provisional = "PROVISIONAL"
    verification_pending = "VERIFICATION_PENDING"
    verified = "VERIFIED"


class VerificationType(StrEnum):
    email = "EMAIL"
    business = "BUSINESS"


class VerificationRecordStatus(StrEnum):
    pending = "PENDING"
    approved = "APPROVED"


_UNSAFE_NAME = re.compile(r"<[^>]*>|['\"\\;]")


def _clean_name(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if _UNSAFE_NAME.search(value):
        raise ValueError("Name contains invalid characters")
    return value or None


class RegisterIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    role: UserRole
    company_name: str | None = Field(default=None, max_length=200)
    legal_number: str | None = Field(default=None, max_length=50)
    representative_name: str | None = Field(default=None, max_length=100)
    industry: str | None = Field(default=None, max_length=100)
    display_name: str | None = Field(default=None, max_length=50)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, value: str) -> str:
        if not (
            re.search(r"[A-Z]", value)
            and re.search(r"[a-z]", value)
            and re.search(r"\d", value)
        ):
            raise ValueError("Password must contain uppercase, lowercase, and number")
        return value

    @field_validator("role")
    @classmethod
    def validate_role(cls, value: UserRole) -> UserRole:
        if value is UserRole.admin:
            raise ValueError("Role must be COMPANY or INFLUENCER")
        return value

    @field_validator(
        "company_name", "representative_name", "industry", "display_name"
    )
    @classmethod
    def validate_names(cls, value: str | None) -> str | None:
        return _clean_name(value)


class UserOut(BaseModel):
    id: int
    email: EmailStr
    role: UserRole
    status: UserStatus
    email_verified_at: datetime | None
    last_login_at: datetime | None

    model_config = ConfigDict(
        from_attributes=True,
    )


class RegisterOut(BaseModel):
    message: str
    user: UserOut
    next_step: str


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"


class VerifyEmailOut(BaseModel):
    user_id: int
    email: EmailStr
    status: UserStatus


class ResendVerificationIn(BaseModel):
    email: EmailStr
