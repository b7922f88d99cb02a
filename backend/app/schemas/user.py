import re
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator, model_validator

from app.models.enums import Role

EMAIL_PATTERN = r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$"
PHONE_PATTERN = r"^[+0-9\s\-()]+$"


def _stringify_urls(data: dict[str, Any], *names: str) -> dict[str, Any]:
    # URLs are stored as plain strings
    for name in names:
        if data.get(name) is not None:
            data[name] = str(data[name])
    return data


def _validate_email(v: str) -> str:
    if not re.match(EMAIL_PATTERN, v):
        raise ValueError("Invalid email format")
    return v.lower()


# ============== Accounts ==============


class UserRegister(BaseModel):
    """Schema for user registration."""

    email: str
    password: str = Field(min_length=8)
    name: Optional[str] = Field(None, min_length=1, max_length=191)
    phone: Optional[str] = Field(None, min_length=7, max_length=20, pattern=PHONE_PATTERN)
    role: Role = Role.CANDIDATE

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Validate email format."""
        return _validate_email(v)


class UserLogin(BaseModel):
    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _validate_email(v)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8)
    repeat_new_password: str = Field(min_length=8)

    @model_validator(mode="after")
    def check_passwords(self) -> "ChangePasswordRequest":
        if self.new_password != self.repeat_new_password:
            raise ValueError("Passwords do not match")
        if self.new_password == self.current_password:
            raise ValueError("New password must be different from current password")
        return self


class RefreshRequest(BaseModel):
    """Refresh token may come in the body when the cookie is unavailable."""

    refresh_token: Optional[str] = None


class UserResponse(BaseModel):
    """Schema for user response (without password)."""

    id: int
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    role: Role

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    """Schema for JWT token response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse


# ============== Profiles ==============


class EducationItem(BaseModel):
    degree: str = Field(min_length=1)
    institution: str = Field(min_length=1)
    graduation_year: Optional[int] = Field(None, ge=1900, le=2100)


class ExperienceItem(BaseModel):
    position: str = Field(min_length=1)
    company: str = Field(min_length=1)
    duration: Optional[str] = None
    responsibilities: Optional[str] = None


class CandidateProfilePatch(BaseModel):
    """Schema for candidate profile updates; may also carry user name/phone."""

    model_config = ConfigDict(extra="forbid")

    first_name: Optional[str] = Field(None, min_length=1, max_length=191)
    last_name: Optional[str] = Field(None, min_length=1, max_length=191)
    date_of_birth: Optional[date] = None
    avatar_url: Optional[HttpUrl] = None
    resume_url: Optional[HttpUrl] = None
    career_objective: Optional[str] = Field(None, max_length=5000)
    education: Optional[list[EducationItem]] = None
    experience: Optional[list[ExperienceItem]] = None
    name: Optional[str] = Field(None, min_length=1, max_length=191)
    phone: Optional[str] = Field(None, min_length=6, max_length=32)

    def changes(self) -> dict[str, Any]:
        return _stringify_urls(self.model_dump(exclude_unset=True), "avatar_url", "resume_url")


class RecruiterProfilePatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    first_name: Optional[str] = Field(None, min_length=1, max_length=191)
    last_name: Optional[str] = Field(None, min_length=1, max_length=191)
    date_of_birth: Optional[date] = None
    company_name: Optional[str] = Field(None, min_length=1, max_length=191)
    position: Optional[str] = Field(None, min_length=1, max_length=191)
    avatar_url: Optional[HttpUrl] = None

    def changes(self) -> dict[str, Any]:
        return _stringify_urls(self.model_dump(exclude_unset=True), "avatar_url")


class CandidateProfileOut(BaseModel):
    user_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    avatar_url: Optional[str] = None
    resume_url: Optional[str] = None
    career_objective: Optional[str] = None
    education: Optional[list[EducationItem]] = None
    experience: Optional[list[ExperienceItem]] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RecruiterProfileOut(BaseModel):
    user_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    company_name: Optional[str] = None
    position: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CandidateMe(BaseModel):
    user: UserResponse
    profile: Optional[CandidateProfileOut] = None


class RecruiterMe(BaseModel):
    user: UserResponse
    profile: Optional[RecruiterProfileOut] = None


class RecruiterPublic(BaseModel):
    """Public recruiter card; email, phone and date of birth stay private."""

    id: int
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company_name: Optional[str] = None
    position: Optional[str] = None
    avatar_url: Optional[str] = None
