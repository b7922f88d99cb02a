"""
Job request/response schemas.

Patch models are dumped with ``exclude_unset=True``: a key that is absent
means "leave unchanged", an explicit ``null`` means "clear", anything else
is the new value.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from app.models.enums import JobStatus, JobType


class SkillItem(BaseModel):
    """Schema for a weighted skill."""

    name: str = Field(min_length=1)
    weight: int = Field(ge=0, le=100)


class JobFields(BaseModel):
    """Editable job fields shared by create and update."""

    company_name: Optional[str] = Field(None, min_length=1, max_length=191)
    location: Optional[str] = Field(None, min_length=1, max_length=191)
    job_type: Optional[JobType] = None
    salary: Optional[int] = Field(None, ge=0)
    interview_duration: Optional[int] = Field(None, ge=0)
    commencement_date: Optional[date] = None
    intro: Optional[str] = None
    description: Optional[str] = None
    responsibilities: Optional[list[str]] = None
    requirements: Optional[list[str]] = None
    qualifications: Optional[list[str]] = None
    other_details: Optional[dict[str, Any]] = None
    skills_soft: Optional[list[SkillItem]] = None
    skills_technical: Optional[list[SkillItem]] = None
    skills_cognitive: Optional[list[SkillItem]] = None
    hiring_start_date: Optional[date] = None
    hiring_end_date: Optional[date] = None
    application_start_date: Optional[date] = None
    application_end_date: Optional[date] = None
    position_close_date: Optional[date] = None


class JobCreate(JobFields):
    """Schema for job creation. The initial status must be explicit."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=1, max_length=191)
    remote_flexible: bool = False
    allow_international: bool = False
    shortlist: bool = False
    # Older clients still send auto_close
    auto_offer: bool = Field(False, validation_alias=AliasChoices("auto_offer", "auto_close"))
    status: JobStatus

    @field_validator("status")
    @classmethod
    def validate_initial_status(cls, v: JobStatus) -> JobStatus:
        if v not in (JobStatus.DRAFT, JobStatus.PUBLISHED):
            raise ValueError("status must be DRAFT or PUBLISHED on create")
        return v


# Columns that are NOT NULL in the jobs table; a patch may not clear them
NON_NULLABLE_FIELDS = {
    "title",
    "remote_flexible",
    "allow_international",
    "shortlist",
    "auto_offer",
    "status",
}


class JobUpdate(JobFields):
    """Schema for partial job updates."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    title: Optional[str] = Field(None, min_length=1, max_length=191)
    remote_flexible: Optional[bool] = None
    allow_international: Optional[bool] = None
    shortlist: Optional[bool] = None
    auto_offer: Optional[bool] = Field(None, validation_alias=AliasChoices("auto_offer", "auto_close"))
    status: Optional[JobStatus] = None

    @model_validator(mode="after")
    def reject_null_required(self) -> "JobUpdate":
        cleared = sorted(
            name for name in self.model_fields_set
            if name in NON_NULLABLE_FIELDS and getattr(self, name) is None
        )
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return self

    def changes(self) -> dict[str, Any]:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class JobOut(BaseModel):
    """Schema for a job as returned to its recruiter or the public."""

    id: int
    recruiter_id: Optional[int]
    title: str
    company_name: Optional[str] = None
    location: Optional[str] = None
    remote_flexible: bool
    job_type: Optional[JobType] = None
    salary: Optional[int] = None
    interview_duration: Optional[int] = None
    commencement_date: Optional[date] = None
    intro: Optional[str] = None
    description: Optional[str] = None
    responsibilities: Optional[list[str]] = None
    requirements: Optional[list[str]] = None
    qualifications: Optional[list[str]] = None
    other_details: Optional[dict[str, Any]] = None
    skills_soft: Optional[list[SkillItem]] = None
    skills_technical: Optional[list[SkillItem]] = None
    skills_cognitive: Optional[list[SkillItem]] = None
    hiring_start_date: Optional[date] = None
    hiring_end_date: Optional[date] = None
    application_start_date: Optional[date] = None
    application_end_date: Optional[date] = None
    position_close_date: Optional[date] = None
    allow_international: bool
    shortlist: bool
    auto_offer: bool
    status: JobStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class JobEnvelope(BaseModel):
    """Schema for single-job responses."""

    id: int
    job: JobOut
    path: Optional[str] = None


class JobList(BaseModel):
    jobs: list[JobOut]
    total: Optional[int] = None
