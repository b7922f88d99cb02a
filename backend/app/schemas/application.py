from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator, model_validator

from app.models.enums import ApplicationSource, ApplicationStatus, InterviewStatus, JobStatus


# ============== Requests ==============


def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Timestamps are stored as naive UTC
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class ApplyRequest(BaseModel):
    """Schema for a candidate applying to a published job."""

    job_id: int = Field(gt=0)
    resume_url: Optional[HttpUrl] = None
    cover_letter: Optional[str] = Field(None, max_length=10000)


class ApplicationPatch(BaseModel):
    """Schema for recruiter updates to an application; any subset."""

    model_config = ConfigDict(extra="forbid")

    status: Optional[ApplicationStatus] = None
    score: Optional[int] = Field(None, ge=0, le=100)
    tags: Optional[list[str]] = None
    notes: Optional[str] = Field(None, max_length=20000)

    @model_validator(mode="after")
    def reject_null_status(self) -> "ApplicationPatch":
        if "status" in self.model_fields_set and self.status is None:
            raise ValueError("status cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class InterviewCreate(BaseModel):
    """Schema for scheduling an interview."""

    scheduled_at: datetime
    duration_minutes: Optional[int] = Field(None, gt=0)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    meeting_url: Optional[HttpUrl] = None

    normalize_scheduled_at = field_validator("scheduled_at")(_to_naive_utc)


class InterviewPatch(BaseModel):
    """Schema for partial interview updates."""

    model_config = ConfigDict(extra="forbid")

    scheduled_at: Optional[datetime] = None
    duration_minutes: Optional[int] = Field(None, gt=0)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    meeting_url: Optional[HttpUrl] = None
    status: Optional[InterviewStatus] = None
    feedback: Optional[str] = Field(None, max_length=20000)
    rating: Optional[int] = Field(None, ge=0, le=10)

    normalize_scheduled_at = field_validator("scheduled_at")(_to_naive_utc)

    @model_validator(mode="after")
    def reject_null_required(self) -> "InterviewPatch":
        for name in ("scheduled_at", "status"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        if data.get("meeting_url") is not None:
            # URLs are stored as plain strings
            data["meeting_url"] = str(data["meeting_url"])
        return data


# ============== Responses ==============


class ApplicationOut(BaseModel):
    id: int
    job_id: int
    candidate_id: int
    status: ApplicationStatus
    source: Optional[ApplicationSource] = None
    resume_url: Optional[str] = None
    cover_letter: Optional[str] = None
    score: Optional[int] = None
    tags: Optional[list[str]] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class InterviewOut(BaseModel):
    id: int
    application_id: int
    scheduled_at: datetime
    duration_minutes: Optional[int] = None
    location: Optional[str] = None
    meeting_url: Optional[str] = None
    status: InterviewStatus
    feedback: Optional[str] = None
    rating: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class JobSummary(BaseModel):
    id: int
    recruiter_id: Optional[int] = None
    title: str
    status: JobStatus


class CandidateSummary(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None


class CandidateProfileSummary(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    resume_url: Optional[str] = None


class ApplicationDetail(BaseModel):
    """Application with its job, candidate and candidate profile summaries."""

    application: ApplicationOut
    job: JobSummary
    candidate: CandidateSummary
    profile: CandidateProfileSummary


class ApplicationListItem(ApplicationOut):
    """Row in a recruiter's per-job application list."""

    candidate: CandidateSummary
    profile: CandidateProfileSummary


class CandidateApplicationItem(ApplicationOut):
    """Row in a candidate's own application list."""

    job: JobSummary


class CreatedResponse(BaseModel):
    """Location of a newly created resource."""

    id: int
    path: str
    url: str


class ApplicationList(BaseModel):
    applications: list[ApplicationListItem]


class CandidateApplicationList(BaseModel):
    applications: list[CandidateApplicationItem]


class InterviewList(BaseModel):
    interviews: list[InterviewOut]
