from sqlalchemy import JSON, Boolean, Column, Date, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin
from app.models.enums import JobStatus, JobType


class Job(TimestampMixin, Base):
    """
    Job posting owned by a recruiter.

    Survives the deletion of its recruiter (recruiter_id becomes NULL).
    Only DRAFT jobs accept free-form edits; see services.job_lifecycle.
    """

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    recruiter_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), index=True, nullable=True)

    title = Column(String(191), nullable=False)
    company_name = Column(String(191))
    location = Column(String(191))
    remote_flexible = Column(Boolean, nullable=False, default=False)
    job_type = Column(Enum(JobType, native_enum=False, length=16))
    salary = Column(Integer)
    interview_duration = Column(Integer)  # minutes
    commencement_date = Column(Date)
    intro = Column(Text)
    description = Column(Text)

    # Ordered lists of strings
    responsibilities = Column(JSON)
    requirements = Column(JSON)
    qualifications = Column(JSON)
    other_details = Column(JSON)

    # Weighted skills: [{"name": "Python", "weight": 80}, ...]
    skills_soft = Column(JSON)
    skills_technical = Column(JSON)
    skills_cognitive = Column(JSON)

    hiring_start_date = Column(Date)
    hiring_end_date = Column(Date)
    application_start_date = Column(Date)
    application_end_date = Column(Date)
    position_close_date = Column(Date)

    allow_international = Column(Boolean, nullable=False, default=False)
    shortlist = Column(Boolean, nullable=False, default=False)
    auto_offer = Column(Boolean, nullable=False, default=False)

    status = Column(
        Enum(JobStatus, native_enum=False, length=16),
        nullable=False,
        default=JobStatus.DRAFT,
        index=True,
    )

    # Relationships
    recruiter = relationship("User")
    applications = relationship(
        "Application",
        back_populates="job",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
