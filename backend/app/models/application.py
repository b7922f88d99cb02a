from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin
from app.models.enums import ApplicationSource, ApplicationStatus, InterviewStatus


class Application(TimestampMixin, Base):
    """
    A candidate's application to a job.

    The (job_id, candidate_id) unique constraint is the only guard against
    duplicate applies; concurrent duplicates resolve to one row.
    """

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("job_id", "candidate_id", name="uniq_app_job_candidate"),
    )

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    candidate_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    status = Column(
        Enum(ApplicationStatus, native_enum=False, length=16),
        nullable=False,
        default=ApplicationStatus.APPLIED,
        index=True,
    )
    source = Column(Enum(ApplicationSource, native_enum=False, length=16))
    resume_url = Column(String(512))
    cover_letter = Column(Text)
    score = Column(Integer)  # 0-100
    tags = Column(JSON)
    notes = Column(Text)

    # Relationships
    job = relationship("Job", back_populates="applications")
    candidate = relationship("User")
    interviews = relationship(
        "Interview",
        back_populates="application",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Interview.scheduled_at",
    )


class Interview(TimestampMixin, Base):
    """Interview scheduled against an application."""

    __tablename__ = "interviews"

    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(
        Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True
    )
    scheduled_at = Column(DateTime, nullable=False)
    duration_minutes = Column(Integer)
    location = Column(String(255))
    meeting_url = Column(String(512))
    status = Column(
        Enum(InterviewStatus, native_enum=False, length=16),
        nullable=False,
        default=InterviewStatus.SCHEDULED,
    )
    feedback = Column(Text)
    rating = Column(Integer)  # 0-10

    application = relationship("Application", back_populates="interviews")
