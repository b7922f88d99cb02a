from sqlalchemy import JSON, Column, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class CandidateProfile(TimestampMixin, Base):
    """Candidate-only attributes, one row per candidate user."""

    __tablename__ = "candidate_profiles"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    first_name = Column(String(191))
    last_name = Column(String(191))
    date_of_birth = Column(Date)
    avatar_url = Column(String(512))
    resume_url = Column(String(512))
    career_objective = Column(Text)

    # Ordered lists of structured records
    # education: [{"degree": ..., "institution": ..., "graduation_year": 2020}, ...]
    # experience: [{"position": ..., "company": ..., "duration": ..., "responsibilities": ...}, ...]
    education = Column(JSON)
    experience = Column(JSON)

    user = relationship("User", back_populates="candidate_profile")


class RecruiterProfile(TimestampMixin, Base):
    """Recruiter-only attributes, one row per recruiter user."""

    __tablename__ = "recruiter_profiles"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    first_name = Column(String(191))
    last_name = Column(String(191))
    date_of_birth = Column(Date)
    company_name = Column(String(191))
    position = Column(String(191))
    avatar_url = Column(String(512))

    user = relationship("User", back_populates="recruiter_profile")
