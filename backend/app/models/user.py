from sqlalchemy import Column, Enum, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin
from app.models.enums import Role


class User(TimestampMixin, Base):
    """User model for authentication and authorization."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(191), unique=True, index=True, nullable=False)
    name = Column(String(191))
    phone = Column(String(32))
    password_hash = Column(String(191), nullable=False)
    # Fixed at registration; there is no endpoint that changes it
    role = Column(Enum(Role, native_enum=False, length=16), nullable=False, default=Role.CANDIDATE)

    # Relationships
    candidate_profile = relationship(
        "CandidateProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    recruiter_profile = relationship(
        "RecruiterProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    notifications = relationship(
        "Notification",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
