from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class Notification(TimestampMixin, Base):
    """
    In-app notification for a single user.

    Rows are written by background notification tasks only; the owner can
    mark them read, which sets read_at once.
    """

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    type = Column(String(50))  # "JOB", "APPLICATION", "INTERVIEW"
    title = Column(String(191), nullable=False)
    message = Column(Text)
    # Payload for the client, e.g. {"job_id": 1, "path": "/recruiter/jobs/1"}
    data = Column(JSON)
    read_at = Column(DateTime, nullable=True, index=True)

    user = relationship("User", back_populates="notifications")

    @property
    def read(self) -> bool:
        return self.read_at is not None
