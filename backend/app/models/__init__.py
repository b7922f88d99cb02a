from app.models.user import User
from app.models.profile import CandidateProfile, RecruiterProfile
from app.models.job import Job
from app.models.application import Application, Interview
from app.models.notification import Notification

__all__ = [
    "User",
    "CandidateProfile",
    "RecruiterProfile",
    "Job",
    "Application",
    "Interview",
    "Notification",
]
