from app.services.notifications import NotificationDispatcher
from app.services.job_extractor import extract_job_fields, extract_job_fields_from_text

__all__ = [
    "NotificationDispatcher",
    "extract_job_fields",
    "extract_job_fields_from_text",
]
