import enum


class Role(str, enum.Enum):
    RECRUITER = "RECRUITER"
    CANDIDATE = "CANDIDATE"


class JobStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CLOSED = "CLOSED"


class JobType(str, enum.Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"
    INTERNSHIP = "INTERNSHIP"
    TEMPORARY = "TEMPORARY"
    FREELANCE = "FREELANCE"


class ApplicationStatus(str, enum.Enum):
    APPLIED = "APPLIED"
    PASSED = "PASSED"
    FAILED = "FAILED"


class ApplicationSource(str, enum.Enum):
    APPLY = "APPLY"  # candidate self-service
    ADDED = "ADDED"  # added by a recruiter
    REFERRED = "REFERRED"
    DISCOVERED = "DISCOVERED"


class InterviewStatus(str, enum.Enum):
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"


class NotificationType(str, enum.Enum):
    JOB = "JOB"
    APPLICATION = "APPLICATION"
    INTERVIEW = "INTERVIEW"
