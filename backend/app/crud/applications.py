from typing import Any, Optional

from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session, joinedload

from app.models import Application, CandidateProfile, Interview, Job, User
from app.models.enums import ApplicationSource, ApplicationStatus


# ============== Applications ==============


def create_application(
    db: Session,
    *,
    job_id: int,
    candidate_id: int,
    source: ApplicationSource,
    resume_url: Optional[str] = None,
    cover_letter: Optional[str] = None,
) -> Application:
    """
    Insert an application.

    Raises sqlalchemy.exc.IntegrityError if the candidate already applied to
    the job; the caller decides how to report it.
    """
    application = Application(
        job_id=job_id,
        candidate_id=candidate_id,
        source=source,
        resume_url=resume_url,
        cover_letter=cover_letter,
    )
    db.add(application)
    db.commit()
    db.refresh(application)
    return application


def get_application_by_job_and_candidate(db: Session, job_id: int, candidate_id: int) -> Optional[Application]:
    return (
        db.query(Application)
        .filter(Application.job_id == job_id, Application.candidate_id == candidate_id)
        .first()
    )


def get_application(db: Session, application_id: int) -> Optional[Application]:
    return (
        db.query(Application)
        .options(
            joinedload(Application.job),
            joinedload(Application.candidate).joinedload(User.candidate_profile),
        )
        .filter(Application.id == application_id)
        .first()
    )


def update_application(db: Session, application: Application, changes: dict[str, Any]) -> Application:
    for field, value in changes.items():
        setattr(application, field, value)
    db.commit()
    db.refresh(application)
    return application


def count_applications_by_job(db: Session, job_id: int) -> int:
    return db.query(func.count(Application.id)).filter(Application.job_id == job_id).scalar() or 0


def list_applications_by_job(
    db: Session,
    job_id: int,
    status: Optional[ApplicationStatus] = None,
    q: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> list[Application]:
    """Applications for a job, newest first; ``q`` matches candidate email, name or profile names."""
    query = (
        db.query(Application)
        .join(User, User.id == Application.candidate_id)
        .outerjoin(CandidateProfile, CandidateProfile.user_id == User.id)
        .options(joinedload(Application.candidate).joinedload(User.candidate_profile))
        .filter(Application.job_id == job_id)
    )
    if status is not None:
        query = query.filter(Application.status == status)
    if q:
        pattern = f"%{q}%"
        query = query.filter(
            or_(
                User.email.ilike(pattern),
                User.name.ilike(pattern),
                CandidateProfile.first_name.ilike(pattern),
                CandidateProfile.last_name.ilike(pattern),
            )
        )
    return (
        query.order_by(Application.created_at.desc(), Application.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def list_applications_by_candidate(
    db: Session,
    candidate_id: int,
    status: Optional[ApplicationStatus] = None,
    limit: int = 50,
    offset: int = 0,
) -> list[Application]:
    query = (
        db.query(Application)
        .options(joinedload(Application.job))
        .filter(Application.candidate_id == candidate_id)
    )
    if status is not None:
        query = query.filter(Application.status == status)
    return (
        query.order_by(Application.created_at.desc(), Application.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def application_stats_for_recruiter(db: Session, recruiter_id: int) -> dict[str, int]:
    """Application counts by status across every job the recruiter owns."""
    row = (
        db.query(
            func.count(Application.id),
            func.sum(case((Application.status == ApplicationStatus.APPLIED, 1), else_=0)),
            func.sum(case((Application.status == ApplicationStatus.PASSED, 1), else_=0)),
            func.sum(case((Application.status == ApplicationStatus.FAILED, 1), else_=0)),
        )
        .join(Job, Job.id == Application.job_id)
        .filter(Job.recruiter_id == recruiter_id)
        .one()
    )
    total, applied, passed, failed = row
    return {
        "total": int(total or 0),
        "applied": int(applied or 0),
        "passed": int(passed or 0),
        "failed": int(failed or 0),
    }


# ============== Interviews ==============


def list_interviews(db: Session, application_id: int) -> list[Interview]:
    return (
        db.query(Interview)
        .filter(Interview.application_id == application_id)
        .order_by(Interview.scheduled_at.asc(), Interview.id.asc())
        .all()
    )


def get_interview(db: Session, application_id: int, interview_id: int) -> Optional[Interview]:
    return (
        db.query(Interview)
        .filter(Interview.id == interview_id, Interview.application_id == application_id)
        .first()
    )


def create_interview(db: Session, application_id: int, fields: dict[str, Any]) -> Interview:
    interview = Interview(application_id=application_id, **fields)
    db.add(interview)
    db.commit()
    db.refresh(interview)
    return interview


def update_interview(db: Session, interview: Interview, changes: dict[str, Any]) -> Interview:
    for field, value in changes.items():
        setattr(interview, field, value)
    db.commit()
    db.refresh(interview)
    return interview
