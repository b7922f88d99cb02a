from typing import Any, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.db.base import utcnow
from app.models import Job
from app.models.enums import JobStatus, JobType


def get_job(db: Session, job_id: int) -> Optional[Job]:
    return db.query(Job).filter(Job.id == job_id).first()


def create_job(db: Session, recruiter_id: int, fields: dict[str, Any]) -> Job:
    job = Job(recruiter_id=recruiter_id, **fields)
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def update_job_fields(db: Session, job: Job, changes: dict[str, Any], commit: bool = True) -> Job:
    """Set fields on a job; with ``commit=False`` they are only flushed into the open transaction."""
    for field, value in changes.items():
        setattr(job, field, value)
    if not commit:
        db.flush()
        return job
    db.commit()
    db.refresh(job)
    return job


def transition_job_status(db: Session, job: Job, from_status: JobStatus, to_status: JobStatus) -> bool:
    """
    Move a job between statuses only if it is still in ``from_status``.

    Commits the open transaction together with the status change. Returns
    False and rolls everything back when a concurrent request changed the
    status first.
    """
    updated = (
        db.query(Job)
        .filter(Job.id == job.id, Job.status == from_status)
        .update({Job.status: to_status, Job.updated_at: utcnow()}, synchronize_session=False)
    )
    if updated != 1:
        db.rollback()
        db.refresh(job)
        return False
    db.commit()
    db.refresh(job)
    return True


def delete_job(db: Session, job: Job) -> None:
    db.delete(job)
    db.commit()


def list_jobs_by_recruiter(
    db: Session,
    recruiter_id: int,
    status: Optional[JobStatus] = None,
    limit: int = 50,
    offset: int = 0,
) -> list[Job]:
    query = db.query(Job).filter(Job.recruiter_id == recruiter_id)
    if status is not None:
        query = query.filter(Job.status == status)
    return query.order_by(Job.created_at.desc(), Job.id.desc()).offset(offset).limit(limit).all()


def count_jobs_by_status(db: Session, recruiter_id: int) -> dict[str, int]:
    rows = (
        db.query(Job.status, func.count(Job.id))
        .filter(Job.recruiter_id == recruiter_id)
        .group_by(Job.status)
        .all()
    )
    counts = {status.value.lower(): 0 for status in JobStatus}
    for status, count in rows:
        counts[JobStatus(status).value.lower()] = count
    counts["total"] = sum(counts.values())
    return counts


def _published_query(
    db: Session,
    q: Optional[str] = None,
    location: Optional[str] = None,
    job_type: Optional[JobType] = None,
    remote_flexible: Optional[bool] = None,
):
    query = db.query(Job).filter(Job.status == JobStatus.PUBLISHED)
    if q:
        pattern = f"%{q}%"
        query = query.filter(
            or_(Job.title.ilike(pattern), Job.description.ilike(pattern), Job.company_name.ilike(pattern))
        )
    if location:
        query = query.filter(Job.location.ilike(f"%{location}%"))
    if job_type is not None:
        query = query.filter(Job.job_type == job_type)
    if remote_flexible is not None:
        query = query.filter(Job.remote_flexible == remote_flexible)
    return query


def list_published_jobs(
    db: Session,
    q: Optional[str] = None,
    location: Optional[str] = None,
    job_type: Optional[JobType] = None,
    remote_flexible: Optional[bool] = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[Job], int]:
    """Published jobs matching the filters, newest first, plus the unpaginated total."""
    query = _published_query(db, q, location, job_type, remote_flexible)
    total = query.count()
    jobs = query.order_by(Job.created_at.desc(), Job.id.desc()).offset(offset).limit(limit).all()
    return jobs, total


def list_published_jobs_by_recruiter(db: Session, recruiter_id: int, limit: int = 50, offset: int = 0) -> list[Job]:
    return (
        db.query(Job)
        .filter(Job.recruiter_id == recruiter_id, Job.status == JobStatus.PUBLISHED)
        .order_by(Job.created_at.desc(), Job.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
