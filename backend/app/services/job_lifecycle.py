"""
Job lifecycle.

A job is created as DRAFT or PUBLISHED and then moves through three
actions:

    publish: DRAFT -> PUBLISHED   (already PUBLISHED: no-op)
    close:   PUBLISHED -> CLOSED
    reopen:  CLOSED -> PUBLISHED

Any other action/state pair raises InvalidTransitionError. Only DRAFT jobs
accept field edits; published and closed jobs can only change status.
Publishing (including creating a job as PUBLISHED) notifies the owner.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, ForbiddenError, InvalidTransitionError, NotFoundError
from app.crud import jobs as jobs_crud
from app.models import Job
from app.models.enums import JobStatus
from app.schemas.job import JobCreate, JobUpdate
from app.services import notifications
from app.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)

PUBLISH = "publish"
CLOSE = "close"
REOPEN = "reopen"

# (action, current status) -> new status
TRANSITIONS = {
    (PUBLISH, JobStatus.DRAFT): JobStatus.PUBLISHED,
    (CLOSE, JobStatus.PUBLISHED): JobStatus.CLOSED,
    (REOPEN, JobStatus.CLOSED): JobStatus.PUBLISHED,
}

# (current status, requested status) -> action, for status-only patches
STATUS_ACTIONS = {
    (JobStatus.DRAFT, JobStatus.PUBLISHED): PUBLISH,
    (JobStatus.CLOSED, JobStatus.PUBLISHED): REOPEN,
    (JobStatus.PUBLISHED, JobStatus.CLOSED): CLOSE,
}


def get_owned_job(db: Session, job_id: int, recruiter_id: int) -> Job:
    """Load a job for its owner; NotFound if missing, Forbidden for anyone else."""
    job = jobs_crud.get_job(db, job_id)
    if job is None:
        raise NotFoundError("Job not found")
    if job.recruiter_id != recruiter_id:
        raise ForbiddenError("You do not own this job")
    return job


def action_for_status(current: JobStatus, target: JobStatus) -> Optional[str]:
    """
    Map a requested status onto a lifecycle action.

    Returns None when the job is already in the requested status.
    """
    if current == target:
        return None
    action = STATUS_ACTIONS.get((current, target))
    if action is None:
        raise InvalidTransitionError(f"Cannot change job status from {current.value} to {target.value}")
    return action


def _notify_published(dispatcher: NotificationDispatcher, job: Job) -> None:
    if job.recruiter_id is None:
        return
    dispatcher.submit(
        notifications.job_published(job.recruiter_id, job.id, job.title),
        label=f"job-published:{job.id}",
    )


def _apply(db: Session, dispatcher: NotificationDispatcher, job: Job, action: str) -> Job:
    current = JobStatus(job.status)
    target = TRANSITIONS.get((action, current))
    if target is None:
        raise InvalidTransitionError(f"Cannot {action} a {current.value} job")
    if not jobs_crud.transition_job_status(db, job, current, target):
        raise InvalidTransitionError(f"Job {job.id} changed status concurrently")
    logger.info("Job %s: %s -> %s", job.id, current.value, target.value)
    if action == PUBLISH:
        _notify_published(dispatcher, job)
    return job


def create_job(db: Session, dispatcher: NotificationDispatcher, recruiter_id: int, payload: JobCreate) -> Job:
    job = jobs_crud.create_job(db, recruiter_id, payload.model_dump())
    logger.info("Recruiter %s created job %s as %s", recruiter_id, job.id, job.status.value)
    if job.status == JobStatus.PUBLISHED:
        _notify_published(dispatcher, job)
    return job


def update_job(db: Session, dispatcher: NotificationDispatcher, job: Job, patch: JobUpdate) -> Job:
    """
    Apply a partial update.

    Field edits require a DRAFT job; a ``status`` key is routed through the
    transition table rather than written directly.
    """
    changes = patch.changes()
    target = changes.pop("status", None)

    if changes and job.status != JobStatus.DRAFT:
        raise ConflictError("Only status can be updated for non-draft jobs", code="NotDraft")

    # Validate the status change before touching any field
    action = action_for_status(JobStatus(job.status), JobStatus(target)) if target is not None else None

    if changes:
        # Held uncommitted so a lost status race discards the edits too
        jobs_crud.update_job_fields(db, job, changes, commit=action is None)
    if action is not None:
        _apply(db, dispatcher, job, action)
    return job


def publish_job(db: Session, dispatcher: NotificationDispatcher, job: Job) -> Job:
    if job.status == JobStatus.PUBLISHED:
        return job
    return _apply(db, dispatcher, job, PUBLISH)


def close_job(db: Session, dispatcher: NotificationDispatcher, job: Job) -> Job:
    return _apply(db, dispatcher, job, CLOSE)


def reopen_job(db: Session, dispatcher: NotificationDispatcher, job: Job) -> Job:
    return _apply(db, dispatcher, job, REOPEN)


def delete_job(db: Session, job: Job) -> None:
    """Delete a job in any state; its applications and interviews go with it."""
    job_id = job.id
    jobs_crud.delete_job(db, job)
    logger.info("Job %s deleted", job_id)
