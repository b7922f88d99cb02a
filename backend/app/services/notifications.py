"""
Notification dispatch.

Primary writes (publishing a job, applying, scheduling an interview) never
wait for their notifications. Instead they hand small tasks to a
``NotificationDispatcher``: a bounded asyncio queue drained by a few worker
coroutines. Each task runs in a worker thread with its own database session
and re-queries whatever it needs, so a failing or slow notification can
never affect the request that triggered it.
"""

import asyncio
import logging
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import ForbiddenError, NotFoundError
from app.crud import applications as applications_crud
from app.crud import notifications as notifications_crud
from app.models import Notification
from app.models.enums import NotificationType

logger = logging.getLogger(__name__)

NotificationTask = Callable[[Session], None]

RECENT_APPLICANTS_LIMIT = 5


class NotificationDispatcher:
    """Bounded fire-and-forget queue for notification tasks."""

    def __init__(self, session_factory: Callable[[], Session], maxsize: int = 1000, workers: int = 2):
        self._session_factory = session_factory
        self._maxsize = maxsize
        self._worker_count = max(1, workers)
        self._queue: Optional[asyncio.Queue] = None
        self._workers: list[asyncio.Task] = []
        self.submitted = 0
        self.completed = 0
        self.failed = 0
        self.dropped = 0

    @property
    def running(self) -> bool:
        return bool(self._workers)

    async def start(self) -> None:
        if self.running:
            return
        self._queue = asyncio.Queue(maxsize=self._maxsize)
        self._workers = [
            asyncio.create_task(self._worker(), name=f"notification-worker-{i}")
            for i in range(self._worker_count)
        ]
        logger.info("Notification dispatcher started with %d workers", self._worker_count)

    async def stop(self) -> None:
        """Finish queued tasks, then stop the workers."""
        if not self.running:
            return
        await self.drain()
        workers, self._workers = self._workers, []
        for worker in workers:
            worker.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
        self._queue = None
        logger.info("Notification dispatcher stopped: %s", self.stats())

    def submit(self, task: NotificationTask, label: str = "notification") -> bool:
        """
        Queue a task without blocking.

        Returns False (and logs) when the dispatcher is stopped or the queue
        is full; the task is dropped in that case.
        """
        if self._queue is None or not self.running:
            self.dropped += 1
            logger.warning("Dropping %s: dispatcher is not running", label)
            return False
        try:
            self._queue.put_nowait((label, task))
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning("Dropping %s: notification queue is full (%d)", label, self._maxsize)
            return False
        self.submitted += 1
        logger.debug("Queued %s", label)
        return True

    async def drain(self) -> None:
        """Wait until every queued task has finished."""
        if self._queue is not None:
            await self._queue.join()

    def stats(self) -> dict:
        return {
            "running": self.running,
            "queued": self._queue.qsize() if self._queue is not None else 0,
            "submitted": self.submitted,
            "completed": self.completed,
            "failed": self.failed,
            "dropped": self.dropped,
        }

    async def _worker(self) -> None:
        while True:
            label, task = await self._queue.get()
            try:
                await asyncio.to_thread(self._run, task)
            except Exception:
                self.failed += 1
                logger.exception("Notification task %s failed", label)
            else:
                self.completed += 1
            finally:
                self._queue.task_done()

    def _run(self, task: NotificationTask) -> None:
        db = self._session_factory()
        try:
            task(db)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


# ============== Notification tasks ==============


def job_published(recruiter_id: int, job_id: int, title: str) -> NotificationTask:
    def task(db: Session) -> None:
        notifications_crud.create_notification(
            db,
            user_id=recruiter_id,
            type=NotificationType.JOB,
            title="Job published",
            message=f'Your job "{title}" was approved and published.',
            data={"job_id": job_id, "path": f"/recruiter/jobs/{job_id}"},
        )

    return task


def application_received(candidate_id: int, job_id: int, application_id: int, title: str) -> NotificationTask:
    def task(db: Session) -> None:
        notifications_crud.create_notification(
            db,
            user_id=candidate_id,
            type=NotificationType.APPLICATION,
            title="Application received",
            message=f"Your application to {title} was received.",
            data={
                "job_id": job_id,
                "application_id": application_id,
                "path": f"/candidate/applications/{application_id}",
            },
        )

    return task


def _recent_applicants(db: Session, job_id: int) -> list[dict]:
    recent = applications_crud.list_applications_by_job(db, job_id, limit=RECENT_APPLICANTS_LIMIT)
    applicants = []
    for application in recent:
        candidate = application.candidate
        profile = candidate.candidate_profile if candidate is not None else None
        name = candidate.name if candidate is not None else None
        if not name and profile is not None:
            name = " ".join(part for part in (profile.first_name, profile.last_name) if part) or None
        applicants.append(
            {
                "application_id": application.id,
                "applied_at": application.created_at.isoformat() if application.created_at else None,
                "candidate_id": application.candidate_id,
                "candidate_email": candidate.email if candidate is not None else None,
                "candidate_name": name,
                "avatar_url": profile.avatar_url if profile is not None else None,
            }
        )
    return applicants


def new_applicant(
    recruiter_id: int,
    job_id: int,
    application_id: int,
    candidate_id: int,
    title: str,
) -> NotificationTask:
    """
    Tell the job owner about a new application.

    The applicant count and the recent-applicants list are looked up
    separately; if either lookup fails the notification is still written,
    with a count-less message or an empty list.
    """

    def task(db: Session) -> None:
        message = f"You’ve got new applicants for the {title} position. Tap here to review them now."
        try:
            total = applications_crud.count_applications_by_job(db, job_id)
            message = f"You’ve got {total} new applicants for the {title} position. Tap here to review them now."
        except SQLAlchemyError:
            db.rollback()
            logger.warning("Could not count applicants for job %s", job_id, exc_info=True)

        recent_applicants: list[dict] = []
        try:
            recent_applicants = _recent_applicants(db, job_id)
        except SQLAlchemyError:
            db.rollback()
            logger.warning("Could not list recent applicants for job %s", job_id, exc_info=True)

        notifications_crud.create_notification(
            db,
            user_id=recruiter_id,
            type=NotificationType.APPLICATION,
            title="New application",
            message=message,
            data={
                "job_id": job_id,
                "application_id": application_id,
                "candidate_id": candidate_id,
                "path": f"/recruiter/jobs/{job_id}/applications",
                "recent_applicants": recent_applicants,
            },
        )

    return task


def application_status_changed(
    candidate_id: int,
    job_id: int,
    application_id: int,
    title: str,
    status: str,
) -> NotificationTask:
    def task(db: Session) -> None:
        notifications_crud.create_notification(
            db,
            user_id=candidate_id,
            type=NotificationType.APPLICATION,
            title="Application updated",
            message=f"Your application to {title} is now {status}.",
            data={
                "job_id": job_id,
                "application_id": application_id,
                "status": status,
                "path": f"/candidate/applications/{application_id}",
            },
        )

    return task


def interview_scheduled(
    candidate_id: int,
    job_id: int,
    application_id: int,
    title: str,
    scheduled_at: str,
) -> NotificationTask:
    def task(db: Session) -> None:
        notifications_crud.create_notification(
            db,
            user_id=candidate_id,
            type=NotificationType.INTERVIEW,
            title="Interview scheduled",
            message=f"Your interview for {title} is scheduled at {scheduled_at}.",
            data={
                "job_id": job_id,
                "application_id": application_id,
                "scheduled_at": scheduled_at,
                "path": f"/candidate/applications/{application_id}",
            },
        )

    return task


# ============== Inbox ==============


def get_owned_notification(db: Session, notification_id: int, user_id: int) -> Notification:
    notification = notifications_crud.get_notification(db, notification_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    if notification.user_id != user_id:
        raise ForbiddenError("You do not own this notification")
    return notification
