"""
Applications and interviews.

Each operation performs its primary write first and only then submits
notification tasks; a notification that fails or is dropped never undoes
the write.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from app.crud import applications as applications_crud
from app.crud import jobs as jobs_crud
from app.models import Application, Interview
from app.models.enums import ApplicationSource, JobStatus
from app.schemas.application import (
    ApplicationDetail,
    ApplicationListItem,
    ApplicationOut,
    ApplicationPatch,
    ApplyRequest,
    CandidateApplicationItem,
    CandidateProfileSummary,
    CandidateSummary,
    InterviewCreate,
    InterviewPatch,
    JobSummary,
)
from app.services import notifications
from app.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)


# ============== Lookups ==============


def get_application_for_recruiter(db: Session, application_id: int, recruiter_id: int) -> Application:
    application = applications_crud.get_application(db, application_id)
    if application is None:
        raise NotFoundError("Application not found")
    if application.job is None or application.job.recruiter_id != recruiter_id:
        raise ForbiddenError("You do not own this application")
    return application


def get_application_for_candidate(db: Session, application_id: int, candidate_id: int) -> Application:
    application = applications_crud.get_application(db, application_id)
    if application is None:
        raise NotFoundError("Application not found")
    if application.candidate_id != candidate_id:
        raise ForbiddenError("You do not own this application")
    return application


# ============== Representations ==============


def _job_summary(application: Application) -> JobSummary:
    job = application.job
    return JobSummary(id=job.id, recruiter_id=job.recruiter_id, title=job.title, status=job.status)


def _candidate_summary(application: Application) -> CandidateSummary:
    candidate = application.candidate
    return CandidateSummary(id=candidate.id, email=candidate.email, name=candidate.name, phone=candidate.phone)


def _profile_summary(application: Application) -> CandidateProfileSummary:
    profile = application.candidate.candidate_profile
    if profile is None:
        return CandidateProfileSummary()
    return CandidateProfileSummary(
        first_name=profile.first_name,
        last_name=profile.last_name,
        avatar_url=profile.avatar_url,
        resume_url=profile.resume_url,
    )


def application_detail(application: Application) -> ApplicationDetail:
    return ApplicationDetail(
        application=ApplicationOut.model_validate(application),
        job=_job_summary(application),
        candidate=_candidate_summary(application),
        profile=_profile_summary(application),
    )


def application_list_item(application: Application) -> ApplicationListItem:
    return ApplicationListItem(
        **ApplicationOut.model_validate(application).model_dump(),
        candidate=_candidate_summary(application),
        profile=_profile_summary(application),
    )


def candidate_application_item(application: Application) -> CandidateApplicationItem:
    return CandidateApplicationItem(
        **ApplicationOut.model_validate(application).model_dump(),
        job=_job_summary(application),
    )


# ============== Operations ==============


def apply_to_job(
    db: Session,
    dispatcher: NotificationDispatcher,
    candidate_id: int,
    request: ApplyRequest,
) -> Application:
    """
    Apply to a published job.

    The (job, candidate) unique constraint decides duplicates, so two
    concurrent applies yield exactly one row and one ConflictError.
    """
    job = jobs_crud.get_job(db, request.job_id)
    if job is None or job.status != JobStatus.PUBLISHED:
        raise NotFoundError("Job not found")

    try:
        application = applications_crud.create_application(
            db,
            job_id=job.id,
            candidate_id=candidate_id,
            source=ApplicationSource.APPLY,
            resume_url=str(request.resume_url) if request.resume_url is not None else None,
            cover_letter=request.cover_letter,
        )
    except IntegrityError:
        db.rollback()
        # Only the (job, candidate) unique constraint means a duplicate
        if applications_crud.get_application_by_job_and_candidate(db, job.id, candidate_id) is None:
            raise
        raise ConflictError("You have already applied to this job.", code="AlreadyApplied")

    logger.info("Candidate %s applied to job %s (application %s)", candidate_id, job.id, application.id)

    dispatcher.submit(
        notifications.application_received(candidate_id, job.id, application.id, job.title),
        label=f"application-received:{application.id}",
    )
    if job.recruiter_id is not None:
        dispatcher.submit(
            notifications.new_applicant(job.recruiter_id, job.id, application.id, candidate_id, job.title),
            label=f"new-applicant:{application.id}",
        )
    return application


def update_application(
    db: Session,
    dispatcher: NotificationDispatcher,
    application: Application,
    patch: ApplicationPatch,
) -> Application:
    changes = patch.changes()
    if not changes:
        return application

    previous_status = application.status
    applications_crud.update_application(db, application, changes)

    if application.status != previous_status:
        logger.info(
            "Application %s: %s -> %s", application.id, previous_status.value, application.status.value
        )
        dispatcher.submit(
            notifications.application_status_changed(
                application.candidate_id,
                application.job_id,
                application.id,
                application.job.title,
                application.status.value,
            ),
            label=f"application-status:{application.id}",
        )
    return application


def schedule_interview(
    db: Session,
    dispatcher: NotificationDispatcher,
    application: Application,
    details: InterviewCreate,
) -> Interview:
    fields = details.model_dump()
    if fields.get("meeting_url") is not None:
        fields["meeting_url"] = str(fields["meeting_url"])
    interview = applications_crud.create_interview(db, application.id, fields)
    logger.info("Interview %s scheduled for application %s", interview.id, application.id)

    dispatcher.submit(
        notifications.interview_scheduled(
            application.candidate_id,
            application.job_id,
            application.id,
            application.job.title,
            interview.scheduled_at.isoformat(),
        ),
        label=f"interview-scheduled:{interview.id}",
    )
    return interview


def update_interview(db: Session, application: Application, interview_id: int, patch: InterviewPatch) -> Interview:
    interview = applications_crud.get_interview(db, application.id, interview_id)
    if interview is None:
        raise NotFoundError("Interview not found")
    changes = patch.changes()
    if not changes:
        return interview
    return applications_crud.update_interview(db, interview, changes)
