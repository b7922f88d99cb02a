"""
Candidate API endpoints.

Public job browsing, applying, application tracking, the candidate profile
and the candidate's notification inbox.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_candidate
from app.core.exceptions import NotFoundError
from app.core.security import Principal
from app.crud import applications as applications_crud
from app.crud import jobs as jobs_crud
from app.crud import notifications as notifications_crud
from app.crud import profiles as profiles_crud
from app.crud import users as users_crud
from app.db.session import get_db
from app.models import User
from app.models.enums import ApplicationStatus, JobStatus, JobType
from app.schemas.application import (
    ApplicationDetail,
    ApplyRequest,
    CandidateApplicationList,
    CreatedResponse,
)
from app.schemas.job import JobEnvelope, JobList, JobOut
from app.schemas.notification import NotificationEnvelope, NotificationList, NotificationOut
from app.schemas.user import CandidateMe, CandidateProfileOut, CandidateProfilePatch, UserResponse
from app.services import applications as applications_service
from app.services.notifications import get_owned_notification

router = APIRouter()

USER_FIELDS = ("name", "phone")


def _candidate_me(user: User, profile) -> CandidateMe:
    return CandidateMe(
        user=UserResponse.model_validate(user),
        profile=CandidateProfileOut.model_validate(profile) if profile is not None else None,
    )


# ============== Profile ==============


@router.get("/me", response_model=CandidateMe)
async def get_me(
    principal: Principal = Depends(require_candidate),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Current candidate with private profile fields."""
    return _candidate_me(current_user, profiles_crud.get_candidate_profile(db, current_user.id))


@router.patch("/me", response_model=CandidateMe)
async def update_me(
    patch: CandidateProfilePatch,
    principal: Principal = Depends(require_candidate),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update the candidate profile.

    ``name`` and ``phone`` live on the user record and are updated there;
    fields not sent keep their value, explicit nulls clear them.
    """
    changes = patch.changes()
    user_changes = {field: changes.pop(field) for field in USER_FIELDS if field in changes}

    profile = profiles_crud.upsert_candidate_profile(db, current_user.id, changes)
    if user_changes:
        current_user = users_crud.update_user_fields(db, current_user, user_changes)
    return _candidate_me(current_user, profile)


# ============== Jobs (public) ==============


@router.get("/jobs", response_model=JobList)
async def list_jobs(
    q: Optional[str] = Query(None, min_length=1, max_length=191),
    location: Optional[str] = Query(None, min_length=1, max_length=191),
    job_type: Optional[JobType] = None,
    remote_flexible: Optional[bool] = None,
    limit: int = Query(50, gt=0, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """Browse published jobs, newest first."""
    jobs, total = jobs_crud.list_published_jobs(
        db,
        q=q,
        location=location,
        job_type=job_type,
        remote_flexible=remote_flexible,
        limit=limit,
        offset=offset,
    )
    return JobList(jobs=[JobOut.model_validate(job) for job in jobs], total=total)


@router.get("/jobs/{job_id}", response_model=JobEnvelope)
async def get_published_job(job_id: int, db: Session = Depends(get_db)):
    """A published job; drafts and closed jobs are reported as missing."""
    job = jobs_crud.get_job(db, job_id)
    if job is None or job.status != JobStatus.PUBLISHED:
        raise NotFoundError("Job not found")
    return JobEnvelope(id=job.id, job=JobOut.model_validate(job))


# ============== Applications ==============


@router.post("/applications", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def apply(
    payload: ApplyRequest,
    request: Request,
    principal: Principal = Depends(require_candidate),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Apply to a published job.

    Returns as soon as the application is stored; the confirmation and
    recruiter notifications are written in the background.
    The caller must still exist, so a token outliving its account is a 401.
    """
    application = applications_service.apply_to_job(db, request.app.state.dispatcher, principal.user_id, payload)
    path = request.app.url_path_for("get_my_application", application_id=application.id)
    return CreatedResponse(id=application.id, path=str(path), url=str(path.make_absolute_url(request.base_url)))


@router.get("/applications", response_model=CandidateApplicationList)
async def list_my_applications(
    status: Optional[ApplicationStatus] = None,
    limit: int = Query(50, gt=0, le=200),
    offset: int = Query(0, ge=0),
    principal: Principal = Depends(require_candidate),
    db: Session = Depends(get_db),
):
    applications = applications_crud.list_applications_by_candidate(
        db, principal.user_id, status=status, limit=limit, offset=offset
    )
    return CandidateApplicationList(
        applications=[applications_service.candidate_application_item(a) for a in applications]
    )


@router.get("/applications/{application_id}", response_model=ApplicationDetail)
async def get_my_application(
    application_id: int,
    principal: Principal = Depends(require_candidate),
    db: Session = Depends(get_db),
):
    application = applications_service.get_application_for_candidate(db, application_id, principal.user_id)
    return applications_service.application_detail(application)


# ============== Notifications ==============


@router.get("/notifications", response_model=NotificationList)
async def list_notifications(
    unread_only: bool = False,
    limit: int = Query(50, gt=0, le=200),
    offset: int = Query(0, ge=0),
    principal: Principal = Depends(require_candidate),
    db: Session = Depends(get_db),
):
    notifications = notifications_crud.list_notifications_by_user(
        db, principal.user_id, unread_only=unread_only, limit=limit, offset=offset
    )
    return NotificationList(notifications=[NotificationOut.model_validate(n) for n in notifications])


@router.get("/notifications/{notification_id}", response_model=NotificationEnvelope)
async def get_notification(
    notification_id: int,
    principal: Principal = Depends(require_candidate),
    db: Session = Depends(get_db),
):
    notification = get_owned_notification(db, notification_id, principal.user_id)
    return NotificationEnvelope(notification=NotificationOut.model_validate(notification))


@router.post("/notifications/{notification_id}/read", response_model=NotificationEnvelope)
async def mark_notification_read(
    notification_id: int,
    principal: Principal = Depends(require_candidate),
    db: Session = Depends(get_db),
):
    notification = get_owned_notification(db, notification_id, principal.user_id)
    notification = notifications_crud.mark_notification_read(db, notification)
    return NotificationEnvelope(notification=NotificationOut.model_validate(notification))
