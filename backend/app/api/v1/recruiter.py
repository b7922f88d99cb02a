"""
Recruiter API endpoints.

Profile and dashboard stats, application review, interview scheduling and
the recruiter's notification inbox. The public recruiter card and job list
are the only unauthenticated routes here.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_recruiter
from app.core.exceptions import NotFoundError
from app.core.security import Principal
from app.crud import applications as applications_crud
from app.crud import jobs as jobs_crud
from app.crud import notifications as notifications_crud
from app.crud import profiles as profiles_crud
from app.crud import users as users_crud
from app.db.session import get_db
from app.models import User
from app.models.enums import Role
from app.schemas.application import (
    ApplicationDetail,
    ApplicationPatch,
    CreatedResponse,
    InterviewCreate,
    InterviewList,
    InterviewOut,
    InterviewPatch,
)
from app.schemas.job import JobList, JobOut
from app.schemas.notification import NotificationEnvelope, NotificationList, NotificationOut
from app.schemas.user import RecruiterMe, RecruiterProfileOut, RecruiterProfilePatch, RecruiterPublic, UserResponse
from app.services import applications as applications_service
from app.services.notifications import get_owned_notification

router = APIRouter()


def _recruiter_me(user: User, profile) -> RecruiterMe:
    return RecruiterMe(
        user=UserResponse.model_validate(user),
        profile=RecruiterProfileOut.model_validate(profile) if profile is not None else None,
    )


# ============== Profile ==============


@router.get("/me", response_model=RecruiterMe)
async def get_me(
    principal: Principal = Depends(require_recruiter),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Current recruiter with private profile fields."""
    return _recruiter_me(current_user, profiles_crud.get_recruiter_profile(db, current_user.id))


@router.patch("/me", response_model=RecruiterMe)
async def update_me(
    patch: RecruiterProfilePatch,
    principal: Principal = Depends(require_recruiter),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update profile fields; fields not sent keep their value."""
    profile = profiles_crud.upsert_recruiter_profile(db, current_user.id, patch.changes())
    return _recruiter_me(current_user, profile)


@router.get("/me/stats")
async def get_my_stats(
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Job counts by status and application counts by status across the caller's jobs."""
    return {
        "jobs": jobs_crud.count_jobs_by_status(db, principal.user_id),
        "applications": applications_crud.application_stats_for_recruiter(db, principal.user_id),
    }


# ============== Applications & Interviews ==============


@router.get("/applications/{application_id}", response_model=ApplicationDetail)
async def get_application(
    application_id: int,
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    application = applications_service.get_application_for_recruiter(db, application_id, principal.user_id)
    return applications_service.application_detail(application)


@router.patch("/applications/{application_id}", response_model=ApplicationDetail)
async def update_application(
    application_id: int,
    patch: ApplicationPatch,
    request: Request,
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Update status, score, tags or notes; a status change notifies the candidate."""
    application = applications_service.get_application_for_recruiter(db, application_id, principal.user_id)
    application = applications_service.update_application(db, request.app.state.dispatcher, application, patch)
    return applications_service.application_detail(application)


@router.get("/applications/{application_id}/interviews", response_model=InterviewList)
async def list_interviews(
    application_id: int,
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    applications_service.get_application_for_recruiter(db, application_id, principal.user_id)
    interviews = applications_crud.list_interviews(db, application_id)
    return InterviewList(interviews=[InterviewOut.model_validate(i) for i in interviews])


@router.post(
    "/applications/{application_id}/interviews",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def schedule_interview(
    application_id: int,
    details: InterviewCreate,
    request: Request,
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Schedule an interview; the candidate is notified in the background."""
    application = applications_service.get_application_for_recruiter(db, application_id, principal.user_id)
    interview = applications_service.schedule_interview(db, request.app.state.dispatcher, application, details)
    path = request.app.url_path_for("update_interview", application_id=application.id, interview_id=interview.id)
    return CreatedResponse(id=interview.id, path=str(path), url=str(path.make_absolute_url(request.base_url)))


@router.patch(
    "/applications/{application_id}/interviews/{interview_id}",
    response_model=InterviewList,
)
async def update_interview(
    application_id: int,
    interview_id: int,
    patch: InterviewPatch,
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Update one interview; returns every interview of the application."""
    application = applications_service.get_application_for_recruiter(db, application_id, principal.user_id)
    applications_service.update_interview(db, application, interview_id, patch)
    interviews = applications_crud.list_interviews(db, application_id)
    return InterviewList(interviews=[InterviewOut.model_validate(i) for i in interviews])


# ============== Notifications ==============


@router.get("/notifications", response_model=NotificationList)
async def list_notifications(
    unread_only: bool = False,
    limit: int = Query(50, gt=0, le=200),
    offset: int = Query(0, ge=0),
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    notifications = notifications_crud.list_notifications_by_user(
        db, principal.user_id, unread_only=unread_only, limit=limit, offset=offset
    )
    return NotificationList(notifications=[NotificationOut.model_validate(n) for n in notifications])


@router.get("/notifications/{notification_id}", response_model=NotificationEnvelope)
async def get_notification(
    notification_id: int,
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    notification = get_owned_notification(db, notification_id, principal.user_id)
    return NotificationEnvelope(notification=NotificationOut.model_validate(notification))


@router.post("/notifications/{notification_id}/read", response_model=NotificationEnvelope)
async def mark_notification_read(
    notification_id: int,
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    notification = get_owned_notification(db, notification_id, principal.user_id)
    notification = notifications_crud.mark_notification_read(db, notification)
    return NotificationEnvelope(notification=NotificationOut.model_validate(notification))


# ============== Public ==============


def _get_recruiter(db: Session, recruiter_id: int) -> User:
    user = users_crud.get_user(db, recruiter_id)
    if user is None or user.role != Role.RECRUITER:
        raise NotFoundError("Recruiter not found")
    return user


@router.get("/{recruiter_id}/jobs", response_model=JobList)
async def list_recruiter_jobs(
    recruiter_id: int,
    limit: int = Query(50, gt=0, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """Public: a recruiter's published jobs."""
    _get_recruiter(db, recruiter_id)
    jobs = jobs_crud.list_published_jobs_by_recruiter(db, recruiter_id, limit=limit, offset=offset)
    return JobList(jobs=[JobOut.model_validate(job) for job in jobs])


@router.get("/{recruiter_id}")
async def get_recruiter(recruiter_id: int, db: Session = Depends(get_db)):
    """Public recruiter card; email, phone and date of birth are never exposed."""
    user = _get_recruiter(db, recruiter_id)
    profile = profiles_crud.get_recruiter_profile(db, recruiter_id)
    card = RecruiterPublic(
        id=user.id,
        name=user.name,
        first_name=profile.first_name if profile else None,
        last_name=profile.last_name if profile else None,
        company_name=profile.company_name if profile else None,
        position=profile.position if profile else None,
        avatar_url=profile.avatar_url if profile else None,
    )
    return {"recruiter": card}
