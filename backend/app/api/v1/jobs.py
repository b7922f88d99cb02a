"""
Recruiter job management API endpoints.

Create, edit and delete jobs, drive them through the publish/close/reopen
lifecycle, list their applications, and autofill a new job from a PDF job
description.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, Request, Response, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from app.api.v1.auth import get_settings, require_recruiter
from app.core.config import Settings
from app.core.exceptions import ValidationFailed
from app.core.security import Principal
from app.crud import applications as applications_crud
from app.crud import jobs as jobs_crud
from app.db.session import get_db
from app.models.enums import ApplicationStatus, JobStatus
from app.schemas.application import ApplicationList
from app.schemas.job import JobCreate, JobEnvelope, JobList, JobOut, JobUpdate
from app.services import job_lifecycle
from app.services.applications import application_list_item
from app.services.job_extractor import extract_job_fields

logger = logging.getLogger(__name__)

router = APIRouter()


def _envelope(job, path: Optional[str] = None) -> JobEnvelope:
    return JobEnvelope(id=job.id, job=JobOut.model_validate(job), path=path)


@router.post("/autofill")
async def autofill_job(
    file: UploadFile = File(...),
    principal: Principal = Depends(require_recruiter),
    settings: Settings = Depends(get_settings),
):
    """
    Upload a job description PDF and get suggested job fields.

    The suggestion is sparse: fields that could not be found are omitted.
    """
    filename = (file.filename or "").lower()
    content_type = (file.content_type or "").lower()
    if "pdf" not in content_type and not filename.endswith(".pdf"):
        raise ValidationFailed("Only PDF files are supported", code="UnsupportedMediaType")

    content = await file.read()
    if not content:
        raise ValidationFailed("file is required", code="BadRequest")
    if len(content) > settings.AUTOFILL_MAX_BYTES:
        raise ValidationFailed(
            f"File exceeds {settings.AUTOFILL_MAX_BYTES} bytes", code="FileTooLarge"
        )

    suggested = await run_in_threadpool(extract_job_fields, content)
    logger.info("Recruiter %s autofilled %d fields from %s", principal.user_id, len(suggested), file.filename)
    return {"suggested": suggested}


@router.post("", response_model=JobEnvelope, status_code=status.HTTP_201_CREATED)
async def create_job(
    payload: JobCreate,
    request: Request,
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Create a job as DRAFT or PUBLISHED."""
    job = job_lifecycle.create_job(db, request.app.state.dispatcher, principal.user_id, payload)
    path = str(request.app.url_path_for("get_job", job_id=job.id))
    return _envelope(job, path=path)


@router.get("", response_model=JobList)
async def list_jobs(
    status: Optional[JobStatus] = None,
    limit: int = Query(50, gt=0, le=200),
    offset: int = Query(0, ge=0),
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """List the caller's jobs, newest first."""
    jobs = jobs_crud.list_jobs_by_recruiter(db, principal.user_id, status=status, limit=limit, offset=offset)
    return JobList(jobs=[JobOut.model_validate(job) for job in jobs])


@router.get("/{job_id}", response_model=JobEnvelope)
async def get_job(
    job_id: int,
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    job = job_lifecycle.get_owned_job(db, job_id, principal.user_id)
    return _envelope(job)


@router.patch("/{job_id}", response_model=JobEnvelope)
async def update_job(
    job_id: int,
    patch: JobUpdate,
    request: Request,
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """
    Partially update a job.

    Drafts accept any field. Published and closed jobs accept only
    ``status``, which is applied as a publish, close or reopen.
    """
    job = job_lifecycle.get_owned_job(db, job_id, principal.user_id)
    job = job_lifecycle.update_job(db, request.app.state.dispatcher, job, patch)
    return _envelope(job)


@router.post("/{job_id}/publish", response_model=JobEnvelope)
async def publish_job(
    job_id: int,
    request: Request,
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    job = job_lifecycle.get_owned_job(db, job_id, principal.user_id)
    job = job_lifecycle.publish_job(db, request.app.state.dispatcher, job)
    return _envelope(job)


@router.post("/{job_id}/close", response_model=JobEnvelope)
async def close_job(
    job_id: int,
    request: Request,
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    job = job_lifecycle.get_owned_job(db, job_id, principal.user_id)
    job = job_lifecycle.close_job(db, request.app.state.dispatcher, job)
    return _envelope(job)


@router.post("/{job_id}/reopen", response_model=JobEnvelope)
async def reopen_job(
    job_id: int,
    request: Request,
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    job = job_lifecycle.get_owned_job(db, job_id, principal.user_id)
    job = job_lifecycle.reopen_job(db, request.app.state.dispatcher, job)
    return _envelope(job)


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job(
    job_id: int,
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Delete a job and, with it, its applications and interviews."""
    job = job_lifecycle.get_owned_job(db, job_id, principal.user_id)
    job_lifecycle.delete_job(db, job)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{job_id}/applications", response_model=ApplicationList)
async def list_job_applications(
    job_id: int,
    status: Optional[ApplicationStatus] = None,
    q: Optional[str] = Query(None, min_length=1, max_length=191),
    limit: int = Query(50, gt=0, le=200),
    offset: int = Query(0, ge=0),
    principal: Principal = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """List applications for one of the caller's jobs; ``q`` searches candidate names and email."""
    job_lifecycle.get_owned_job(db, job_id, principal.user_id)
    applications = applications_crud.list_applications_by_job(
        db, job_id, status=status, q=q, limit=limit, offset=offset
    )
    return ApplicationList(applications=[application_list_item(a) for a in applications])
