"""
API Router Aggregator.

Combines all v1 API routers into a single router for the main app.
"""

from fastapi import APIRouter

from app.api.v1 import auth, candidate, jobs, recruiter

api_router = APIRouter()

# Include all v1 routers with their prefixes and tags
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"],
)

# Must precede the recruiter router, whose public /{recruiter_id} would
# otherwise capture /recruiter/jobs
api_router.include_router(
    jobs.router,
    prefix="/recruiter/jobs",
    tags=["Jobs"],
)

api_router.include_router(
    recruiter.router,
    prefix="/recruiter",
    tags=["Recruiter"],
)

api_router.include_router(
    candidate.router,
    prefix="/candidate",
    tags=["Candidate"],
)
