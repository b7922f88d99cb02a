from typing import Any, Optional

from sqlalchemy.orm import Session

from app.models import CandidateProfile, RecruiterProfile

CANDIDATE_PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "date_of_birth",
    "avatar_url",
    "resume_url",
    "career_objective",
    "education",
    "experience",
)

RECRUITER_PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "date_of_birth",
    "company_name",
    "position",
    "avatar_url",
)


def get_candidate_profile(db: Session, user_id: int) -> Optional[CandidateProfile]:
    return db.query(CandidateProfile).filter(CandidateProfile.user_id == user_id).first()


def get_recruiter_profile(db: Session, user_id: int) -> Optional[RecruiterProfile]:
    return db.query(RecruiterProfile).filter(RecruiterProfile.user_id == user_id).first()


def _upsert(db: Session, model, user_id: int, fields: tuple[str, ...], changes: dict[str, Any]):
    profile = db.query(model).filter(model.user_id == user_id).first()
    if profile is None:
        profile = model(user_id=user_id)
        db.add(profile)
    # Keys left out of the patch keep their stored value
    for field in fields:
        if field in changes:
            setattr(profile, field, changes[field])
    db.commit()
    db.refresh(profile)
    return profile


def upsert_candidate_profile(db: Session, user_id: int, changes: dict[str, Any]) -> CandidateProfile:
    return _upsert(db, CandidateProfile, user_id, CANDIDATE_PROFILE_FIELDS, changes)


def upsert_recruiter_profile(db: Session, user_id: int, changes: dict[str, Any]) -> RecruiterProfile:
    return _upsert(db, RecruiterProfile, user_id, RECRUITER_PROFILE_FIELDS, changes)
