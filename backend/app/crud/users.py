from typing import Any, Optional

from sqlalchemy.orm import Session

from app.models import User
from app.models.enums import Role


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get a user by email address."""
    return db.query(User).filter(User.email == email).first()


def create_user(
    db: Session,
    *,
    email: str,
    password_hash: str,
    role: Role,
    name: Optional[str] = None,
    phone: Optional[str] = None,
) -> User:
    user = User(email=email, password_hash=password_hash, role=role, name=name, phone=phone)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user_fields(db: Session, user: User, changes: dict[str, Any]) -> User:
    """Apply name/phone changes; other keys are ignored."""
    for field in ("name", "phone"):
        if field in changes:
            setattr(user, field, changes[field])
    db.commit()
    db.refresh(user)
    return user


def set_password_hash(db: Session, user: User, password_hash: str) -> None:
    user.password_hash = password_hash
    db.commit()
