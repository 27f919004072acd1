from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.core.exceptions import Conflict, DuplicateEmail, Forbidden, NotFound
from app.core.security import hash_password
from app.models.models import Profile
from app.schemas.schemas import UserSignup
import logging

logger = logging.getLogger(__name__)

def get_user_by_email(db: Session, email: str) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.email == email).first()

def get_user(db: Session, user_id: str) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.id == user_id).first()

def create_user(db: Session, user_data: UserSignup, role: str = "user") -> Profile:
    if get_user_by_email(db, user_data.email):
        raise DuplicateEmail()

    new_user = Profile(
        name=user_data.name,
        email=user_data.email,
        phone=user_data.phone,
        password_hash=hash_password(user_data.password),
        role=role,
        is_banned=False,
    )
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        db.rollback()
        raise DuplicateEmail()
    db.refresh(new_user)
    return new_user

def update_profile(db: Session, user: Profile, name: str, phone: str) -> Profile:
    user.name = name
    user.phone = phone
    db.commit()
    db.refresh(user)
    return user

def list_users(db: Session) -> List[Profile]:
    return db.query(Profile).order_by(Profile.created_at.desc()).all()

def _get_manageable_user(db: Session, user_id: str) -> Profile:
    user = get_user(db, user_id)
    if not user:
        raise NotFound("User not found")
    if user.is_admin:
        raise Forbidden("Admin accounts cannot be modified")
    return user

def toggle_ban(db: Session, user_id: str) -> Profile:
    user = _get_manageable_user(db, user_id)
    user.is_banned = not user.is_banned
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.id} {'banned' if user.is_banned else 'restored'}")
    return user

def delete_user(db: Session, user_id: str) -> None:
    user = _get_manageable_user(db, user_id)
    try:
        db.delete(user)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Delete of user {user_id} refused by the database: {e}")
        raise Conflict("Delete failed. Check for active orders.")
    logger.info(f"User {user_id} deleted")
