from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.core.exceptions import AccountBanned, AuthError, ValidationError
from app.core.security import create_access_token, verify_password
from app.crud import user as crud_user
from app.db.deps import get_current_user, get_db
from app.models.models import Profile
from app.schemas.schemas import ProfileOut, Token, UserLogin, UserSignup
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

def _session_for(profile: Profile) -> dict:
    return {
        "access_token": create_access_token(data={"sub": profile.id}),
        "token_type": "bearer",
        "profile": profile,
    }

@router.post("/signup", response_model=Token, status_code=status.HTTP_201_CREATED)
def signup(data: UserSignup, db: Session = Depends(get_db)):
    if data.password != data.confirm_password:
        raise ValidationError("Passwords do not match")

    profile = crud_user.create_user(db, data)
    logger.info(f"New account {profile.id} signed up")
    return _session_for(profile)

@router.post("/login", response_model=Token)
def login(data: UserLogin, db: Session = Depends(get_db)):
    profile = crud_user.get_user_by_email(db, data.email)

    # Same message whether the account is missing or the password is wrong
    if not profile or not verify_password(data.password, profile.password_hash):
        raise AuthError("Incorrect email or password. Please sign up if you don't have an account.")

    if profile.is_banned:
        raise AccountBanned()

    return _session_for(profile)

@router.get("/me", response_model=ProfileOut)
def resume_session(profile: Profile = Depends(get_current_user)):
    """Resolve a stored session token back to the signed-in profile"""
    return profile

@router.post("/logout")
def logout():
    # Tokens are stateless; the client drops its copy
    return {"success": True}
