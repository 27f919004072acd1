from typing import Optional
from fastapi import Depends, Query
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from app.core.events import CartEvents, cart_events
from app.core.exceptions import AccountBanned, AuthError, Forbidden
from app.core.security import decode_access_token
from app.db.session import SessionLocal
from app.models.models import Profile


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

# Dependency to get DB
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# Dependency to get the cart change publisher
def get_cart_events() -> CartEvents:
    return cart_events

def _resolve_profile(token: str, db: Session) -> Profile:
    profile_id = decode_access_token(token)
    if profile_id is None:
        raise AuthError("Session expired. Please sign in again.")

    profile = db.query(Profile).filter(Profile.id == profile_id).first()
    if profile is None:
        raise AuthError("Session expired. Please sign in again.")

    if profile.is_banned:
        raise AccountBanned("Your account has been deactivated. Please contact support.")

    return profile

# Dependency to resolve the session token to the active profile
def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> Profile:
    return _resolve_profile(token, db)

# Dependency for event streams: browser EventSource cannot set headers,
# so the token may also come as ?access_token=
def get_stream_user(
    header_token: Optional[str] = Depends(optional_oauth2_scheme),
    access_token: Optional[str] = Query(None),
    db: Session = Depends(get_db),
) -> Profile:
    token = header_token or access_token
    if not token:
        raise AuthError("Not authenticated")
    return _resolve_profile(token, db)

# Dependency for the back office
def get_current_admin(profile: Profile = Depends(get_current_user)) -> Profile:
    if not profile.is_admin:
        raise Forbidden("Admin access required")
    return profile
