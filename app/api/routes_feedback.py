from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.crud import feedback as crud_feedback
from app.db.deps import get_current_user, get_db
from app.models.models import Profile
from app.schemas.schemas import FeedbackCreate, FeedbackOut

router = APIRouter()

@router.post("/", response_model=FeedbackOut, status_code=status.HTTP_201_CREATED)
def submit_feedback(
    data: FeedbackCreate,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user)
):
    return crud_feedback.create_feedback(db, user.id, data)

@router.get("/", response_model=List[FeedbackOut])
def list_my_feedback(
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user)
):
    return crud_feedback.get_user_feedback(db, user.id)
