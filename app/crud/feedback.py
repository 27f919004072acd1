from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from app.core.exceptions import NotFound, ValidationError
from app.models.models import Feedback
from app.schemas.schemas import FeedbackCreate

def create_feedback(db: Session, user_id: str, data: FeedbackCreate) -> Feedback:
    if not data.message.strip():
        raise ValidationError("Message cannot be empty")
    ticket = Feedback(user_id=user_id, type=data.type, message=data.message, status="Pending")
    db.add(ticket)
    db.commit()
    db.refresh(ticket)
    return ticket

def get_user_feedback(db: Session, user_id: str) -> List[Feedback]:
    return (
        db.query(Feedback)
        .filter(Feedback.user_id == user_id)
        .order_by(Feedback.created_at.desc())
        .all()
    )

def list_feedback(db: Session, feedback_type: Optional[str] = None) -> List[Feedback]:
    query = db.query(Feedback).options(joinedload(Feedback.profile))
    if feedback_type and feedback_type != "All":
        query = query.filter(Feedback.type == feedback_type)
    return query.order_by(Feedback.created_at.desc()).all()

def toggle_status(db: Session, feedback_id: str) -> Feedback:
    ticket = db.query(Feedback).filter(Feedback.id == feedback_id).first()
    if not ticket:
        raise NotFound("Ticket not found")
    ticket.status = "Resolved" if ticket.status == "Pending" else "Pending"
    db.commit()
    db.refresh(ticket)
    return ticket
