from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List
import logging

from app.crud import favorite as crud_favorite
from app.crud import product as crud_product
from app.db.deps import get_current_user, get_db
from app.models.models import Profile
from app.schemas.schemas import FavoriteOut, FavoriteStatus

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/", response_model=List[FavoriteOut])
def list_favorites(
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user)
):
    return crud_favorite.get_favorites(db, user.id)

@router.get("/{product_id}", response_model=FavoriteStatus)
def check_favorite(
    product_id: str,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user)
):
    try:
        return {"is_favorite": crud_favorite.is_favorite(db, user.id, product_id)}
    except SQLAlchemyError as e:
        logger.warning(f"Favorite check failed for user {user.id}, product {product_id}: {e}")
        return {"is_favorite": False}

@router.post("/{product_id}/toggle", response_model=FavoriteStatus)
def toggle_favorite(
    product_id: str,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user)
):
    crud_product.get_product_or_404(db, product_id)
    return {"is_favorite": crud_favorite.toggle_favorite(db, user.id, product_id)}
