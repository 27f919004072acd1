from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from app.core.config import settings
from app.crud import product as crud_product
from app.crud import review as crud_review
from app.db.deps import get_current_admin, get_current_user, get_db
from app.models.models import Profile
from app.schemas.product import ImageUploadOut, ProductCreate, ProductOut, ProductUpdate
from app.schemas.schemas import ReviewCreate, ReviewEligibility, ReviewOut
from app.utils.s3 import get_image_url, upload_to_storage

logger = logging.getLogger(__name__)

router = APIRouter()

# 🔹 Catalog
@router.get("/", response_model=List[ProductOut])
def list_products(
    category: Optional[str] = Query(None, description="Category name, or All"),
    search: Optional[str] = Query(None, description="Substring of name, category or description"),
    sort: Optional[str] = Query(None, description="price-low, price-high, rating or newest"),
    db: Session = Depends(get_db),
):
    return crud_product.search_products(db, category=category, search=search, sort=sort)

@router.get("/categories", response_model=List[str])
def list_categories():
    return settings.categories

@router.get("/featured", response_model=List[ProductOut])
def list_featured_products(db: Session = Depends(get_db)):
    return crud_product.get_featured_products(db, settings.FEATURED_PRODUCTS_LIMIT)

@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    return crud_product.get_product_or_404(db, product_id)

@router.get("/{product_id}/related", response_model=List[ProductOut])
def list_related_products(product_id: str, db: Session = Depends(get_db)):
    product = crud_product.get_product_or_404(db, product_id)
    return crud_product.get_related_products(db, product, settings.RELATED_PRODUCTS_LIMIT)

# 🔹 Reviews
@router.get("/{product_id}/reviews", response_model=List[ReviewOut])
def list_product_reviews(product_id: str, db: Session = Depends(get_db)):
    return crud_review.get_product_reviews(db, product_id)

@router.get("/{product_id}/can-review", response_model=ReviewEligibility)
def check_review_eligibility(
    product_id: str,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    try:
        return {"can_review": crud_review.has_received_product(db, user.id, product_id)}
    except SQLAlchemyError as e:
        # Unknown purchase history means no review form
        logger.warning(f"Purchase check failed for user {user.id}, product {product_id}: {e}")
        return {"can_review": False}

@router.post("/{product_id}/reviews", response_model=ReviewOut, status_code=status.HTTP_201_CREATED)
def submit_review(
    product_id: str,
    data: ReviewCreate,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    crud_product.get_product_or_404(db, product_id)
    return crud_review.create_review(db, user.id, product_id, data)

# 🔹 Back office
@router.post("/", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate,
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin),
):
    return crud_product.create_product(db, data)

@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: str,
    data: ProductUpdate,
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin),
):
    return crud_product.update_product(db, product_id, data)

@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: str,
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin),
):
    crud_product.delete_product(db, product_id)

@router.post("/images", response_model=ImageUploadOut, status_code=status.HTTP_201_CREATED)
async def upload_product_images(
    images: List[UploadFile] = File(...),
    admin: Profile = Depends(get_current_admin),
):
    """Store product images; the returned paths go into a product's images list"""
    paths = []
    for img in images:
        content = await img.read()
        path = upload_to_storage(content, img.filename, img.content_type)
        logger.info(f"Uploaded image {img.filename} as {path}")
        paths.append(path)
    return {"paths": paths, "urls": [get_image_url(p) for p in paths]}
