from typing import List, Optional
from sqlalchemy import case, or_, update
from sqlalchemy.orm import Session
from app.core.exceptions import NotFound, ValidationError
from app.models.product import Product
from app.schemas.product import ProductCreate, ProductUpdate
import logging

logger = logging.getLogger(__name__)

SORT_OPTIONS = {
    "price-low": Product.price.asc(),
    "price-high": Product.price.desc(),
    "rating": Product.rating.desc(),
    "newest": Product.created_at.desc(),
}

#  Catalog listing: category, free-text and sort selections
def search_products(
    db: Session,
    category: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[str] = None,
) -> List[Product]:
    query = db.query(Product)

    if category and category != "All":
        query = query.filter(Product.category == category)

    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                Product.name.ilike(pattern),
                Product.category.ilike(pattern),
                Product.description.ilike(pattern),
            )
        )

    ordering = SORT_OPTIONS.get(sort or "newest", SORT_OPTIONS["newest"])
    return query.order_by(ordering).all()

def get_featured_products(db: Session, limit: int = 8) -> List[Product]:
    return db.query(Product).limit(limit).all()

#  Get one product
def get_product_by_id(db: Session, product_id: str) -> Optional[Product]:
    return db.query(Product).filter(Product.id == product_id).first()

def get_product_or_404(db: Session, product_id: str) -> Product:
    product = get_product_by_id(db, product_id)
    if not product:
        raise NotFound("Product not found")
    return product

def get_related_products(db: Session, product: Product, limit: int = 5) -> List[Product]:
    return (
        db.query(Product)
        .filter(Product.category == product.category, Product.id != product.id)
        .limit(limit)
        .all()
    )

def list_all_products(db: Session) -> List[Product]:
    return db.query(Product).order_by(Product.created_at.desc()).all()

def _validate_product(name: Optional[str], images: Optional[list], price: float, discount_price: Optional[float]):
    if not name or not name.strip() or not images:
        raise ValidationError("Name and images are mandatory.")
    if discount_price is not None and discount_price > price:
        raise ValidationError("Discount price cannot exceed the price.")

#  Create a product
def create_product(db: Session, data: ProductCreate) -> Product:
    _validate_product(data.name, data.images, data.price, data.discount_price)
    product = Product(**data.model_dump())
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info(f"Product {product.id} created: {product.name}")
    return product

#  Update product
def update_product(db: Session, product_id: str, data: ProductUpdate) -> Product:
    product = get_product_or_404(db, product_id)
    update_data = data.model_dump(exclude_unset=True)

    merged = {
        "name": update_data.get("name", product.name),
        "images": update_data.get("images", product.images),
        "price": update_data.get("price", product.price),
        "discount_price": update_data.get("discount_price", product.discount_price),
    }
    _validate_product(**merged)

    for key, value in update_data.items():
        setattr(product, key, value)

    db.commit()
    db.refresh(product)
    return product

#  Delete product
def delete_product(db: Session, product_id: str) -> None:
    product = get_product_or_404(db, product_id)
    db.delete(product)
    db.commit()
    logger.info(f"Product {product_id} deleted")

#  Inventory: atomic decrement floored at zero; caller owns the transaction
def decrement_stock(db: Session, product_id: str, quantity: int) -> bool:
    result = db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(
            stock_quantity=case(
                (Product.stock_quantity > quantity, Product.stock_quantity - quantity),
                else_=0,
            )
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0
