from typing import List, Optional
from sqlalchemy.orm import Session
from app.core.exceptions import NotFound
from app.models.models import Address
from app.schemas.schemas import AddressCreate

def get_addresses(db: Session, user_id: str) -> List[Address]:
    return db.query(Address).filter(Address.user_id == user_id).all()

def get_user_address(db: Session, user_id: str, address_id: str) -> Optional[Address]:
    return db.query(Address).filter(Address.id == address_id, Address.user_id == user_id).first()

def create_address(db: Session, user_id: str, data: AddressCreate) -> Address:
    # First saved address becomes the default
    has_addresses = db.query(Address.id).filter(Address.user_id == user_id).first() is not None
    address = Address(user_id=user_id, is_default=not has_addresses, **data.model_dump())
    db.add(address)
    db.commit()
    db.refresh(address)
    return address

def delete_address(db: Session, user_id: str, address_id: str) -> None:
    address = get_user_address(db, user_id, address_id)
    if not address:
        raise NotFound("Address not found")
    db.delete(address)
    db.commit()
