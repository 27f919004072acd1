from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.core.exceptions import ValidationError
from app.crud import address as crud_address
from app.crud import user as crud_user
from app.db.deps import get_current_user, get_db
from app.models.models import Profile
from app.schemas.schemas import AddressCreate, AddressOut, ProfileOut, ProfileUpdate

router = APIRouter()

@router.put("/", response_model=ProfileOut)
def update_profile(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user)
):
    if not data.name.strip() or not data.phone.strip():
        raise ValidationError("Name and phone are required")
    return crud_user.update_profile(db, user, data.name.strip(), data.phone.strip())

@router.get("/addresses", response_model=List[AddressOut])
def list_addresses(
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user)
):
    return crud_address.get_addresses(db, user.id)

@router.post("/addresses", response_model=AddressOut, status_code=status.HTTP_201_CREATED)
def add_address(
    data: AddressCreate,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user)
):
    return crud_address.create_address(db, user.id, data)

@router.delete("/addresses/{address_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_address(
    address_id: str,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user)
):
    crud_address.delete_address(db, user.id, address_id)
