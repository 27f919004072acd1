from fastapi import APIRouter, Depends, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.core.events import CartEvents
from app.core.exceptions import ValidationError
from app.crud import cart as crud_cart
from app.crud import product as crud_product
from app.db.deps import get_cart_events, get_current_user, get_db, get_stream_user
from app.models.models import Profile
from app.schemas.schemas import CartCount, CartItemCreate, CartLineOut, CartOut, CartQuantityUpdate
from app.services.cart_service import compute_totals

router = APIRouter()

@router.get("/", response_model=CartOut)
def get_cart(
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user)
):
    lines = crud_cart.get_cart(db, user.id)
    return {"items": lines, "totals": compute_totals(lines)}

@router.get("/count", response_model=CartCount)
def get_cart_count(
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user)
):
    return {"count": crud_cart.count_cart(db, user.id)}

@router.post("/", response_model=CartLineOut, status_code=status.HTTP_201_CREATED)
def add_item(
    data: CartItemCreate,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user),
    events: CartEvents = Depends(get_cart_events)
):
    product = crud_product.get_product_or_404(db, data.product_id)
    if product.stock_quantity <= 0:
        raise ValidationError("Out of stock")
    item = crud_cart.add_to_cart(db, user.id, data.product_id)
    events.publish(user.id, "line_added", line_id=item.id)
    return item

@router.patch("/{line_id}", response_model=CartLineOut)
def change_quantity(
    line_id: str,
    data: CartQuantityUpdate,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user),
    events: CartEvents = Depends(get_cart_events)
):
    item = crud_cart.change_quantity(db, user.id, line_id, data.delta)
    events.publish(user.id, "line_updated", line_id=item.id)
    return item

@router.delete("/{line_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_item(
    line_id: str,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user),
    events: CartEvents = Depends(get_cart_events)
):
    crud_cart.remove_from_cart(db, user.id, line_id)
    events.publish(user.id, "line_removed", line_id=line_id)

@router.get("/events")
async def stream_cart_events(
    user: Profile = Depends(get_stream_user),
    events: CartEvents = Depends(get_cart_events)
):
    """Server-sent events: one message per change to the caller's cart.
    Accepts the session as a bearer header or as ?access_token= for EventSource clients.
    """
    user_id = user.id

    async def event_stream():
        async for payload in events.listen(user_id):
            yield f"data: {payload}\n\n"

    return StreamingResponse(event_stream(), media_type="text/event-stream")
