from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from flowershop.core.db import get_db
from flowershop.models.user import User
from flowershop.routes.deps import get_current_user
from flowershop.schemas.cart import CartDto, SaveCartItemRequest
from flowershop.services import cart

router = APIRouter(prefix="/cartItem", tags=["cart"])


@router.get("", response_model=list[CartDto])
def get_user_cart_items(
    sort_by: str = Query("productName", alias="sortBy"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [CartDto.from_entity(item) for item in cart.get_cart(db, current_user.id, sort_by)]


@router.post("", response_model=CartDto, status_code=201)
def add_to_cart(
    request: SaveCartItemRequest,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item = cart.add_to_cart(db, current_user.id, request.product_id)
    response.headers["Location"] = f"/cartItem/{item.id}"
    return CartDto.from_entity(item)


@router.delete("/{cart_item_id}", status_code=204)
def delete_cart_item(
    cart_item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    cart.remove_from_cart(db, current_user.id, cart_item_id)
    return Response(status_code=204)
