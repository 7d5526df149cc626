import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from flowershop.core.errors import AccessDenied, CartItemNotFound, ProductNotFound, UserNotFound
from flowershop.models.cart_item import CartItem
from flowershop.models.product import Product
from flowershop.models.user import User

logger = logging.getLogger(__name__)


def get_cart(db: Session, user_id: int, sort_by: str = "productName") -> list[CartItem]:
    if sort_by != "productName":
        logger.warning("Invalid sortBy value '%s'. Using default sort by 'productName'.", sort_by)

    stmt = (
        select(CartItem)
        .join(CartItem.product)
        .where(CartItem.user_id == user_id)
        .order_by(Product.name.asc(), CartItem.id.asc())
    )
    return list(db.scalars(stmt).all())


def add_to_cart(db: Session, user_id: int, product_id: int) -> CartItem:
    logger.info("Request to add product=%s to cart for user=%s", product_id, user_id)

    if db.get(User, user_id) is None:
        raise UserNotFound("User not found")
    if db.get(Product, product_id) is None:
        raise ProductNotFound("Product not found")

    item = CartItem(user_id=user_id, product_id=product_id)
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("New cartItem created id=%s for user=%s", item.id, user_id)
    return item


def remove_from_cart(db: Session, user_id: int, cart_item_id: int) -> None:
    item = db.get(CartItem, cart_item_id)
    if item is None:
        logger.error("CartItem %s not found for user=%s", cart_item_id, user_id)
        raise CartItemNotFound("Cart item not found")

    if item.user_id != user_id:
        logger.error("User %s attempted to delete cartItem %s belonging to another user", user_id, cart_item_id)
        raise AccessDenied("You cannot delete another user's cart item")

    db.delete(item)
    db.commit()
    logger.info("Removed cartItem=%s for user=%s", cart_item_id, user_id)
