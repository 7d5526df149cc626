import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from flowershop.core.errors import AccessDenied, BadRequest, FavoriteNotFound, ProductNotFound, UserNotFound
from flowershop.models.favorite import Favorite
from flowershop.models.product import Product
from flowershop.models.user import User

logger = logging.getLogger(__name__)

FAVORITE_SORTS = {
    "productName": Product.name,
    "productPrice": Product.price,
}


def get_favorites(db: Session, user_id: int, sort_by: str | None = None) -> list[Favorite]:
    logger.info("Find favorites by userId: %s and sortBy: %s", user_id, sort_by)

    if db.get(User, user_id) is None:
        raise UserNotFound(f"User not found with id {user_id}")

    column = FAVORITE_SORTS.get(sort_by or "productName", Product.name)
    stmt = (
        select(Favorite)
        .join(Favorite.product)
        .where(Favorite.user_id == user_id)
        .order_by(column.asc(), Favorite.id.asc())
    )
    favorites = list(db.scalars(stmt).all())
    logger.info("Successfully found %s favorites for userId: %s", len(favorites), user_id)
    return favorites


def add_to_favorites(db: Session, user_id: int, product_id: int) -> Favorite:
    if product_id <= 0:
        raise BadRequest("Request body is missing or invalid")

    if db.get(User, user_id) is None:
        raise UserNotFound("User not found")
    if db.get(Product, product_id) is None:
        raise ProductNotFound("Product not found")

    favorite = Favorite(user_id=user_id, product_id=product_id)
    db.add(favorite)
    db.commit()
    db.refresh(favorite)
    logger.info("Successfully added favorite for userId: %s and productId: %s", user_id, product_id)
    return favorite


def remove_favorite(db: Session, user_id: int, favorite_id: int) -> None:
    favorite = db.get(Favorite, favorite_id)
    if favorite is None:
        logger.error("Favorite item not found with id %s", favorite_id)
        raise FavoriteNotFound(f"Favorite item not found with {favorite_id} id")

    if favorite.user_id != user_id:
        logger.warning("User %s cannot delete another user's favorite item with id %s", user_id, favorite_id)
        raise AccessDenied("You cannot delete another user's favorite item")

    db.delete(favorite)
    db.commit()
    logger.info("Successfully deleted favorite with id %s for user %s", favorite_id, user_id)
