import logging
from pathlib import Path

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from flowershop.core.config import settings
from flowershop.core.errors import (
    BadRequest,
    CategoryNotFound,
    ProductAlreadyExists,
    ProductNotFound,
    ResourceInUse,
)
from flowershop.models.cart_item import CartItem
from flowershop.models.category import Category
from flowershop.models.favorite import Favorite
from flowershop.models.order import Order
from flowershop.models.product import Product
from flowershop.models.user import User
from flowershop.schemas.product import SaveProductRequest

logger = logging.getLogger(__name__)

PRODUCT_SORTS = {
    "name": Product.name,
    "price": Product.price,
    "id": Product.id,
}


def list_products(db: Session, page: int = 0, size: int = 20, sort: str = "name") -> tuple[list[Product], int]:
    column = PRODUCT_SORTS.get(sort, Product.name)
    stmt = select(Product).order_by(column.asc(), Product.id.asc()).offset(page * size).limit(size)
    products = list(db.scalars(stmt).all())
    total = db.scalar(select(func.count()).select_from(Product)) or 0
    logger.info("Fetched %s of %s products (page=%s, size=%s, sort=%s)", len(products), total, page, size, sort)
    return products, total


def get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        logger.error("Product not found with id: %s", product_id)
        raise ProductNotFound(f"Product not found with id {product_id}")
    return product


def find_by_name(db: Session, name: str) -> Product:
    product = db.scalar(select(Product).where(Product.name == name))
    if product is None:
        logger.error("Product not found with name: %s", name)
        raise ProductNotFound(f"Product not found with name: {name}")
    return product


def _category(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        logger.error("Category not found with id: %s", category_id)
        raise CategoryNotFound(f"Category not found with id {category_id}")
    return category


def create_product(db: Session, request: SaveProductRequest, admin: User) -> Product:
    logger.info("User with id: %s is creating a new product", admin.id)

    existing = db.scalar(select(Product).where(Product.name == request.name))
    if existing is not None:
        logger.warning("Product with name '%s' already exists with id: %s", request.name, existing.id)
        raise ProductAlreadyExists(f"Product with name '{request.name}' already exists")

    product = Product(
        name=request.name,
        description=request.description,
        price=request.price,
        image=request.image,
        category=_category(db, request.category_id),
        user_id=admin.id,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Product with id: %s successfully created", product.id)
    return product


def update_product(db: Session, product_id: int, request: SaveProductRequest, admin: User) -> Product:
    logger.info("User with id: %s is attempting to update product with id: %s", admin.id, product_id)
    product = get_product(db, product_id)

    if request.name != product.name:
        existing = db.scalar(select(Product).where(Product.name == request.name))
        if existing is not None:
            logger.warning("Product with name '%s' already exists with id: %s", request.name, existing.id)
            raise ProductAlreadyExists(f"Product with name '{request.name}' already exists")

    product.name = request.name
    product.description = request.description
    product.price = request.price
    product.category = _category(db, request.category_id)
    if request.image:
        product.image = request.image

    db.commit()
    db.refresh(product)
    logger.info("Product with id: %s successfully updated", product_id)
    return product


def _referenced_by(db: Session, model, product_id: int) -> bool:
    return db.scalar(select(model.id).where(model.product_id == product_id).limit(1)) is not None


def delete_product(db: Session, product_id: int, admin: User) -> None:
    logger.info("User with id: %s is attempting to delete product with id: %s", admin.id, product_id)
    product = get_product(db, product_id)

    if _referenced_by(db, Order, product_id):
        logger.warning("Cannot delete product with id: %s because it has been ordered", product_id)
        raise ResourceInUse("Cannot delete product that has been ordered")
    if _referenced_by(db, Favorite, product_id):
        logger.warning("Cannot delete product with id: %s because it is in favorites", product_id)
        raise ResourceInUse("Cannot delete product that has been added to favorites")
    if _referenced_by(db, CartItem, product_id):
        logger.warning("Cannot delete product with id: %s because it is in cart", product_id)
        raise ResourceInUse("Cannot delete product that is in the cart")

    db.delete(product)
    db.commit()
    logger.info("Product with id: %s successfully deleted", product_id)


def image_path(image_name: str, images_dir: str | None = None) -> Path:
    base = Path(images_dir or settings.IMAGES_DIR).resolve()
    path = (base / image_name).resolve()

    if not path.is_relative_to(base):
        logger.error("Invalid image path: %s - path traversal detected", image_name)
        raise BadRequest(f"Invalid image path: {image_name}")
    if not path.is_file():
        logger.error("Image file not found: %s", image_name)
        raise ProductNotFound(f"Image file not found: {image_name}")
    return path
