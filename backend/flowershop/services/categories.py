import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from flowershop.core.errors import CategoryAlreadyExists, CategoryNotFound, ResourceInUse
from flowershop.models.category import Category
from flowershop.models.product import Product
from flowershop.schemas.category import SaveCategoryRequest

logger = logging.getLogger(__name__)

CATEGORY_SORTS = {
    "name": Category.name,
    "id": Category.id,
}


def list_categories(
    db: Session,
    page: int = 0,
    size: int = 20,
    sort_by: str = "name",
    sort_order: str = "asc",
) -> list[Category]:
    logger.info(
        "Fetching categories: page=%s, size=%s, sortBy=%s, sortOrder=%s",
        page, size, sort_by, sort_order,
    )
    column = CATEGORY_SORTS.get(sort_by, Category.name)
    ordering = column.desc() if (sort_order or "").lower() == "desc" else column.asc()
    stmt = select(Category).order_by(ordering).offset(page * size).limit(size)
    return list(db.scalars(stmt).all())


def get_category(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        logger.error("Category not found with id=%s", category_id)
        raise CategoryNotFound(f"Category not found with id {category_id}")
    return category


def find_by_name(db: Session, name: str) -> Category:
    category = db.scalar(select(Category).where(Category.name == name))
    if category is None:
        logger.error("Category not found with name=%s", name)
        raise CategoryNotFound(f"Category not found with {name} name")
    return category


def create_category(db: Session, request: SaveCategoryRequest) -> Category:
    logger.info("Saving new category with name=%s", request.name)
    if db.scalar(select(Category).where(Category.name == request.name)):
        raise CategoryAlreadyExists(f"Category '{request.name}' already exists")

    category = Category(name=request.name)
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("Category saved with id=%s", category.id)
    return category


def update_category(db: Session, category_id: int, request: SaveCategoryRequest) -> Category:
    logger.info("Updating category with id=%s with new name=%s", category_id, request.name)
    category = get_category(db, category_id)
    if request.name != category.name and db.scalar(select(Category).where(Category.name == request.name)):
        logger.warning("Cannot rename category id=%s, name '%s' is taken", category_id, request.name)
        raise CategoryAlreadyExists(f"Category '{request.name}' already exists")
    category.name = request.name
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: int) -> None:
    category = get_category(db, category_id)

    in_use = db.scalar(select(Product.id).where(Product.category_id == category_id).limit(1))
    if in_use is not None:
        logger.warning("Cannot delete category id=%s because it has products", category_id)
        raise ResourceInUse("Cannot delete category because it has products. Remove or reassign them first.")

    db.delete(category)
    db.commit()
    logger.info("Category with id=%s deleted successfully", category_id)
