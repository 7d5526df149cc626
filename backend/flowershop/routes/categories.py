from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from flowershop.core.db import get_db
from flowershop.models.user import User
from flowershop.routes.deps import require_admin
from flowershop.schemas.category import CategoryDto, SaveCategoryRequest
from flowershop.services import categories

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryDto])
def get_all_categories(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    sort_by: str = Query("name", alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder"),
    db: Session = Depends(get_db),
):
    return categories.list_categories(db, page, size, sort_by, sort_order)


@router.get("/{name}", response_model=CategoryDto)
def get_category_by_name(name: str, db: Session = Depends(get_db)):
    return categories.find_by_name(db, name)


@router.post("", response_model=CategoryDto, status_code=201)
def create_category(
    request: SaveCategoryRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return categories.create_category(db, request)


@router.put("/{category_id}", response_model=CategoryDto)
def update_category(
    category_id: int,
    request: SaveCategoryRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return categories.update_category(db, category_id, request)


@router.delete("/{category_id}", status_code=204)
def delete_category(
    category_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    categories.delete_category(db, category_id)
    return Response(status_code=204)
