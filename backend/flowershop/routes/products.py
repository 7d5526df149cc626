from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from flowershop.core.db import get_db
from flowershop.models.user import User
from flowershop.routes.deps import require_admin
from flowershop.schemas.product import ProductDto, ProductPage, SaveProductRequest
from flowershop.services import products

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=ProductPage)
def get_all_products(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    sort: str = Query("name"),
    db: Session = Depends(get_db),
):
    content, total = products.list_products(db, page, size, sort)
    return ProductPage(
        content=[ProductDto.model_validate(p) for p in content],
        page=page,
        size=size,
        total_elements=total,
    )


@router.get("/img/{image_name}")
def get_image(image_name: str):
    return FileResponse(products.image_path(image_name))


@router.get("/{name}", response_model=ProductDto)
def get_product_by_name(name: str, db: Session = Depends(get_db)):
    return products.find_by_name(db, name)


@router.post("", response_model=ProductDto, status_code=201)
def create_product(
    request: SaveProductRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return products.create_product(db, request, admin)


@router.put("/{product_id}", response_model=ProductDto)
def update_product(
    product_id: int,
    request: SaveProductRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return products.update_product(db, product_id, request, admin)


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    products.delete_product(db, product_id, admin)
    return Response(status_code=204)
