from fastapi import APIRouter, Body, Depends, Query, Response
from sqlalchemy.orm import Session

from flowershop.core.db import get_db
from flowershop.models.user import User
from flowershop.routes.deps import get_current_user
from flowershop.schemas.favorite import FavoriteDto, SaveFavoriteRequest
from flowershop.services import favorites

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("/{user_id}", response_model=list[FavoriteDto])
def get_favorites_by_user(
    user_id: int,
    sort_by: str | None = Query(None, alias="sortBy"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [FavoriteDto.from_entity(f) for f in favorites.get_favorites(db, user_id, sort_by)]


@router.post("", response_model=FavoriteDto, status_code=201)
def create_favorite(
    response: Response,
    request: SaveFavoriteRequest | None = Body(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    product_id = request.product_id if request is not None else 0
    favorite = favorites.add_to_favorites(db, current_user.id, product_id)
    response.headers["Location"] = f"/favorites/{favorite.id}"
    return FavoriteDto.from_entity(favorite)


@router.delete("/{favorite_id}", status_code=204)
def delete_favorite(
    favorite_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    favorites.remove_favorite(db, current_user.id, favorite_id)
    return Response(status_code=204)
