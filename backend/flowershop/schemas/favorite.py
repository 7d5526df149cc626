from flowershop.schemas.base import CamelModel


class SaveFavoriteRequest(CamelModel):
    product_id: int = 0


class FavoriteDto(CamelModel):
    id: int
    user_id: int
    product_id: int
    product_name: str
    product_price: float
    product_description: str
    product_image: str | None = None

    @classmethod
    def from_entity(cls, favorite) -> "FavoriteDto":
        product = favorite.product
        return cls(
            id=favorite.id,
            user_id=favorite.user_id,
            product_id=product.id,
            product_name=product.name,
            product_price=float(product.price),
            product_description=product.description,
            product_image=product.image,
        )
