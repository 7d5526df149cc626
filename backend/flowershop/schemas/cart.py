from flowershop.schemas.base import CamelModel


class SaveCartItemRequest(CamelModel):
    product_id: int


class CartDto(CamelModel):
    id: int
    product_id: int
    product_name: str
    product_description: str
    product_price: float
    product_image: str | None = None

    @classmethod
    def from_entity(cls, item) -> "CartDto":
        product = item.product
        return cls(
            id=item.id,
            product_id=product.id,
            product_name=product.name,
            product_description=product.description,
            product_price=float(product.price),
            product_image=product.image,
        )
