from pydantic import Field

from flowershop.schemas.base import CamelModel
from flowershop.schemas.category import CategoryDto


class SaveProductRequest(CamelModel):
    name: str = Field(min_length=1, max_length=160)
    description: str = ""
    price: float = Field(ge=0)
    image: str | None = None
    category_id: int


class ProductDto(CamelModel):
    id: int
    name: str
    description: str
    price: float
    image: str | None = None
    category: CategoryDto | None = None


class ProductPage(CamelModel):
    content: list[ProductDto]
    page: int
    size: int
    total_elements: int
