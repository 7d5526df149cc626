from pydantic import Field

from flowershop.schemas.base import CamelModel


class SaveCategoryRequest(CamelModel):
    name: str = Field(min_length=1, max_length=80)


class CategoryDto(CamelModel):
    id: int
    name: str
