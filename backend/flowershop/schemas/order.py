from datetime import datetime

from flowershop.models.order import OrderStatus
from flowershop.schemas.base import CamelModel
from flowershop.schemas.product import ProductDto


class SaveOrderRequest(CamelModel):
    product_id: int
    address: str = ""
    quantity: int


class UpdateOrderRequest(CamelModel):
    # admins only cancel, so both fields may be left out
    address: str | None = None
    quantity: int | None = None


class OrderDto(CamelModel):
    id: int
    user_id: int
    price: float
    status: OrderStatus
    order_date: datetime
    product: ProductDto
    address: str
    quantity: int
