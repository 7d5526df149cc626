import enum

from sqlalchemy import Integer, String, DateTime, Numeric, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime, timezone
from flowershop.core.db import Base
from flowershop.models.product import Product
from flowershop.models.user import User


class OrderStatus(str, enum.Enum):
    NEW = "NEW"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False)
    price: Mapped[float] = mapped_column(Numeric(10, 2))
    # stored by name, so ORDER BY status sorts CANCELLED < DELIVERED < NEW
    status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus, native_enum=False, length=20), default=OrderStatus.NEW, index=True
    )
    order_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )
    address: Mapped[str] = mapped_column(String(255), default="")
    quantity: Mapped[int] = mapped_column(Integer)

    user: Mapped["User"] = relationship("User")
    product: Mapped["Product"] = relationship("Product", back_populates="orders")
