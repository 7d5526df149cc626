from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from flowershop.core.db import Base


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(80), unique=True, index=True)

    products: Mapped[list["Product"]] = relationship("Product", back_populates="category")
