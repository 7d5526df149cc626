import enum

from sqlalchemy import Integer, String, Enum
from sqlalchemy.orm import Mapped, mapped_column
from flowershop.core.db import Base


class UserType(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(80), default="")
    surname: Mapped[str] = mapped_column(String(80), default="")
    username: Mapped[str] = mapped_column(String(80), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(160), unique=True, index=True)
    password: Mapped[str] = mapped_column(String(120))
    user_type: Mapped[UserType] = mapped_column(Enum(UserType, native_enum=False), default=UserType.USER)

    @property
    def is_admin(self) -> bool:
        return self.user_type == UserType.ADMIN
