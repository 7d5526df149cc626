from pydantic import Field

from flowershop.models.user import UserType
from flowershop.schemas.base import CamelModel

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class SaveUserRequest(CamelModel):
    name: str = ""
    surname: str = ""
    username: str
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str
    user_type: UserType = UserType.USER


class UpdateUserRequest(CamelModel):
    name: str | None = None
    surname: str | None = None
    username: str | None = None
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN)


class LoginUserRequest(CamelModel):
    email: str
    password: str


class UserDto(CamelModel):
    id: int
    name: str
    surname: str
    username: str
    email: str
    user_type: UserType


class UserAuthResponse(CamelModel):
    token: str
    name: str
    surname: str
    user_id: str
    username: str
