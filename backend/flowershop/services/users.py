import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from flowershop.core.errors import (
    AccessDenied,
    EmailAlreadyExists,
    ResourceInUse,
    Unauthorized,
    UserNotFound,
    UsernameAlreadyExists,
)
from flowershop.core.security import create_access_token, hash_password, verify_password
from flowershop.models.cart_item import CartItem
from flowershop.models.favorite import Favorite
from flowershop.models.order import Order
from flowershop.models.user import User, UserType
from flowershop.schemas.user import (
    LoginUserRequest,
    SaveUserRequest,
    UpdateUserRequest,
    UserAuthResponse,
)

logger = logging.getLogger(__name__)

USER_SORTS = {
    "username": User.username,
    "email": User.email,
    "name": User.name,
}


def find_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == email))


def find_by_username(db: Session, username: str) -> User | None:
    return db.scalar(select(User).where(User.username == username))


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        logger.error("User with id %s not found", user_id)
        raise UserNotFound(f"User with id {user_id} not found")
    return user


def list_users(db: Session, sort: str | None = "username") -> list[User]:
    column = USER_SORTS.get(sort or "", User.username)
    logger.info("Fetching all users, sorted by %s", column.key)
    return list(db.scalars(select(User).order_by(column.asc(), User.id.asc())).all())


def create_user(db: Session, request: SaveUserRequest, created_by: User | None = None) -> User:
    if request.user_type == UserType.ADMIN and (created_by is None or not created_by.is_admin):
        logger.warning("User creation failed: non-admin tried to create admin %s", request.email)
        raise AccessDenied("Only admins can create admin users")
    if find_by_email(db, request.email):
        logger.error("User creation failed: Email already exists %s", request.email)
        raise EmailAlreadyExists("Email already exists!")
    if find_by_username(db, request.username):
        logger.error("User creation failed: Username already exists %s", request.username)
        raise UsernameAlreadyExists("Username already exists!")

    user = User(
        name=request.name,
        surname=request.surname,
        username=request.username,
        email=request.email,
        password=hash_password(request.password),
        user_type=request.user_type or UserType.USER,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User created successfully: %s", user.email)
    return user


def register_user(db: Session, request: SaveUserRequest) -> User:
    # welcome mail is sent by the route, after the response
    logger.info("Attempting to register user with email: %s", request.email)
    # self-registration always yields a regular user
    return create_user(db, request.model_copy(update={"user_type": UserType.USER}))


def update_user(db: Session, user_id: int, request: UpdateUserRequest) -> User:
    user = get_user(db, user_id)
    logger.info("Updating user details for user id: %s", user_id)

    if request.email is not None and request.email != user.email:
        if find_by_email(db, request.email):
            raise EmailAlreadyExists("Email already exists!")
        user.email = request.email
    if request.username is not None and request.username != user.username:
        if find_by_username(db, request.username):
            raise UsernameAlreadyExists("Username already exists!")
        user.username = request.username
    if request.name is not None:
        user.name = request.name
    if request.surname is not None:
        user.surname = request.surname

    db.commit()
    db.refresh(user)
    logger.info("User updated successfully: %s", user.email)
    return user


def delete_user(db: Session, user_id: int, current_user: User) -> None:
    user = get_user(db, user_id)

    if current_user.id != user_id and not current_user.is_admin:
        logger.error("User deletion failed: Insufficient permissions to delete user with id %s", user_id)
        raise AccessDenied("You are not allowed to delete this user")

    # orders are never deleted, so a user that ordered stays
    if db.scalar(select(Order.id).where(Order.user_id == user_id).limit(1)) is not None:
        raise ResourceInUse("Cannot delete user that has orders")

    db.query(Favorite).filter(Favorite.user_id == user_id).delete(synchronize_session=False)
    db.query(CartItem).filter(CartItem.user_id == user_id).delete(synchronize_session=False)
    db.delete(user)
    db.commit()
    logger.info("User deleted successfully: %s", user.email)


def login(db: Session, request: LoginUserRequest) -> UserAuthResponse:
    user = find_by_email(db, request.email)
    if user is None or not verify_password(request.password, user.password):
        logger.warning("Login failed: Invalid email or password for %s", request.email)
        raise Unauthorized("Invalid email or password")

    logger.info("Login successful for user: %s", user.email)
    return UserAuthResponse(
        token=create_access_token(user.email),
        name=user.name,
        surname=user.surname,
        user_id=str(user.id),
        username=user.username,
    )
