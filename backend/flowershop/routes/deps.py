from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from flowershop.core.clock import Clock, utcnow
from flowershop.core.db import get_db
from flowershop.core.errors import AccessDenied, Unauthorized
from flowershop.core.security import decode_access_token
from flowershop.models.user import User
from flowershop.services.orders import OrderService
from flowershop.services.users import find_by_email

bearer = HTTPBearer(auto_error=False)


def get_clock() -> Clock:
    return utcnow


def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> User | None:
    if credentials is None:
        return None
    email = decode_access_token(credentials.credentials)
    if email is None:
        return None
    return find_by_email(db, email)


def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise Unauthorized("User is not authenticated")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise AccessDenied("Only admins can perform this action")
    return user


def get_order_service(db: Session = Depends(get_db), clock: Clock = Depends(get_clock)) -> OrderService:
    return OrderService(db, clock=clock)
