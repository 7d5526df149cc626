from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response
from sqlalchemy.orm import Session

from flowershop.core.db import get_db
from flowershop.models.user import User
from flowershop.routes.deps import get_current_user, get_optional_user
from flowershop.schemas.user import (
    LoginUserRequest,
    SaveUserRequest,
    UpdateUserRequest,
    UserAuthResponse,
    UserDto,
)
from flowershop.services import users
from flowershop.services.mailer import send_welcome_mail

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserDto])
def get_all_users(sort: str = Query("username"), db: Session = Depends(get_db)):
    return users.list_users(db, sort)


@router.get("/{user_id}", response_model=UserDto)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return users.get_user(db, user_id)


@router.post("", response_model=UserDto, status_code=201)
def create_user(
    request: SaveUserRequest,
    current_user: User | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    return users.create_user(db, request, created_by=current_user)


@router.put("", response_model=UserDto)
def update_user(
    request: UpdateUserRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return users.update_user(db, current_user.id, request)


@router.delete("/{user_id}", status_code=204)
def delete_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    users.delete_user(db, user_id, current_user)
    return Response(status_code=204)


@router.post("/register", response_model=UserDto)
def register(request: SaveUserRequest, background_tasks: BackgroundTasks, db: Session = Depends(get_db)):
    user = users.register_user(db, request)
    background_tasks.add_task(send_welcome_mail, user.email, user.username)
    return user


@router.post("/login", response_model=UserAuthResponse)
def login(request: LoginUserRequest, db: Session = Depends(get_db)):
    return users.login(db, request)
