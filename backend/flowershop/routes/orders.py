import logging

from fastapi import APIRouter, Depends, Query

from flowershop.core.errors import AccessDenied
from flowershop.models.user import User
from flowershop.routes.deps import get_current_user, get_order_service
from flowershop.schemas.order import OrderDto, SaveOrderRequest, UpdateOrderRequest
from flowershop.services.orders import DEFAULT_SORT, OrderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=list[OrderDto])
def get_my_orders(
    sort_by: str = Query(DEFAULT_SORT, alias="sortBy"),
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    logger.info("Fetching orders for userId: %s sorted by: %s", current_user.id, sort_by)
    return service.list_for_user(current_user.id, sort_by)


@router.get("/{order_id}", response_model=OrderDto)
def get_order(
    order_id: int,
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    order = service.get(order_id)

    if not current_user.is_admin and order.user_id != current_user.id:
        logger.warning("UserId: %s is trying to access an order that does not belong to them", current_user.id)
        raise AccessDenied("You are not allowed to access this order")
    return order


@router.post("", response_model=OrderDto, status_code=201)
def create_order(
    request: SaveOrderRequest,
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    return service.create(request, current_user.id)


@router.put("/{order_id}", response_model=OrderDto)
def update_order(
    order_id: int,
    request: UpdateOrderRequest,
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    return service.update(order_id, request, current_user)
