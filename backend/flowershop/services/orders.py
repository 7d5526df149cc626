import logging
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from flowershop.core.clock import Clock, as_utc, utcnow
from flowershop.core.config import settings
from flowershop.core.errors import (
    AccessDenied,
    BadRequest,
    Forbidden,
    OrderNotFound,
    ProductNotFound,
    ShopError,
    UserNotFound,
)
from flowershop.models.order import Order, OrderStatus
from flowershop.models.product import Product
from flowershop.models.user import User
from flowershop.schemas.order import SaveOrderRequest, UpdateOrderRequest
from flowershop.services.order_policy import Verdict, decide_update

logger = logging.getLogger(__name__)

DEFAULT_SORT = "orderDate"

# closed set; anything else falls back to DEFAULT_SORT
SORT_ORDERS = {
    "price": (Order.price.asc(), Order.id.asc()),
    "status": (Order.status.asc(), Order.id.asc()),
    "orderDate": (Order.order_date.desc(), Order.id.desc()),
}

QUANTITY_MESSAGE = "quantity must be greater than 0"


class OrderService:
    """Order placement, listing and the update/cancel lifecycle.

    The session and the clock are injected so the time-window rules can be
    exercised with a fixed "now".
    """

    def __init__(
        self,
        db: Session,
        clock: Clock = utcnow,
        edit_window: timedelta | None = None,
    ):
        self.db = db
        self.clock = clock
        self.edit_window = edit_window or timedelta(minutes=settings.ORDER_EDIT_WINDOW_MINUTES)

    def _load(self, order_id: int, lock: bool = False) -> Order:
        order = self.db.get(Order, order_id, with_for_update=lock)
        if order is None:
            logger.error("Order with id: %s not found", order_id)
            raise OrderNotFound(f"Order not found with id {order_id}")
        return order

    def get(self, order_id: int) -> Order:
        logger.info("Finding order with id: %s", order_id)
        return self._load(order_id)

    def create(self, request: SaveOrderRequest, user_id: int) -> Order:
        user = self.db.get(User, user_id)
        if user is None:
            raise UserNotFound("User not found")

        product = self.db.get(Product, request.product_id)
        if product is None:
            raise ProductNotFound("Product not found")

        if request.quantity <= 0:
            raise BadRequest(QUANTITY_MESSAGE)

        order = Order(
            user=user,
            product=product,
            price=product.price * request.quantity,
            status=OrderStatus.NEW,
            order_date=self.clock(),
            address=request.address,
            quantity=request.quantity,
        )
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)

        logger.info("Order %s created for userId: %s", order.id, user_id)
        return order

    def list_for_user(self, user_id: int, sort_by: str | None = DEFAULT_SORT) -> list[Order]:
        if sort_by not in SORT_ORDERS:
            sort_by = DEFAULT_SORT

        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(*SORT_ORDERS[sort_by])
        )
        orders = list(self.db.scalars(stmt).all())
        logger.info("Found %s orders for userId: %s sorted by: %s", len(orders), user_id, sort_by)
        return orders

    def update(self, order_id: int, request: UpdateOrderRequest, caller: User) -> Order:
        """Apply an owner edit or an admin cancellation.

        The order row stays locked from the read until commit, so a concurrent
        sweep cannot deliver an order this call is cancelling (or the other way
        round). Any rule violation rolls back and leaves the row untouched.
        """
        logger.info("User with id: %s is attempting to update order with id: %s", caller.id, order_id)

        try:
            order = self._load(order_id, lock=True)
            elapsed = self.clock() - as_utc(order.order_date)

            decision = decide_update(
                role=caller.user_type,
                owner_id=order.user_id,
                caller_id=caller.id,
                status=order.status,
                elapsed=elapsed,
                edit_window=self.edit_window,
            )

            if decision.verdict == Verdict.DENIED:
                logger.warning("User %s cannot update order %s owned by %s", caller.id, order_id, order.user_id)
                raise AccessDenied(decision.reason)

            if decision.verdict == Verdict.FORBIDDEN:
                logger.warning("Update of order %s refused: %s", order_id, decision.reason)
                raise Forbidden(decision.reason)

            if decision.verdict == Verdict.CANCEL:
                order.status = OrderStatus.CANCELLED
            else:
                quantity = order.quantity if request.quantity is None else request.quantity
                if quantity <= 0:
                    raise BadRequest(QUANTITY_MESSAGE)
                if request.address is not None:
                    order.address = request.address
                order.quantity = quantity
                order.price = order.product.price * quantity
        except ShopError:
            self.db.rollback()
            raise

        self.db.commit()
        self.db.refresh(order)
        logger.info("Successfully updated order with id: %s", order_id)
        return order
