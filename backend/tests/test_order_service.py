from datetime import timedelta

import pytest

from flowershop.core.clock import as_utc
from flowershop.core.errors import (
    AccessDenied,
    BadRequest,
    Forbidden,
    OrderNotFound,
    ProductNotFound,
    UserNotFound,
)
from flowershop.models.order import Order, OrderStatus
from flowershop.models.user import UserType
from flowershop.schemas.order import SaveOrderRequest, UpdateOrderRequest
from flowershop.services.orders import OrderService

from conftest import NOW


@pytest.fixture
def service(db, clock):
    return OrderService(db, clock=clock)


@pytest.fixture
def owner(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(UserType.ADMIN)


def reload(db, order_id) -> Order:
    db.expire_all()
    return db.get(Order, order_id)


# -------------------------
# create
# -------------------------

def test_create_prices_by_quantity_and_starts_new(service, owner, make_product):
    product = make_product(price=100)

    order = service.create(SaveOrderRequest(product_id=product.id, address="Rose st 7", quantity=2), owner.id)

    assert float(order.price) == 200
    assert order.status == OrderStatus.NEW
    assert order.quantity == 2
    assert order.address == "Rose st 7"
    assert order.user_id == owner.id
    assert as_utc(order.order_date) == NOW


def test_create_unknown_product(service, owner):
    with pytest.raises(ProductNotFound):
        service.create(SaveOrderRequest(product_id=404, address="x", quantity=1), owner.id)


def test_create_unknown_user(service, make_product):
    product = make_product()
    with pytest.raises(UserNotFound):
        service.create(SaveOrderRequest(product_id=product.id, address="x", quantity=1), 12345)


@pytest.mark.parametrize("quantity", [0, -3])
def test_create_rejects_non_positive_quantity(service, owner, make_product, quantity):
    product = make_product()
    with pytest.raises(BadRequest, match="quantity must be greater than 0"):
        service.create(SaveOrderRequest(product_id=product.id, address="x", quantity=quantity), owner.id)


# -------------------------
# get / list
# -------------------------

def test_get_missing_order(service):
    with pytest.raises(OrderNotFound, match="Order not found with id 999"):
        service.get(999)


@pytest.fixture
def three_orders(owner, make_product, make_order):
    product = make_product(price=100)
    middle = make_order(owner, product, quantity=3, age=timedelta(minutes=20), status=OrderStatus.NEW)
    cheap = make_order(owner, product, quantity=1, age=timedelta(minutes=40), status=OrderStatus.DELIVERED)
    pricey = make_order(owner, product, quantity=5, age=timedelta(minutes=1), status=OrderStatus.CANCELLED)
    return cheap, middle, pricey


def test_list_sorted_by_price(service, owner, three_orders):
    cheap, middle, pricey = three_orders
    ids = [o.id for o in service.list_for_user(owner.id, "price")]
    assert ids == [cheap.id, middle.id, pricey.id]


def test_list_sorted_by_status_name(service, owner, three_orders):
    cheap, middle, pricey = three_orders
    statuses = [o.status for o in service.list_for_user(owner.id, "status")]
    assert statuses == [OrderStatus.CANCELLED, OrderStatus.DELIVERED, OrderStatus.NEW]


@pytest.mark.parametrize("sort_by", ["orderDate", "bogus", None, ""])
def test_list_defaults_to_newest_first(service, owner, three_orders, sort_by):
    cheap, middle, pricey = three_orders
    ids = [o.id for o in service.list_for_user(owner.id, sort_by)]
    assert ids == [pricey.id, middle.id, cheap.id]


def test_list_only_returns_callers_orders(service, owner, make_user, make_product, make_order):
    other = make_user()
    product = make_product()
    mine = make_order(owner, product)
    make_order(other, product)

    assert [o.id for o in service.list_for_user(owner.id)] == [mine.id]


# -------------------------
# update
# -------------------------

def test_owner_edits_address_and_quantity(db, service, owner, make_product, make_order):
    order = make_order(owner, make_product(price=100), quantity=1)

    updated = service.update(order.id, UpdateOrderRequest(address="New Address", quantity=3), owner)

    assert updated.address == "New Address"
    assert updated.quantity == 3
    assert float(updated.price) == 300
    assert updated.status == OrderStatus.NEW

    stored = reload(db, order.id)
    assert float(stored.price) == 300


def test_owner_without_address_keeps_old_one(service, owner, make_product, make_order):
    order = make_order(owner, make_product(price=50), address="Old street 3")

    updated = service.update(order.id, UpdateOrderRequest(quantity=2), owner)

    assert updated.address == "Old street 3"
    assert float(updated.price) == 100


def test_price_follows_current_product_price(db, service, owner, make_product, make_order):
    product = make_product(price=100)
    order = make_order(owner, product, quantity=2)
    product.price = 120
    db.commit()

    updated = service.update(order.id, UpdateOrderRequest(quantity=2), owner)

    assert float(updated.price) == 240


def test_admin_update_only_cancels(db, service, owner, admin, make_product, make_order):
    order = make_order(owner, make_product(price=100), quantity=2, address="Keep me")

    updated = service.update(order.id, UpdateOrderRequest(address="Ignored", quantity=9), admin)

    assert updated.status == OrderStatus.CANCELLED
    stored = reload(db, order.id)
    assert stored.status == OrderStatus.CANCELLED
    assert stored.address == "Keep me"
    assert stored.quantity == 2
    assert float(stored.price) == 200


def test_owner_zero_quantity_is_rejected_and_nothing_changes(db, service, owner, make_product, make_order):
    order = make_order(owner, make_product(price=100), quantity=2, address="Before")

    with pytest.raises(BadRequest, match="quantity must be greater than 0"):
        service.update(order.id, UpdateOrderRequest(address="After", quantity=0), owner)

    stored = reload(db, order.id)
    assert stored.quantity == 2
    assert stored.address == "Before"
    assert float(stored.price) == 200


def test_stranger_gets_access_denied(db, service, owner, make_user, make_product, make_order):
    stranger = make_user()
    order = make_order(owner, make_product(), quantity=1, address="Mine")

    with pytest.raises(AccessDenied):
        service.update(order.id, UpdateOrderRequest(address="Theirs", quantity=4), stranger)

    stored = reload(db, order.id)
    assert stored.address == "Mine"
    assert stored.quantity == 1


def test_update_missing_order(service, owner):
    with pytest.raises(OrderNotFound):
        service.update(999, UpdateOrderRequest(quantity=1), owner)


@pytest.mark.parametrize("status", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
def test_terminal_orders_reject_every_update(service, owner, admin, make_product, make_order, status):
    order = make_order(owner, make_product(), age=timedelta(minutes=1), status=status)

    with pytest.raises(Forbidden, match="admin can cancel only NEW orders"):
        service.update(order.id, UpdateOrderRequest(), admin)
    with pytest.raises(Forbidden, match=f"already {status.value}"):
        service.update(order.id, UpdateOrderRequest(quantity=2), owner)


def test_update_at_exactly_ten_minutes_succeeds(service, owner, make_product, make_order):
    order = make_order(owner, make_product(), age=timedelta(minutes=10))

    updated = service.update(order.id, UpdateOrderRequest(quantity=4), owner)

    assert updated.quantity == 4


def test_update_one_second_late_is_forbidden(service, owner, admin, make_product, make_order):
    order = make_order(owner, make_product(), age=timedelta(minutes=10, seconds=1))

    with pytest.raises(Forbidden, match="you cannot update order after 10 minutes"):
        service.update(order.id, UpdateOrderRequest(quantity=4), owner)
    with pytest.raises(Forbidden, match="admin cannot cancel after 10 minutes"):
        service.update(order.id, UpdateOrderRequest(), admin)


def test_window_is_measured_against_the_injected_clock(service, clock, owner, make_product, make_order):
    order = make_order(owner, make_product(), age=timedelta(minutes=0))
    clock.advance(minutes=11)

    with pytest.raises(Forbidden):
        service.update(order.id, UpdateOrderRequest(quantity=2), owner)
