import asyncio
import logging
from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from flowershop.models.order import Order, OrderStatus
from flowershop.services.scheduler import OrderStatusScheduler


@pytest.fixture
def scheduler(session_factory, clock):
    return OrderStatusScheduler(session_factory=session_factory, clock=clock, interval_seconds=0.01)


@pytest.fixture
def owner(make_user):
    return make_user()


@pytest.fixture
def product(make_product):
    return make_product(price=100)


def status_of(db, order_id) -> OrderStatus:
    db.expire_all()
    return db.get(Order, order_id).status


def test_sweep_delivers_stale_orders_and_leaves_fresh_ones(db, scheduler, owner, product, make_order):
    stale = make_order(owner, product, age=timedelta(minutes=31))
    fresh = make_order(owner, product, age=timedelta(minutes=10))

    delivered = scheduler.sweep()

    assert delivered == [stale.id]
    assert status_of(db, stale.id) == OrderStatus.DELIVERED
    assert status_of(db, fresh.id) == OrderStatus.NEW


def test_dwell_boundary_is_inclusive(db, scheduler, owner, product, make_order):
    exactly = make_order(owner, product, age=timedelta(minutes=30))
    almost = make_order(owner, product, age=timedelta(minutes=29, seconds=59))

    scheduler.sweep()

    assert status_of(db, exactly.id) == OrderStatus.DELIVERED
    assert status_of(db, almost.id) == OrderStatus.NEW


def test_sweep_never_touches_cancelled_orders(db, scheduler, owner, product, make_order):
    cancelled = make_order(owner, product, age=timedelta(hours=2), status=OrderStatus.CANCELLED)

    assert scheduler.sweep() == []
    assert status_of(db, cancelled.id) == OrderStatus.CANCELLED


def test_sweep_uses_explicit_now(db, scheduler, clock, owner, product, make_order):
    order = make_order(owner, product, age=timedelta(minutes=1))

    assert scheduler.sweep() == []
    assert scheduler.sweep(now=clock() + timedelta(minutes=29)) == [order.id]


def test_order_cancelled_after_scan_is_not_delivered(db, scheduler, clock, owner, product, make_order):
    order = make_order(owner, product, age=timedelta(minutes=40))
    order.status = OrderStatus.CANCELLED
    db.commit()

    assert scheduler._deliver(order.id, clock()) is False
    assert status_of(db, order.id) == OrderStatus.CANCELLED


def test_one_failing_order_does_not_stop_the_sweep(db, scheduler, owner, product, make_order, monkeypatch, caplog):
    broken = make_order(owner, product, age=timedelta(minutes=50))
    healthy = make_order(owner, product, age=timedelta(minutes=45))

    deliver = scheduler._deliver

    def flaky_deliver(order_id, now):
        if order_id == broken.id:
            raise OperationalError("UPDATE orders", {}, Exception("database is locked"))
        return deliver(order_id, now)

    monkeypatch.setattr(scheduler, "_deliver", flaky_deliver)

    with caplog.at_level(logging.ERROR, logger="flowershop.services.scheduler"):
        delivered = scheduler.sweep()

    assert delivered == [healthy.id]
    assert status_of(db, broken.id) == OrderStatus.NEW
    assert status_of(db, healthy.id) == OrderStatus.DELIVERED
    assert f"Failed to mark order id {broken.id} as DELIVERED" in caplog.text


def test_unexpected_error_on_one_order_does_not_stop_the_sweep(
    db, scheduler, owner, product, make_order, monkeypatch, caplog
):
    broken = make_order(owner, product, age=timedelta(minutes=50))
    healthy = make_order(owner, product, age=timedelta(minutes=45))

    deliver = scheduler._deliver

    def flaky_deliver(order_id, now):
        if order_id == broken.id:
            raise ValueError("bad row")
        return deliver(order_id, now)

    monkeypatch.setattr(scheduler, "_deliver", flaky_deliver)

    with caplog.at_level(logging.ERROR, logger="flowershop.services.scheduler"):
        delivered = scheduler.sweep()

    assert delivered == [healthy.id]
    assert f"Failed to mark order id {broken.id} as DELIVERED" in caplog.text


def test_delivery_is_logged(scheduler, owner, product, make_order, caplog):
    order = make_order(owner, product, age=timedelta(minutes=31))

    with caplog.at_level(logging.INFO, logger="flowershop.services.scheduler"):
        scheduler.sweep()

    assert f"Order id {order.id} automatically updated to DELIVERED" in caplog.text


def test_interval_and_dwell_are_independent(session_factory, clock):
    scheduler = OrderStatusScheduler(
        session_factory=session_factory,
        clock=clock,
        interval_seconds=5,
        dwell=timedelta(minutes=45),
    )
    assert scheduler.interval_seconds == 5
    assert scheduler.dwell == timedelta(minutes=45)


# -------------------------
# periodic loop
# -------------------------

def test_loop_sweeps_until_stopped(scheduler):
    calls = []
    scheduler.sweep = lambda now=None: calls.append(now) or []

    async def run():
        scheduler.start()
        await asyncio.sleep(0.1)
        assert scheduler.running
        await scheduler.stop()

    asyncio.run(run())

    assert len(calls) >= 2
    assert not scheduler.running


def test_loop_survives_a_failing_tick(scheduler, caplog):
    calls = []

    def sweep(now=None):
        calls.append(now)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return []

    scheduler.sweep = sweep

    async def run():
        scheduler.start()
        await asyncio.sleep(0.1)
        await scheduler.stop()

    with caplog.at_level(logging.ERROR, logger="flowershop.services.scheduler"):
        asyncio.run(run())

    assert len(calls) >= 2
    assert "Order status sweep failed" in caplog.text


def test_start_twice_keeps_one_task(scheduler):
    scheduler.sweep = lambda now=None: []

    async def run():
        scheduler.start()
        first = scheduler._task
        scheduler.start()
        assert scheduler._task is first
        await scheduler.stop()

    asyncio.run(run())


def test_stop_without_start_is_a_no_op(scheduler):
    asyncio.run(scheduler.stop())
    assert not scheduler.running
