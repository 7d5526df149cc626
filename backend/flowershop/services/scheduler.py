import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from flowershop.core.clock import Clock, as_utc, utcnow
from flowershop.core.config import settings
from flowershop.core.db import SessionLocal
from flowershop.models.order import Order, OrderStatus

logger = logging.getLogger(__name__)


class OrderStatusScheduler:
    """
    Promotes NEW orders to DELIVERED once they are older than the dwell time.

    This is the only code path that ever sets DELIVERED. ``sweep`` does one
    pass; ``start``/``stop`` run it periodically on an asyncio task.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        clock: Clock = utcnow,
        interval_seconds: float | None = None,
        dwell: timedelta | None = None,
    ):
        self.session_factory = session_factory
        self.clock = clock
        self.interval_seconds = interval_seconds if interval_seconds is not None else settings.SCHEDULER_INTERVAL_SECONDS
        self.dwell = dwell or timedelta(minutes=settings.ORDER_DWELL_MINUTES)
        self._task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None

    def _is_due(self, order: Order, now: datetime) -> bool:
        return order.status == OrderStatus.NEW and now - as_utc(order.order_date) >= self.dwell

    def _deliver(self, order_id: int, now: datetime) -> bool:
        with self.session_factory() as db:
            # re-read under lock; an update may have cancelled it since the scan
            order = db.get(Order, order_id, with_for_update=True)
            if order is None or not self._is_due(order, now):
                db.rollback()
                return False
            order.status = OrderStatus.DELIVERED
            db.commit()
        logger.info("Order id %s automatically updated to DELIVERED", order_id)
        return True

    def sweep(self, now: datetime | None = None) -> list[int]:
        """One scan-and-promote pass. Returns the ids that were delivered."""
        now = now or self.clock()

        with self.session_factory() as db:
            candidates = db.scalars(select(Order).where(Order.status == OrderStatus.NEW)).all()
            due = [o.id for o in candidates if self._is_due(o, now)]

        delivered = []
        for order_id in due:
            try:
                if self._deliver(order_id, now):
                    delivered.append(order_id)
            except Exception:
                logger.exception("Failed to mark order id %s as DELIVERED", order_id)
        return delivered

    async def _run(self) -> None:
        if self._stop_event is None:
            self._stop_event = asyncio.Event()

        while not self._stop_event.is_set():
            try:
                await asyncio.to_thread(self.sweep)
            except Exception:
                # a broken tick must not kill the loop
                logger.exception("Order status sweep failed")

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
                break
            except asyncio.TimeoutError:
                pass

    def start(self) -> None:
        if self._task is not None:
            return

        if self._stop_event is None:
            self._stop_event = asyncio.Event()
        else:
            self._stop_event.clear()

        logger.info("Order status scheduler started (every %ss, dwell %s)", self.interval_seconds, self.dwell)
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        if self._stop_event:
            self._stop_event.set()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Order status scheduler stopped")

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
