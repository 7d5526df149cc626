"""
Who may change an order, and how.

``decide_update`` is the whole rule set for ``PUT /orders/{id}``: it looks at
the caller's role, whether the caller owns the order, the order status and how
long ago it was placed, and returns a ``Decision``. It touches neither the
database nor HTTP, so ``OrderService.update`` just loads the order, asks for a
decision and applies it.

Rules:

- an ADMIN may only cancel, only NEW orders, and only inside the edit window;
- the owner may edit address/quantity of a NEW order inside the edit window;
- anybody else is denied.

The window is inclusive: an order exactly ``edit_window`` old can still be
changed, one second later it cannot.
"""

import enum
from dataclasses import dataclass
from datetime import timedelta

from flowershop.models.order import OrderStatus
from flowershop.models.user import UserType


class Verdict(str, enum.Enum):
    CANCEL = "CANCEL"
    EDIT = "EDIT"
    FORBIDDEN = "FORBIDDEN"
    DENIED = "DENIED"


@dataclass(frozen=True)
class Decision:
    verdict: Verdict
    reason: str | None = None

    @property
    def allowed(self) -> bool:
        return self.verdict in (Verdict.CANCEL, Verdict.EDIT)


def _minutes(window: timedelta) -> int:
    return int(window.total_seconds() // 60)


def decide_update(
    role: UserType,
    owner_id: int,
    caller_id: int,
    status: OrderStatus,
    elapsed: timedelta,
    edit_window: timedelta = timedelta(minutes=10),
) -> Decision:
    too_late = elapsed > edit_window

    if role == UserType.ADMIN:
        if status != OrderStatus.NEW:
            return Decision(Verdict.FORBIDDEN, "admin can cancel only NEW orders")
        if too_late:
            return Decision(Verdict.FORBIDDEN, f"admin cannot cancel after {_minutes(edit_window)} minutes")
        return Decision(Verdict.CANCEL)

    if caller_id == owner_id:
        if status != OrderStatus.NEW:
            return Decision(Verdict.FORBIDDEN, f"you cannot update an order that is already {status.value}")
        if too_late:
            return Decision(Verdict.FORBIDDEN, f"you cannot update order after {_minutes(edit_window)} minutes")
        return Decision(Verdict.EDIT)

    return Decision(Verdict.DENIED, "you cannot update this order")
