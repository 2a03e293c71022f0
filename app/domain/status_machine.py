# app/domain/status_machine.py
"""
Order status lifecycle.

    PENDING -> PREPARING -> DELIVERING -> DELIVERED
        \\__________\\____________\\______-> CANCELLED

Moves are forward only (skipping ahead is allowed), CANCELLED is reachable
from every non-terminal state, DELIVERED and CANCELLED are terminal.
"""
from typing import FrozenSet

from app.domain.enums import OrderStatus
from app.domain.errors import InvalidStatusTransitionError

_PROGRESSION = [
    OrderStatus.PENDING,
    OrderStatus.PREPARING,
    OrderStatus.DELIVERING,
    OrderStatus.DELIVERED,
]

TERMINAL_STATES: FrozenSet[OrderStatus] = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.CANCELLED}
)


def allowed_transitions(current: OrderStatus) -> FrozenSet[OrderStatus]:
    current = OrderStatus(current)
    if current in TERMINAL_STATES:
        return frozenset()

    position = _PROGRESSION.index(current)
    return frozenset(_PROGRESSION[position + 1:]) | {OrderStatus.CANCELLED}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return OrderStatus(target) in allowed_transitions(current)


def ensure_transition(current: OrderStatus, target: OrderStatus) -> None:
    current, target = OrderStatus(current), OrderStatus(target)

    if can_transition(current, target):
        return

    if current in TERMINAL_STATES:
        reason = f"Order is already {current.value} and cannot change status."
    elif current == target:
        reason = f"Order is already {current.value}."
    else:
        reason = f"Cannot move order from {current.value} back to {target.value}."

    raise InvalidStatusTransitionError(
        reason,
        details=[{
            "field": "status",
            "current": current.value,
            "requested": target.value,
            "allowed": sorted(s.value for s in allowed_transitions(current)),
        }],
    )
