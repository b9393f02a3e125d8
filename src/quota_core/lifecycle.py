"""Order lifecycle: pending <-> validated, and deletion.

Validation records that goods were received / the order was confirmed. It
does not change the financial commitment: transitions never touch the
installments, and orders in either state consume budget the same way.
Deletion removes an order from the collection entirely; it is not a state.

All transitions are idempotent and defined for every input state.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable

from quota_core.exceptions import OrderNotFoundError
from quota_core.models import Order, OrderStatus


def transition(order: Order, status: OrderStatus) -> Order:
    """Return the order with the given status (same instance if unchanged)."""
    if order.status == status:
        return order
    return dataclasses.replace(order, status=status)


def validate(order: Order) -> Order:
    """Mark an order as validated. No-op if already validated."""
    return transition(order, OrderStatus.VALIDATED)


def reactivate(order: Order) -> Order:
    """Move an order back to pending. No-op if already pending."""
    return transition(order, OrderStatus.PENDING)


def find_order(orders: Iterable[Order], order_id: str) -> Order:
    """Look up an order by id.

    Raises:
        OrderNotFoundError: If no order has this id.
    """
    for order in orders:
        if order.id == order_id:
            return order
    raise OrderNotFoundError(order_id)


def delete_order(orders: Iterable[Order], order_id: str) -> list[Order]:
    """Return the collection without the given order.

    Raises:
        OrderNotFoundError: If no order has this id.
    """
    orders = list(orders)
    remaining = [order for order in orders if order.id != order_id]
    if len(remaining) == len(orders):
        raise OrderNotFoundError(order_id)
    return remaining


def replace_order(orders: Iterable[Order], updated: Order) -> list[Order]:
    """Return the collection with the order of the same id swapped in.

    Raises:
        OrderNotFoundError: If no order has updated.id.
    """
    found = False
    result = []
    for order in orders:
        if order.id == updated.id:
            result.append(updated)
            found = True
        else:
            result.append(order)
    if not found:
        raise OrderNotFoundError(updated.id)
    return result
