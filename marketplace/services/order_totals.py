# marketplace/services/order_totals.py
"""Money arithmetic for order lines, order totals and purchase orders."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Union

from sqlalchemy.orm import Session

from marketplace.models.order_model import Order
from marketplace.models.order_item_model import OrderItem

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Number) -> Decimal:
    # str() keeps 25.5 as 25.5 instead of its binary expansion
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def line_subtotal(quantity: int, unit_price: Number) -> Decimal:
    return to_money(Decimal(quantity) * Decimal(str(unit_price)))


def sum_subtotals(subtotals: Iterable[Number]) -> Decimal:
    total = sum((Decimal(str(s)) for s in subtotals), ZERO)
    return to_money(total)


def purchase_order_total(quantity: int, unit_cost: Number, transport_cost: Number = 0) -> Decimal:
    return to_money(Decimal(quantity) * Decimal(str(unit_cost)) + Decimal(str(transport_cost)))


def recompute_order_total(db: Session, order_id: int) -> Decimal:
    """
    Rewrite Order.totalAmount from the order's current items (0 when none).

    Flushes pending item changes first so the sum sees them; the caller owns
    the commit, which keeps the item write and the new total in one
    transaction.
    """
    db.flush()
    subtotals = [row.subTotal for row in db.query(OrderItem.subTotal).filter(OrderItem.order_id == order_id)]
    total = sum_subtotals(subtotals)
    order = db.get(Order, order_id)
    if order is not None:
        order.totalAmount = total
        db.flush()
    return total
