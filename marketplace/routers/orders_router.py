# marketplace/routers/orders_router.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, selectinload

from marketplace.database.session import get_db
from marketplace.models.inventory_model import Inventory
from marketplace.models.order_item_model import OrderItem
from marketplace.models.order_model import Order
from marketplace.models.substance_model import Substance
from marketplace.models.user_model import Dealer
from marketplace.routers.deps import allowed
from marketplace.schemas.orders import OrderCreate, OrderUpdate, OrderOut, OrderStatus
from marketplace.services.order_totals import ZERO, line_subtotal, recompute_order_total, to_money
from marketplace.services.policy import Actor, CUSTOMER, enforce
from marketplace.services.retry import create_with_retry, insert

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])

CANCEL_BLOCKED = ("shipped", "delivered")


def order_out(o: Order) -> OrderOut:
    return OrderOut.model_validate(o)


def _with_children(q):
    return q.options(selectinload(Order.items), selectinload(Order.shipment))


def _get_order(db: Session, order_id: int) -> Order:
    o = db.get(Order, order_id)
    if not o:
        raise HTTPException(status_code=404, detail="Order not found")
    return o


@router.get("/")
def list_orders(
    orderStatus: Optional[OrderStatus] = Query(default=None),
    actor: Actor = Depends(allowed("order", "read")),
    db: Session = Depends(get_db),
):
    q = _with_children(db.query(Order))
    if actor.type == CUSTOMER:
        q = q.filter(Order.customer_id == actor.id)
    else:
        q = q.filter(Order.dealer_id == actor.id)
    if orderStatus is not None:
        q = q.filter(Order.orderStatus == orderStatus)
    return {"orders": [order_out(o) for o in q.order_by(Order.id.desc()).all()]}


@router.get("/{order_id}")
def get_order(order_id: int, actor: Actor = Depends(allowed("order", "read")), db: Session = Depends(get_db)):
    o = _get_order(db, order_id)
    enforce(actor, "order", "read", o)
    return {"order": order_out(o)}


@router.post("/", status_code=201)
def create_order(body: OrderCreate, actor: Actor = Depends(allowed("order", "create")), db: Session = Depends(get_db)):
    """
    Create the order and its items in one transaction.

    Stock is taken from the dealer's inventory row for each substance when
    such a row exists; a short row fails the whole order.
    """
    try:
        if not db.get(Dealer, body.dealer_id):
            raise HTTPException(status_code=404, detail="Dealer not found")

        order = create_with_retry(db, Order, lambda: insert(db, Order(
            customer_id=actor.id,
            dealer_id=body.dealer_id,
            orderStatus="pending",
            paymentStatus="pending",
            totalAmount=ZERO,
            shippingCost=to_money(body.shippingCost),
            deliveryAddress=body.deliveryAddress or "",
            paymentMethod=body.paymentMethod or "",
        )), entity="order")

        for item in body.items:
            if not db.get(Substance, item.substance_id):
                raise HTTPException(status_code=404, detail=f"Substance {item.substance_id} not found")

            inv = (
                db.query(Inventory)
                .filter(Inventory.dealer_id == body.dealer_id, Inventory.substance_id == item.substance_id)
                .first()
            )
            if inv is not None:
                if inv.quantityAvailable < item.quantity:
                    raise HTTPException(status_code=400, detail=f"Insufficient inventory for substance {item.substance_id}")
                inv.quantityAvailable -= item.quantity

            create_with_retry(db, OrderItem, lambda item=item: insert(db, OrderItem(
                order_id=order.id,
                substance_id=item.substance_id,
                quantity=item.quantity,
                unitPrice=to_money(item.unitPrice),
                subTotal=line_subtotal(item.quantity, item.unitPrice),
            )), entity="order item")

        recompute_order_total(db, order.id)
        db.commit()
        db.refresh(order)
        logger.info(f"Order {order.id} created by customer {actor.id} ({len(body.items)} items, total {order.totalAmount})")
        return {"message": "Order created successfully", "order": order_out(order)}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error creating order: {e}")


@router.put("/{order_id}")
def update_order(order_id: int, body: OrderUpdate, actor: Actor = Depends(allowed("order", "update")),
                 db: Session = Depends(get_db)):
    o = _get_order(db, order_id)
    enforce(actor, "order", "update", o)

    for name, value in body.model_dump(exclude_none=True).items():
        setattr(o, name, value)

    try:
        db.commit()
        db.refresh(o)
        return {"message": "Order updated successfully", "order": order_out(o)}
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error updating order: {e}")


@router.post("/{order_id}/cancel")
def cancel_order(order_id: int, actor: Actor = Depends(allowed("order", "cancel")), db: Session = Depends(get_db)):
    o = _get_order(db, order_id)
    enforce(actor, "order", "cancel", o)
    if o.orderStatus in CANCEL_BLOCKED:
        raise HTTPException(status_code=400, detail="Cannot cancel shipped or delivered orders")

    o.orderStatus = "cancelled"
    try:
        db.commit()
        db.refresh(o)
        return {"message": "Order cancelled successfully", "order": order_out(o)}
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error cancelling order: {e}")


@router.delete("/{order_id}")
def delete_order(order_id: int, actor: Actor = Depends(allowed("order", "delete")), db: Session = Depends(get_db)):
    o = _get_order(db, order_id)
    enforce(actor, "order", "delete", o)
    if o.orderStatus != "pending":
        raise HTTPException(status_code=400, detail="Only pending orders can be deleted")

    try:
        db.delete(o)
        db.commit()
        return {"message": "Order deleted successfully"}
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error deleting order: {e}")
