# marketplace/routers/order_items_router.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from marketplace.database.session import get_db
from marketplace.models.order_item_model import OrderItem
from marketplace.models.order_model import Order
from marketplace.models.substance_model import Substance
from marketplace.routers.deps import allowed
from marketplace.schemas.order_items import OrderItemCreate, OrderItemUpdate, OrderItemOut
from marketplace.services.order_totals import line_subtotal, recompute_order_total, to_money
from marketplace.services.policy import Actor, CUSTOMER, enforce
from marketplace.services.retry import create_with_retry, insert

router = APIRouter(prefix="/order-items", tags=["order-items"])


def _to_out(it: OrderItem) -> OrderItemOut:
    return OrderItemOut.model_validate(it)


def _get_item(db: Session, item_id: int) -> OrderItem:
    it = db.get(OrderItem, item_id)
    if not it:
        raise HTTPException(status_code=404, detail="Order item not found")
    return it


def _require_pending(order: Order, message: str) -> None:
    if order.orderStatus != "pending":
        raise HTTPException(status_code=400, detail=message)


@router.get("/")
def list_order_items(
    order_id: Optional[int] = Query(default=None),
    actor: Actor = Depends(allowed("order_item", "read")),
    db: Session = Depends(get_db),
):
    q = db.query(OrderItem).join(Order, OrderItem.order_id == Order.id)
    if actor.type == CUSTOMER:
        q = q.filter(Order.customer_id == actor.id)
    else:
        q = q.filter(Order.dealer_id == actor.id)
    if order_id is not None:
        q = q.filter(OrderItem.order_id == order_id)
    return {"orderItems": [_to_out(it) for it in q.order_by(OrderItem.id).all()]}


@router.get("/order/{order_id}")
def list_items_of_order(order_id: int, actor: Actor = Depends(allowed("order_item", "read_order")),
                        db: Session = Depends(get_db)):
    o = db.get(Order, order_id)
    if not o:
        raise HTTPException(status_code=404, detail="Order not found")
    enforce(actor, "order_item", "read_order", o)
    return {"orderItems": [_to_out(it) for it in o.items]}


@router.get("/{item_id}")
def get_order_item(item_id: int, actor: Actor = Depends(allowed("order_item", "read")), db: Session = Depends(get_db)):
    it = _get_item(db, item_id)
    enforce(actor, "order_item", "read", it)
    return {"orderItem": _to_out(it)}


@router.post("/", status_code=201)
def create_order_item(body: OrderItemCreate, actor: Actor = Depends(allowed("order_item", "create")),
                      db: Session = Depends(get_db)):
    o = db.get(Order, body.order_id)
    if not o:
        raise HTTPException(status_code=404, detail="Order not found")
    enforce(actor, "order_item", "create", o)
    _require_pending(o, "Cannot add items to orders that are not pending")
    if not db.get(Substance, body.substance_id):
        raise HTTPException(status_code=404, detail="Substance not found")

    try:
        it = create_with_retry(db, OrderItem, lambda: insert(db, OrderItem(
            order_id=o.id,
            substance_id=body.substance_id,
            quantity=body.quantity,
            unitPrice=to_money(body.unitPrice),
            subTotal=line_subtotal(body.quantity, body.unitPrice),
        )), entity="order item")
        total = recompute_order_total(db, o.id)
        db.commit()
        db.refresh(it)
        return {"message": "Order item created successfully", "orderItem": _to_out(it), "orderTotal": float(total)}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error creating order item: {e}")


@router.put("/{item_id}")
def update_order_item(item_id: int, body: OrderItemUpdate, actor: Actor = Depends(allowed("order_item", "update")),
                      db: Session = Depends(get_db)):
    it = _get_item(db, item_id)
    enforce(actor, "order_item", "update", it)
    _require_pending(it.order, "Cannot update items in orders that are not pending")

    if body.quantity is not None:
        it.quantity = body.quantity
    if body.unitPrice is not None:
        it.unitPrice = to_money(body.unitPrice)
    it.subTotal = line_subtotal(it.quantity, it.unitPrice)

    try:
        total = recompute_order_total(db, it.order_id)
        db.commit()
        db.refresh(it)
        return {"message": "Order item updated successfully", "orderItem": _to_out(it), "orderTotal": float(total)}
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error updating order item: {e}")


@router.delete("/{item_id}")
def delete_order_item(item_id: int, actor: Actor = Depends(allowed("order_item", "delete")),
                      db: Session = Depends(get_db)):
    it = _get_item(db, item_id)
    enforce(actor, "order_item", "delete", it)
    order = it.order
    _require_pending(order, "Cannot delete items from orders that are not pending")

    try:
        order.items.remove(it)
        total = recompute_order_total(db, order.id)
        db.commit()
        return {"message": "Order item deleted successfully", "orderTotal": float(total)}
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error deleting order item: {e}")
