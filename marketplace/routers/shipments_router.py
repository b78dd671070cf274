# marketplace/routers/shipments_router.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from marketplace.database.session import get_db
from marketplace.models.order_model import Order
from marketplace.models.shipment_model import Shipment
from marketplace.routers.deps import allowed
from marketplace.schemas.shipments import ShipmentCreate, ShipmentUpdate, ShipmentOut, ShipmentStatus
from marketplace.services.errors import DuplicateFieldError
from marketplace.services.policy import Actor, CUSTOMER, enforce
from marketplace.services.retry import create_with_retry, insert
from marketplace.services.shipments import propagate_shipment_status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shipments", tags=["shipments"])

DELETE_BLOCKED = ("in_transit", "delivered")


def _to_out(s: Shipment) -> ShipmentOut:
    return ShipmentOut.model_validate(s)


def _get_shipment(db: Session, shipment_id: int) -> Shipment:
    s = db.get(Shipment, shipment_id)
    if not s:
        raise HTTPException(status_code=404, detail="Shipment not found")
    return s


@router.get("/")
def list_shipments(
    status: Optional[ShipmentStatus] = Query(default=None),
    actor: Actor = Depends(allowed("shipment", "read")),
    db: Session = Depends(get_db),
):
    q = db.query(Shipment).join(Order, Shipment.order_id == Order.id)
    if actor.type == CUSTOMER:
        q = q.filter(Order.customer_id == actor.id)
    else:
        q = q.filter(Order.dealer_id == actor.id)
    if status is not None:
        q = q.filter(Shipment.status == status)
    return {"shipments": [_to_out(s) for s in q.order_by(Shipment.id.desc()).all()]}


@router.get("/order/{order_id}")
def get_shipment_by_order(order_id: int, actor: Actor = Depends(allowed("shipment", "read")),
                          db: Session = Depends(get_db)):
    s = db.query(Shipment).filter(Shipment.order_id == order_id).first()
    if not s:
        raise HTTPException(status_code=404, detail="Shipment not found for this order")
    enforce(actor, "shipment", "read", s)
    return {"shipment": _to_out(s)}


@router.get("/{shipment_id}")
def get_shipment(shipment_id: int, actor: Actor = Depends(allowed("shipment", "read")), db: Session = Depends(get_db)):
    s = _get_shipment(db, shipment_id)
    enforce(actor, "shipment", "read", s)
    return {"shipment": _to_out(s)}


@router.post("/", status_code=201)
def create_shipment(body: ShipmentCreate, actor: Actor = Depends(allowed("shipment", "create")),
                    db: Session = Depends(get_db)):
    o = db.get(Order, body.order_id)
    if not o:
        raise HTTPException(status_code=404, detail="Order not found")
    enforce(actor, "shipment", "create", o)
    if db.query(Shipment).filter(Shipment.order_id == o.id).first():
        raise DuplicateFieldError("order_id")

    try:
        s = create_with_retry(db, Shipment, lambda: insert(db, Shipment(
            order_id=o.id,
            carrier=body.carrier or "",
            status=body.status or "preparing",
        )), entity="shipment")
        propagate_shipment_status(body.status, o)
        db.commit()
        db.refresh(s)
        logger.info(f"Shipment {s.id} created for order {o.id}, order status now {o.orderStatus}")
        return {"message": "Shipment created successfully", "shipment": _to_out(s), "orderStatus": o.orderStatus}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error creating shipment: {e}")


@router.put("/{shipment_id}")
def update_shipment(shipment_id: int, body: ShipmentUpdate, actor: Actor = Depends(allowed("shipment", "update")),
                    db: Session = Depends(get_db)):
    s = _get_shipment(db, shipment_id)
    enforce(actor, "shipment", "update", s)

    if body.carrier is not None:
        s.carrier = body.carrier
    if body.status is not None:
        s.status = body.status
        propagate_shipment_status(body.status, s.order)

    try:
        db.commit()
        db.refresh(s)
        return {"message": "Shipment updated successfully", "shipment": _to_out(s), "orderStatus": s.order.orderStatus}
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error updating shipment: {e}")


@router.delete("/{shipment_id}")
def delete_shipment(shipment_id: int, actor: Actor = Depends(allowed("shipment", "delete")),
                    db: Session = Depends(get_db)):
    s = _get_shipment(db, shipment_id)
    enforce(actor, "shipment", "delete", s)
    if s.status in DELETE_BLOCKED:
        raise HTTPException(status_code=400, detail="Cannot delete shipment that is in transit or delivered")

    try:
        db.delete(s)
        db.commit()
        return {"message": "Shipment deleted successfully"}
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error deleting shipment: {e}")
