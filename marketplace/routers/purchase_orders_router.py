# marketplace/routers/purchase_orders_router.py
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from marketplace.database.session import get_db
from marketplace.models.inventory_model import Inventory
from marketplace.models.provider_transport_model import ProviderTransport
from marketplace.models.purchase_order_model import PurchaseOrder
from marketplace.models.substance_model import Substance
from marketplace.models.user_model import Provider
from marketplace.routers.deps import allowed
from marketplace.schemas.purchase_orders import (
    PurchaseOrderCreate, PurchaseOrderUpdate, PurchaseOrderOut, PurchaseOrderStatus,
)
from marketplace.services.order_totals import ZERO, purchase_order_total, to_money
from marketplace.services.policy import Actor, DEALER, enforce
from marketplace.services.retry import create_with_retry, insert

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/purchase-orders", tags=["purchase-orders"])


def purchase_order_out(po: PurchaseOrder) -> PurchaseOrderOut:
    return PurchaseOrderOut.model_validate(po)


def _get_po(db: Session, po_id: int) -> PurchaseOrder:
    po = db.get(PurchaseOrder, po_id)
    if not po:
        raise HTTPException(status_code=404, detail="Purchase order not found")
    return po


def receive_into_inventory(db: Session, po: PurchaseOrder) -> Inventory:
    """Add a paid purchase order's quantity to the dealer's stock of that substance."""
    inv = (
        db.query(Inventory)
        .filter(Inventory.dealer_id == po.dealer_id, Inventory.substance_id == po.substance_id)
        .first()
    )
    if inv is not None:
        inv.quantityAvailable += po.quantityOrdered
        return inv
    return create_with_retry(db, Inventory, lambda: insert(db, Inventory(
        dealer_id=po.dealer_id,
        substance_id=po.substance_id,
        quantityAvailable=po.quantityOrdered,
        warehouse=po.dealer.warehouse if po.dealer else None,
    )), entity="inventory item")


@router.get("/")
def list_purchase_orders(
    status: Optional[PurchaseOrderStatus] = Query(default=None),
    paymentStatus: Optional[bool] = Query(default=None),
    substance_id: Optional[int] = Query(default=None),
    actor: Actor = Depends(allowed("purchase_order", "read")),
    db: Session = Depends(get_db),
):
    q = db.query(PurchaseOrder)
    if actor.type == DEALER:
        q = q.filter(PurchaseOrder.dealer_id == actor.id)
    else:
        q = q.filter(PurchaseOrder.provider_id == actor.id)
    if status is not None:
        q = q.filter(PurchaseOrder.status == status)
    if paymentStatus is not None:
        q = q.filter(PurchaseOrder.paymentStatus == paymentStatus)
    if substance_id is not None:
        q = q.filter(PurchaseOrder.substance_id == substance_id)
    return {"purchaseOrders": [purchase_order_out(po) for po in q.order_by(PurchaseOrder.id.desc()).all()]}


@router.get("/{po_id}")
def get_purchase_order(po_id: int, actor: Actor = Depends(allowed("purchase_order", "read")),
                       db: Session = Depends(get_db)):
    po = _get_po(db, po_id)
    enforce(actor, "purchase_order", "read", po)
    return {"purchaseOrder": purchase_order_out(po)}


@router.post("/", status_code=201)
def create_purchase_order(body: PurchaseOrderCreate, actor: Actor = Depends(allowed("purchase_order", "create")),
                          db: Session = Depends(get_db)):
    if not db.get(Provider, body.provider_id):
        raise HTTPException(status_code=404, detail="Provider not found")
    substance = db.get(Substance, body.substance_id)
    if not substance:
        raise HTTPException(status_code=404, detail="Substance not found")
    if substance.provider_id != body.provider_id:
        raise HTTPException(status_code=400, detail="Substance is not offered by this provider")

    transport_cost = ZERO
    if body.providerTransport_id is not None:
        transport = db.get(ProviderTransport, body.providerTransport_id)
        if not transport:
            raise HTTPException(status_code=404, detail="Transport option not found")
        if transport.provider_id != body.provider_id:
            raise HTTPException(status_code=400, detail="Transport option does not belong to this provider")
        transport_cost = to_money(transport.transportCost)

    try:
        po = create_with_retry(db, PurchaseOrder, lambda: insert(db, PurchaseOrder(
            dealer_id=actor.id,
            provider_id=body.provider_id,
            substance_id=body.substance_id,
            providerTransport_id=body.providerTransport_id,
            quantityOrdered=body.quantityOrdered,
            unitCost=to_money(body.unitCost),
            transportCost=transport_cost,
            totalCost=purchase_order_total(body.quantityOrdered, body.unitCost, transport_cost),
            paymentStatus=False,
            paymentMethod=body.paymentMethod,
            status="pending",
        )), entity="purchase order")
        db.commit()
        db.refresh(po)
        return {"message": "Purchase order created successfully", "purchaseOrder": purchase_order_out(po)}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error creating purchase order: {e}")


@router.put("/{po_id}")
def update_purchase_order(po_id: int, body: PurchaseOrderUpdate,
                          actor: Actor = Depends(allowed("purchase_order", "update")),
                          db: Session = Depends(get_db)):
    po = _get_po(db, po_id)
    enforce(actor, "purchase_order", "update", po)

    was_paid = bool(po.paymentStatus)
    # received stock is never taken back
    if was_paid and body.paymentStatus is False:
        raise HTTPException(status_code=400, detail="Cannot mark a paid purchase order as unpaid")

    for name, value in body.model_dump(exclude_none=True).items():
        setattr(po, name, value)

    try:
        if po.paymentStatus and not was_paid:
            if po.paymentDate is None:
                po.paymentDate = datetime.utcnow()
            inv = receive_into_inventory(db, po)
            logger.info(f"Purchase order {po.id} paid, dealer {po.dealer_id} stock of substance "
                        f"{po.substance_id} now {inv.quantityAvailable}")
        db.commit()
        db.refresh(po)
        return {"message": "Purchase order updated successfully", "purchaseOrder": purchase_order_out(po)}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error updating purchase order: {e}")


@router.delete("/{po_id}")
def delete_purchase_order(po_id: int, actor: Actor = Depends(allowed("purchase_order", "delete")),
                          db: Session = Depends(get_db)):
    po = _get_po(db, po_id)
    enforce(actor, "purchase_order", "delete", po)
    if po.paymentStatus:
        raise HTTPException(status_code=400, detail="Cannot delete a paid purchase order")

    try:
        db.delete(po)
        db.commit()
        return {"message": "Purchase order deleted successfully"}
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error deleting purchase order: {e}")
