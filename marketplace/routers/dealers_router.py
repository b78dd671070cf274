# marketplace/routers/dealers_router.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, selectinload

from marketplace.database.session import get_db
from marketplace.models.inventory_model import Inventory
from marketplace.models.order_model import Order
from marketplace.models.purchase_order_model import PurchaseOrder
from marketplace.models.user_model import Dealer
from marketplace.routers.deps import allowed
from marketplace.routers.inventory_router import inventory_out
from marketplace.routers.orders_router import order_out
from marketplace.routers.purchase_orders_router import purchase_order_out
from marketplace.schemas.users import DealerUpdate, DealerOut
from marketplace.services.auth_service import apply_account_update, session_store
from marketplace.services.image_service import image_service
from marketplace.services.policy import Actor, DEALER, enforce
from marketplace.services.retry import flush_unique

router = APIRouter(prefix="/dealers", tags=["dealers"])


def _get_dealer(db: Session, dealer_id: int) -> Dealer:
    d = db.get(Dealer, dealer_id)
    if not d:
        raise HTTPException(status_code=404, detail="Dealer not found")
    return d


def _own_dealer(db: Session, actor: Actor, dealer_id: int) -> Dealer:
    d = _get_dealer(db, dealer_id)
    enforce(actor, "dealer", "read", d)
    return d


@router.get("/{dealer_id}")
def get_dealer(dealer_id: int, actor: Actor = Depends(allowed("dealer", "read")), db: Session = Depends(get_db)):
    return {"dealer": DealerOut.model_validate(_own_dealer(db, actor, dealer_id))}


@router.put("/{dealer_id}")
def update_dealer(dealer_id: int, body: DealerUpdate, actor: Actor = Depends(allowed("dealer", "update")),
                  db: Session = Depends(get_db)):
    d = _get_dealer(db, dealer_id)
    enforce(actor, "dealer", "update", d)
    apply_account_update(d, body.model_dump(exclude_none=True))

    try:
        flush_unique(db, Dealer)
        db.commit()
        db.refresh(d)
        return {"message": "Dealer updated successfully", "dealer": DealerOut.model_validate(d)}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error updating dealer: {e}")


@router.delete("/{dealer_id}")
def delete_dealer(dealer_id: int, actor: Actor = Depends(allowed("dealer", "delete")), db: Session = Depends(get_db)):
    d = _get_dealer(db, dealer_id)
    enforce(actor, "dealer", "delete", d)

    try:
        db.delete(d)
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error deleting dealer: {e}")

    session_store.drop_actor(DEALER, dealer_id)
    image_service.delete_image("dealer", dealer_id)
    return {"message": "Dealer deleted successfully"}


@router.get("/{dealer_id}/inventory")
def get_dealer_inventory(dealer_id: int, actor: Actor = Depends(allowed("dealer", "read")),
                         db: Session = Depends(get_db)):
    d = _own_dealer(db, actor, dealer_id)
    rows = db.query(Inventory).filter(Inventory.dealer_id == d.id).order_by(Inventory.id).all()
    return {"inventory": [inventory_out(inv) for inv in rows]}


@router.get("/{dealer_id}/orders")
def get_dealer_orders(dealer_id: int, actor: Actor = Depends(allowed("dealer", "read")),
                      db: Session = Depends(get_db)):
    d = _own_dealer(db, actor, dealer_id)
    orders = (
        db.query(Order)
        .options(selectinload(Order.items), selectinload(Order.shipment))
        .filter(Order.dealer_id == d.id)
        .order_by(Order.orderDate.desc(), Order.id.desc())
        .all()
    )
    return {"orders": [order_out(o) for o in orders]}


@router.get("/{dealer_id}/purchase-orders")
def get_dealer_purchase_orders(dealer_id: int, actor: Actor = Depends(allowed("dealer", "read")),
                               db: Session = Depends(get_db)):
    d = _own_dealer(db, actor, dealer_id)
    rows = db.query(PurchaseOrder).filter(PurchaseOrder.dealer_id == d.id).order_by(PurchaseOrder.id.desc()).all()
    return {"purchaseOrders": [purchase_order_out(po) for po in rows]}
