# marketplace/routers/providers_router.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from marketplace.database.session import get_db
from marketplace.models.provider_transport_model import ProviderTransport
from marketplace.models.purchase_order_model import PurchaseOrder
from marketplace.models.substance_model import Substance
from marketplace.models.user_model import Provider
from marketplace.routers.deps import allowed
from marketplace.routers.provider_transports_router import transport_out
from marketplace.routers.purchase_orders_router import purchase_order_out
from marketplace.routers.substances_router import substance_out
from marketplace.schemas.users import ProviderUpdate, ProviderOut
from marketplace.services.auth_service import apply_account_update, session_store
from marketplace.services.image_service import image_service
from marketplace.services.policy import Actor, PROVIDER, enforce
from marketplace.services.retry import flush_unique

router = APIRouter(prefix="/providers", tags=["providers"])


def _get_provider(db: Session, provider_id: int) -> Provider:
    p = db.get(Provider, provider_id)
    if not p:
        raise HTTPException(status_code=404, detail="Provider not found")
    return p


@router.get("/{provider_id}")
def get_provider(provider_id: int, actor: Actor = Depends(allowed("provider", "read")), db: Session = Depends(get_db)):
    return {"provider": ProviderOut.model_validate(_get_provider(db, provider_id))}


@router.put("/{provider_id}")
def update_provider(provider_id: int, body: ProviderUpdate, actor: Actor = Depends(allowed("provider", "update")),
                    db: Session = Depends(get_db)):
    p = _get_provider(db, provider_id)
    enforce(actor, "provider", "update", p)
    apply_account_update(p, body.model_dump(exclude_none=True))

    try:
        flush_unique(db, Provider)
        db.commit()
        db.refresh(p)
        return {"message": "Provider updated successfully", "provider": ProviderOut.model_validate(p)}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error updating provider: {e}")


@router.delete("/{provider_id}")
def delete_provider(provider_id: int, actor: Actor = Depends(allowed("provider", "delete")),
                    db: Session = Depends(get_db)):
    p = _get_provider(db, provider_id)
    enforce(actor, "provider", "delete", p)

    try:
        db.delete(p)
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error deleting provider: {e}")

    session_store.drop_actor(PROVIDER, provider_id)
    image_service.delete_image("provider", provider_id)
    return {"message": "Provider deleted successfully"}


@router.get("/{provider_id}/substances")
def get_provider_substances(provider_id: int, actor: Actor = Depends(allowed("provider", "read")),
                            db: Session = Depends(get_db)):
    p = _get_provider(db, provider_id)
    rows = db.query(Substance).filter(Substance.provider_id == p.id).order_by(Substance.id).all()
    return {"substances": [substance_out(s) for s in rows]}


@router.get("/{provider_id}/transport-options")
def get_provider_transport_options(provider_id: int, actor: Actor = Depends(allowed("provider", "read")),
                                   db: Session = Depends(get_db)):
    p = _get_provider(db, provider_id)
    rows = db.query(ProviderTransport).filter(ProviderTransport.provider_id == p.id).order_by(ProviderTransport.id).all()
    return {"transportOptions": [transport_out(t) for t in rows]}


@router.get("/{provider_id}/purchase-orders")
def get_provider_purchase_orders(provider_id: int,
                                 actor: Actor = Depends(allowed("provider", "read_purchase_orders")),
                                 db: Session = Depends(get_db)):
    p = _get_provider(db, provider_id)
    enforce(actor, "provider", "read_purchase_orders", p)
    rows = db.query(PurchaseOrder).filter(PurchaseOrder.provider_id == p.id).order_by(PurchaseOrder.id.desc()).all()
    return {"purchaseOrders": [purchase_order_out(po) for po in rows]}
