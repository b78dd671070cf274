# marketplace/routers/provider_transports_router.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from marketplace.database.session import get_db
from marketplace.models.provider_transport_model import ProviderTransport
from marketplace.routers.deps import allowed
from marketplace.schemas.provider_transports import TransportCreate, TransportUpdate, TransportOut
from marketplace.services.order_totals import to_money
from marketplace.services.policy import Actor, enforce
from marketplace.services.retry import create_with_retry, insert

router = APIRouter(prefix="/provider-transports", tags=["provider-transports"])


def transport_out(t: ProviderTransport) -> TransportOut:
    return TransportOut.model_validate(t)


def _get_transport(db: Session, transport_id: int) -> ProviderTransport:
    t = db.get(ProviderTransport, transport_id)
    if not t:
        raise HTTPException(status_code=404, detail="Transport option not found")
    return t


@router.get("/")
def list_transports(
    provider_id: Optional[int] = Query(default=None),
    actor: Actor = Depends(allowed("provider_transport", "read")),
    db: Session = Depends(get_db),
):
    q = db.query(ProviderTransport)
    if provider_id is not None:
        q = q.filter(ProviderTransport.provider_id == provider_id)
    return {"transports": [transport_out(t) for t in q.order_by(ProviderTransport.id).all()]}


@router.get("/{transport_id}")
def get_transport(transport_id: int, actor: Actor = Depends(allowed("provider_transport", "read")),
                  db: Session = Depends(get_db)):
    return {"transport": transport_out(_get_transport(db, transport_id))}


@router.post("/", status_code=201)
def create_transport(body: TransportCreate, actor: Actor = Depends(allowed("provider_transport", "create")),
                     db: Session = Depends(get_db)):
    try:
        t = create_with_retry(db, ProviderTransport, lambda: insert(db, ProviderTransport(
            provider_id=actor.id,
            transportMethod=body.transportMethod,
            transportCost=to_money(body.transportCost),
            costPerKG=to_money(body.costPerKG),
        )), entity="transport")
        db.commit()
        db.refresh(t)
        return {"message": "Transport option created successfully", "transport": transport_out(t)}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error creating transport option: {e}")


@router.put("/{transport_id}")
def update_transport(transport_id: int, body: TransportUpdate,
                     actor: Actor = Depends(allowed("provider_transport", "update")),
                     db: Session = Depends(get_db)):
    t = _get_transport(db, transport_id)
    enforce(actor, "provider_transport", "update", t)

    if body.transportMethod is not None:
        t.transportMethod = body.transportMethod
    if body.transportCost is not None:
        t.transportCost = to_money(body.transportCost)
    if body.costPerKG is not None:
        t.costPerKG = to_money(body.costPerKG)

    try:
        db.commit()
        db.refresh(t)
        return {"message": "Transport option updated successfully", "transport": transport_out(t)}
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error updating transport option: {e}")


@router.delete("/{transport_id}")
def delete_transport(transport_id: int, actor: Actor = Depends(allowed("provider_transport", "delete")),
                     db: Session = Depends(get_db)):
    t = _get_transport(db, transport_id)
    enforce(actor, "provider_transport", "delete", t)

    try:
        db.delete(t)
        db.commit()
        return {"message": "Transport option deleted successfully"}
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error deleting transport option: {e}")
