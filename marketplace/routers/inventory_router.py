# marketplace/routers/inventory_router.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from marketplace.database.session import get_db
from marketplace.models.inventory_model import Inventory
from marketplace.models.substance_model import Substance
from marketplace.routers.deps import allowed
from marketplace.schemas.inventory import InventoryCreate, InventoryUpdate, InventoryOut
from marketplace.services.image_service import image_service
from marketplace.services.policy import Actor, enforce
from marketplace.services.retry import create_with_retry, insert

router = APIRouter(prefix="/inventory", tags=["inventory"])


def inventory_out(inv: Inventory) -> InventoryOut:
    out = InventoryOut.model_validate(inv)
    out.image_url = image_service.get_image_url("inventory", inv.id)
    return out


def _get_inventory(db: Session, inventory_id: int) -> Inventory:
    inv = db.get(Inventory, inventory_id)
    if not inv:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return inv


@router.get("/")
def list_inventory(
    substance_id: Optional[int] = Query(default=None),
    actor: Actor = Depends(allowed("inventory", "read")),
    db: Session = Depends(get_db),
):
    q = db.query(Inventory).filter(Inventory.dealer_id == actor.id)
    if substance_id is not None:
        q = q.filter(Inventory.substance_id == substance_id)
    return {"inventory": [inventory_out(inv) for inv in q.order_by(Inventory.id).all()]}


@router.get("/{inventory_id}")
def get_inventory_item(inventory_id: int, actor: Actor = Depends(allowed("inventory", "read")),
                       db: Session = Depends(get_db)):
    inv = _get_inventory(db, inventory_id)
    enforce(actor, "inventory", "read", inv)
    return {"inventoryItem": inventory_out(inv)}


@router.post("/", status_code=201)
def create_inventory_item(body: InventoryCreate, actor: Actor = Depends(allowed("inventory", "create")),
                          db: Session = Depends(get_db)):
    if not db.get(Substance, body.substance_id):
        raise HTTPException(status_code=404, detail="Substance not found")
    exists = (
        db.query(Inventory)
        .filter(Inventory.dealer_id == actor.id, Inventory.substance_id == body.substance_id)
        .first()
    )
    if exists:
        raise HTTPException(status_code=400, detail="Inventory item already exists for this substance")

    try:
        inv = create_with_retry(db, Inventory, lambda: insert(db, Inventory(
            dealer_id=actor.id,
            substance_id=body.substance_id,
            quantityAvailable=body.quantityAvailable,
            warehouse=body.warehouse,
        )), entity="inventory item")
        db.commit()
        db.refresh(inv)
        return {"message": "Inventory item created successfully", "inventoryItem": inventory_out(inv)}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error creating inventory item: {e}")


@router.put("/{inventory_id}")
def update_inventory_item(inventory_id: int, body: InventoryUpdate,
                          actor: Actor = Depends(allowed("inventory", "update")),
                          db: Session = Depends(get_db)):
    inv = _get_inventory(db, inventory_id)
    enforce(actor, "inventory", "update", inv)

    if body.quantityAvailable is not None:
        inv.quantityAvailable = body.quantityAvailable
    if body.warehouse is not None:
        inv.warehouse = body.warehouse

    try:
        db.commit()
        db.refresh(inv)
        return {"message": "Inventory item updated successfully", "inventoryItem": inventory_out(inv)}
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error updating inventory item: {e}")


@router.delete("/{inventory_id}")
def delete_inventory_item(inventory_id: int, actor: Actor = Depends(allowed("inventory", "delete")),
                          db: Session = Depends(get_db)):
    inv = _get_inventory(db, inventory_id)
    enforce(actor, "inventory", "delete", inv)

    try:
        db.delete(inv)
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error deleting inventory item: {e}")

    image_service.delete_image("inventory", inventory_id)
    return {"message": "Inventory item deleted successfully"}
