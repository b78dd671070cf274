# marketplace/routers/images_router.py
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from marketplace.database.session import get_db
from marketplace.models.inventory_model import Inventory
from marketplace.models.substance_model import Substance
from marketplace.routers.deps import allowed
from marketplace.services.image_service import image_service
from marketplace.services.policy import Actor, enforce

router = APIRouter(prefix="/images", tags=["images"])


async def _upload(kind: str, entity_id: int, file: UploadFile) -> dict:
    try:
        content = await file.read()
        url = await image_service.save_image(content, file.filename, kind, entity_id, file.content_type)
        return {"message": "Image uploaded successfully", "imageUrl": url}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error uploading image: {e}")


def _remove(kind: str, entity_id: int) -> dict:
    if not image_service.delete_image(kind, entity_id):
        raise HTTPException(status_code=404, detail="Image not found")
    return {"message": "Image deleted successfully"}


def _substance(db: Session, substance_id: int) -> Substance:
    s = db.get(Substance, substance_id)
    if not s:
        raise HTTPException(status_code=404, detail="Substance not found")
    return s


def _inventory(db: Session, inventory_id: int) -> Inventory:
    inv = db.get(Inventory, inventory_id)
    if not inv:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return inv


@router.post("/substance/{substance_id}")
async def upload_substance_image(
    substance_id: int,
    image: UploadFile = File(..., description="image file"),
    actor: Actor = Depends(allowed("substance_image", "write")),
    db: Session = Depends(get_db),
):
    enforce(actor, "substance_image", "write", _substance(db, substance_id))
    return await _upload("substance", substance_id, image)


@router.delete("/substance/{substance_id}")
def delete_substance_image(substance_id: int, actor: Actor = Depends(allowed("substance_image", "write")),
                           db: Session = Depends(get_db)):
    enforce(actor, "substance_image", "write", _substance(db, substance_id))
    return _remove("substance", substance_id)


@router.post("/inventory/{inventory_id}")
async def upload_inventory_image(
    inventory_id: int,
    image: UploadFile = File(..., description="image file"),
    actor: Actor = Depends(allowed("inventory_image", "write")),
    db: Session = Depends(get_db),
):
    enforce(actor, "inventory_image", "write", _inventory(db, inventory_id))
    return await _upload("inventory", inventory_id, image)


@router.delete("/inventory/{inventory_id}")
def delete_inventory_image(inventory_id: int, actor: Actor = Depends(allowed("inventory_image", "write")),
                           db: Session = Depends(get_db)):
    enforce(actor, "inventory_image", "write", _inventory(db, inventory_id))
    return _remove("inventory", inventory_id)


@router.get("/{kind}/{entity_id}")
def get_image(kind: str, entity_id: int, actor: Actor = Depends(allowed("image", "read"))):
    url = image_service.get_image_url(kind, entity_id)
    if url is None:
        raise HTTPException(status_code=404, detail="Image not found")
    return {"imageUrl": url}
