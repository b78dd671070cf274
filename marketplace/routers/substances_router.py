# marketplace/routers/substances_router.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from marketplace.database.session import get_db
from marketplace.models.substance_model import Substance
from marketplace.routers.deps import allowed
from marketplace.schemas.substances import SubstanceCreate, SubstanceUpdate, SubstanceOut
from marketplace.services.image_service import image_service
from marketplace.services.policy import Actor, enforce
from marketplace.services.retry import create_with_retry, insert

router = APIRouter(prefix="/substances", tags=["substances"])


# ORM -> schema, with the image looked up on disk
def substance_out(s: Substance) -> SubstanceOut:
    out = SubstanceOut.model_validate(s)
    out.image_url = image_service.get_image_url("substance", s.id)
    return out


def _get_substance(db: Session, substance_id: int) -> Substance:
    s = db.get(Substance, substance_id)
    if not s:
        raise HTTPException(status_code=404, detail="Substance not found")
    return s


@router.get("/")
def list_substances(
    provider_id: Optional[int] = Query(default=None),
    category: Optional[str] = Query(default=None),
    actor: Actor = Depends(allowed("substance", "read")),
    db: Session = Depends(get_db),
):
    q = db.query(Substance)
    if provider_id is not None:
        q = q.filter(Substance.provider_id == provider_id)
    if category:
        q = q.filter(Substance.category == category)
    return {"substances": [substance_out(s) for s in q.order_by(Substance.id.desc()).all()]}


@router.get("/{substance_id}")
def get_substance(substance_id: int, actor: Actor = Depends(allowed("substance", "read")),
                  db: Session = Depends(get_db)):
    return {"substance": substance_out(_get_substance(db, substance_id))}


@router.post("/", status_code=201)
def create_substance(body: SubstanceCreate, actor: Actor = Depends(allowed("substance", "create")),
                     db: Session = Depends(get_db)):
    try:
        s = create_with_retry(db, Substance, lambda: insert(db, Substance(
            provider_id=actor.id,
            substanceName=body.substanceName,
            category=body.category,
            description=body.description,
        )), entity="substance")
        db.commit()
        db.refresh(s)
        return {"message": "Substance created successfully", "substance": substance_out(s)}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error creating substance: {e}")


@router.put("/{substance_id}")
def update_substance(substance_id: int, body: SubstanceUpdate, actor: Actor = Depends(allowed("substance", "update")),
                     db: Session = Depends(get_db)):
    s = _get_substance(db, substance_id)
    enforce(actor, "substance", "update", s)

    # only the fields sent in the request
    for name, value in body.model_dump(exclude_none=True).items():
        setattr(s, name, value)

    try:
        db.commit()
        db.refresh(s)
        return {"message": "Substance updated successfully", "substance": substance_out(s)}
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error updating substance: {e}")


@router.delete("/{substance_id}")
def delete_substance(substance_id: int, actor: Actor = Depends(allowed("substance", "delete")),
                     db: Session = Depends(get_db)):
    s = _get_substance(db, substance_id)
    enforce(actor, "substance", "delete", s)

    try:
        db.delete(s)
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error deleting substance: {e}")

    image_service.delete_image("substance", substance_id)
    return {"message": "Substance deleted successfully"}
