# marketplace/routers/customers_router.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, selectinload

from marketplace.database.session import get_db
from marketplace.models.order_model import Order
from marketplace.models.user_model import Customer
from marketplace.routers.deps import allowed
from marketplace.routers.orders_router import order_out
from marketplace.schemas.users import CustomerUpdate, CustomerOut
from marketplace.services.auth_service import apply_account_update, session_store
from marketplace.services.image_service import image_service
from marketplace.services.policy import Actor, CUSTOMER, enforce
from marketplace.services.retry import flush_unique

router = APIRouter(prefix="/customers", tags=["customers"])


def _get_customer(db: Session, customer_id: int) -> Customer:
    c = db.get(Customer, customer_id)
    if not c:
        raise HTTPException(status_code=404, detail="Customer not found")
    return c


@router.get("/{customer_id}")
def get_customer(customer_id: int, actor: Actor = Depends(allowed("customer", "read")), db: Session = Depends(get_db)):
    c = _get_customer(db, customer_id)
    enforce(actor, "customer", "read", c)
    return {"customer": CustomerOut.model_validate(c)}


@router.put("/{customer_id}")
def update_customer(customer_id: int, body: CustomerUpdate, actor: Actor = Depends(allowed("customer", "update")),
                    db: Session = Depends(get_db)):
    c = _get_customer(db, customer_id)
    enforce(actor, "customer", "update", c)
    apply_account_update(c, body.model_dump(exclude_none=True))

    try:
        flush_unique(db, Customer)
        db.commit()
        db.refresh(c)
        return {"message": "Customer updated successfully", "customer": CustomerOut.model_validate(c)}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error updating customer: {e}")


@router.delete("/{customer_id}")
def delete_customer(customer_id: int, actor: Actor = Depends(allowed("customer", "delete")),
                    db: Session = Depends(get_db)):
    c = _get_customer(db, customer_id)
    enforce(actor, "customer", "delete", c)

    try:
        db.delete(c)
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Error deleting customer: {e}")

    session_store.drop_actor(CUSTOMER, customer_id)
    image_service.delete_image("customer", customer_id)
    return {"message": "Customer account deleted successfully"}


@router.get("/{customer_id}/orders")
def get_customer_orders(customer_id: int, actor: Actor = Depends(allowed("customer", "read")),
                        db: Session = Depends(get_db)):
    c = _get_customer(db, customer_id)
    enforce(actor, "customer", "read", c)
    orders = (
        db.query(Order)
        .options(selectinload(Order.items), selectinload(Order.shipment))
        .filter(Order.customer_id == c.id)
        .order_by(Order.orderDate.desc(), Order.id.desc())
        .all()
    )
    return {"orders": [order_out(o) for o in orders]}
