# marketplace/models/shipment_model.py
from sqlalchemy import Column, Integer, ForeignKey, CheckConstraint
from sqlalchemy.types import Unicode
from sqlalchemy.orm import relationship

from marketplace.database.session import Base

SHIPMENT_STATUSES = ("preparing", "in_transit", "delivered", "failed")


class Shipment(Base):
    __tablename__ = "shipments"

    id       = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, unique=True)
    carrier  = Column(Unicode(100), default="")
    status   = Column(Unicode(20), nullable=False, default="preparing")

    order = relationship("Order", back_populates="shipment")

    __table_args__ = (
        CheckConstraint("status in ('preparing','in_transit','delivered','failed')", name="ck_shipments_status"),
    )
