# marketplace/models/purchase_order_model.py
from datetime import datetime

from sqlalchemy import Column, Integer, Numeric, Boolean, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.types import Unicode
from sqlalchemy.orm import relationship

from marketplace.database.session import Base

PURCHASE_ORDER_STATUSES = ("pending", "confirmed", "shipped", "received", "cancelled")


class PurchaseOrder(Base):
    __tablename__ = "purchase_orders"

    id                   = Column(Integer, primary_key=True, index=True)
    dealer_id            = Column(Integer, ForeignKey("dealers.id", ondelete="CASCADE"), nullable=False, index=True)
    provider_id          = Column(Integer, ForeignKey("providers.id", ondelete="CASCADE"), nullable=False, index=True)
    substance_id         = Column(Integer, ForeignKey("substances.id", ondelete="CASCADE"), nullable=False)
    providerTransport_id = Column(Integer, ForeignKey("provider_transports.id", ondelete="SET NULL"))
    quantityOrdered      = Column(Integer, nullable=False)
    unitCost             = Column(Numeric(10, 2), nullable=False)
    transportCost        = Column(Numeric(10, 2), nullable=False, default=0)  # copied at creation
    totalCost            = Column(Numeric(10, 2), nullable=False)
    orderDate            = Column(DateTime, default=datetime.utcnow)
    paymentStatus        = Column(Boolean, nullable=False, default=False)
    paymentMethod        = Column(Unicode(50))
    paymentDate          = Column(DateTime)
    status               = Column(Unicode(20), nullable=False, default="pending")

    dealer    = relationship("Dealer")
    provider  = relationship("Provider")
    substance = relationship("Substance")
    transport = relationship("ProviderTransport")

    __table_args__ = (
        CheckConstraint('"quantityOrdered" >= 1', name="ck_purchase_orders_quantity"),
        CheckConstraint(
            "status in ('pending','confirmed','shipped','received','cancelled')",
            name="ck_purchase_orders_status",
        ),
    )
