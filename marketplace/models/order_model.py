# marketplace/models/order_model.py
from datetime import datetime

from sqlalchemy import Column, Integer, Numeric, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.types import Unicode
from sqlalchemy.orm import relationship

from marketplace.database.session import Base

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")
PAYMENT_STATUSES = ("pending", "paid", "failed", "refunded")


class Order(Base):
    __tablename__ = "orders"

    id                   = Column(Integer, primary_key=True, index=True)
    customer_id          = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    dealer_id            = Column(Integer, ForeignKey("dealers.id", ondelete="CASCADE"), nullable=False, index=True)
    orderDate            = Column(DateTime, default=datetime.utcnow)
    orderStatus          = Column(Unicode(20), nullable=False, default="pending")
    totalAmount          = Column(Numeric(10, 2), nullable=False, default=0)  # sum of item subtotals
    shippingCost         = Column(Numeric(10, 2), nullable=False, default=0)
    deliveryAddress      = Column(Unicode(255))
    paymentMethod        = Column(Unicode(50))
    paymentStatus        = Column(Unicode(20), nullable=False, default="pending")
    paymentDate          = Column(DateTime)
    transactionReference = Column(Unicode(100))

    customer = relationship("Customer")
    dealer   = relationship("Dealer")
    items    = relationship("OrderItem", cascade="all, delete-orphan", back_populates="order",
                            order_by="OrderItem.id")
    shipment = relationship("Shipment", uselist=False, cascade="all, delete-orphan", back_populates="order")

    __table_args__ = (
        CheckConstraint(
            "\"orderStatus\" in ('pending','processing','shipped','delivered','cancelled')",
            name="ck_orders_status",
        ),
        CheckConstraint(
            "\"paymentStatus\" in ('pending','paid','failed','refunded')",
            name="ck_orders_payment_status",
        ),
    )
