# marketplace/models/order_item_model.py
from sqlalchemy import Column, Integer, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from marketplace.database.session import Base


class OrderItem(Base):
    __tablename__ = "order_items"

    id           = Column(Integer, primary_key=True, index=True)
    order_id     = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    substance_id = Column(Integer, ForeignKey("substances.id", ondelete="CASCADE"), nullable=False)
    quantity     = Column(Integer, nullable=False)
    unitPrice    = Column(Numeric(10, 2), nullable=False)
    subTotal     = Column(Numeric(10, 2), nullable=False)  # quantity * unitPrice, 2dp

    order     = relationship("Order", back_populates="items")
    substance = relationship("Substance")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_items_quantity"),
    )
