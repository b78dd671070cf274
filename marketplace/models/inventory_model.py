# marketplace/models/inventory_model.py
from sqlalchemy import Column, Integer, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.types import Unicode
from sqlalchemy.orm import relationship

from marketplace.database.session import Base


class Inventory(Base):
    __tablename__ = "inventories"

    id                = Column(Integer, primary_key=True, index=True)
    dealer_id         = Column(Integer, ForeignKey("dealers.id", ondelete="CASCADE"), nullable=False, index=True)
    substance_id      = Column(Integer, ForeignKey("substances.id", ondelete="CASCADE"), nullable=False)
    quantityAvailable = Column(Integer, nullable=False, default=0)
    warehouse         = Column(Unicode(255))

    dealer    = relationship("Dealer")
    substance = relationship("Substance")

    __table_args__ = (
        UniqueConstraint("dealer_id", "substance_id", name="inventories_dealer_substance_key"),
        CheckConstraint('"quantityAvailable" >= 0', name="ck_inventories_quantity"),
    )
