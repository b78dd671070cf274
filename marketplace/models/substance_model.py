# marketplace/models/substance_model.py
from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.types import Unicode, UnicodeText
from sqlalchemy.orm import relationship

from marketplace.database.session import Base


class Substance(Base):
    __tablename__ = "substances"

    id            = Column(Integer, primary_key=True, index=True)
    provider_id   = Column(Integer, ForeignKey("providers.id", ondelete="CASCADE"), nullable=False, index=True)
    substanceName = Column(Unicode(255), nullable=False)
    category      = Column(Unicode(100))
    description   = Column(UnicodeText)

    provider = relationship("Provider")
