# marketplace/models/provider_transport_model.py
from sqlalchemy import Column, Integer, Numeric, ForeignKey
from sqlalchemy.types import Unicode
from sqlalchemy.orm import relationship

from marketplace.database.session import Base


class ProviderTransport(Base):
    __tablename__ = "provider_transports"

    id              = Column(Integer, primary_key=True, index=True)
    provider_id     = Column(Integer, ForeignKey("providers.id", ondelete="CASCADE"), nullable=False, index=True)
    transportMethod = Column(Unicode(100), nullable=False)
    transportCost   = Column(Numeric(10, 2), nullable=False)
    costPerKG       = Column(Numeric(10, 2), nullable=False)

    provider = relationship("Provider")
