# marketplace/models/user_model.py
from sqlalchemy import Column, Integer, Numeric, CheckConstraint
from sqlalchemy.types import Unicode

from marketplace.database.session import Base

ACCOUNT_STATUSES = ("active", "inactive", "suspended")


class AccountColumns:
    """Login columns shared by the three account tables."""
    id       = Column(Integer, primary_key=True, index=True)
    username = Column(Unicode(255), unique=True, nullable=False)
    email    = Column(Unicode(255), unique=True, nullable=False)
    password = Column(Unicode(255), nullable=False)  # bcrypt hash
    status   = Column(Unicode(20), nullable=False, default="active")


class Customer(AccountColumns, Base):
    __tablename__ = "customers"
    address = Column(Unicode(255))

    __table_args__ = (
        CheckConstraint("status in ('active','inactive','suspended')", name="ck_customers_status"),
    )


class Dealer(AccountColumns, Base):
    __tablename__ = "dealers"
    warehouse = Column(Unicode(255))
    rating    = Column(Numeric(3, 2), nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("status in ('active','inactive','suspended')", name="ck_dealers_status"),
        CheckConstraint("rating >= 0 and rating <= 5", name="ck_dealers_rating"),
    )


class Provider(AccountColumns, Base):
    __tablename__ = "providers"
    businessName = Column(Unicode(255), nullable=False)

    __table_args__ = (
        CheckConstraint("status in ('active','inactive','suspended')", name="ck_providers_status"),
    )
