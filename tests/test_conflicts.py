from sqlalchemy.exc import IntegrityError

from marketplace.database.conflicts import (
    OTHER, PRIMARY_KEY, UNIQUE, classify_integrity_error, field_from_constraint,
)
from marketplace.models import Customer, Inventory, Shipment


class FakeDiag:
    def __init__(self, constraint_name):
        self.constraint_name = constraint_name


class Psycopg3Error(Exception):
    def __init__(self, constraint_name, sqlstate="23505"):
        super().__init__("duplicate key")
        self.sqlstate = sqlstate
        self.diag = FakeDiag(constraint_name)


class Psycopg2Error(Exception):
    def __init__(self, constraint_name, pgcode="23505"):
        super().__init__("duplicate key")
        self.pgcode = pgcode
        self.diag = FakeDiag(constraint_name)


def wrap(orig):
    return IntegrityError("INSERT ...", {}, orig)


def test_postgres_primary_key():
    conflict = classify_integrity_error(wrap(Psycopg3Error("customers_pkey")), Customer.__table__)
    assert conflict.kind == PRIMARY_KEY
    assert conflict.retryable


def test_postgres_unique_field_from_constraint_name():
    conflict = classify_integrity_error(wrap(Psycopg2Error("customers_email_key")), Customer.__table__)
    assert conflict.kind == UNIQUE
    assert conflict.field == "email"
    assert not conflict.retryable


def test_postgres_other_sqlstate():
    conflict = classify_integrity_error(wrap(Psycopg3Error("orders_customer_id_fkey", sqlstate="23503")),
                                        Customer.__table__)
    assert conflict.kind == OTHER


def test_sqlite_primary_key():
    err = wrap(Exception("UNIQUE constraint failed: customers.id"))
    assert classify_integrity_error(err, Customer.__table__).kind == PRIMARY_KEY


def test_sqlite_unique_column():
    err = wrap(Exception("UNIQUE constraint failed: shipments.order_id"))
    conflict = classify_integrity_error(err, Shipment.__table__)
    assert conflict.kind == UNIQUE
    assert conflict.field == "order_id"


def test_sqlite_composite_unique():
    err = wrap(Exception("UNIQUE constraint failed: inventories.dealer_id, inventories.substance_id"))
    conflict = classify_integrity_error(err, Inventory.__table__)
    assert conflict.kind == UNIQUE
    assert conflict.field == "dealer_id"


def test_not_null_is_other():
    err = wrap(Exception("NOT NULL constraint failed: customers.email"))
    assert classify_integrity_error(err, Customer.__table__).kind == OTHER


def test_field_from_constraint():
    assert field_from_constraint("shipments_order_id_key", "shipments") == "order_id"
    assert field_from_constraint("customers_username_key", "customers") == "username"
    assert field_from_constraint("uq_dealer_email_key", "customers") == "email"
    assert field_from_constraint("ck_something", "customers") is None
