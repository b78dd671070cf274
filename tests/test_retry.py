import pytest
from sqlalchemy.exc import IntegrityError

from marketplace.models import Customer
from marketplace.services.errors import DuplicateFieldError, IdGenerationError
from marketplace.services.retry import advance_sequence, create_with_retry, insert


class FakeDiag:
    def __init__(self, constraint_name):
        self.constraint_name = constraint_name


class FakePgError(Exception):
    def __init__(self, constraint_name, sqlstate="23505"):
        super().__init__(f'duplicate key value violates unique constraint "{constraint_name}"')
        self.sqlstate = sqlstate
        self.diag = FakeDiag(constraint_name)


def pk_collision():
    return IntegrityError("INSERT INTO customers ...", {}, FakePgError("customers_pkey"))


class Advance:
    def __init__(self):
        self.calls = []

    def __call__(self, db, sequence_name):
        self.calls.append(sequence_name)


def new_customer(name="alice"):
    return Customer(username=name, email=f"{name}@example.com", password="x", status="active")


@pytest.mark.parametrize("collisions", [0, 1, 3])
def test_succeeds_after_k_collisions_and_advances_k_times(db_session, collisions):
    advance = Advance()
    attempts = []

    def attempt():
        attempts.append(1)
        if len(attempts) <= collisions:
            raise pk_collision()
        return insert(db_session, new_customer())

    row = create_with_retry(db_session, Customer, attempt, max_retries=5, advance=advance)
    db_session.commit()

    assert row.id is not None
    assert len(attempts) == collisions + 1
    assert advance.calls == ["customers_id_seq"] * collisions
    assert db_session.query(Customer).count() == 1


def test_always_colliding_gives_up_after_max_retries(db_session):
    advance = Advance()
    attempts = []

    def attempt():
        attempts.append(1)
        raise pk_collision()

    with pytest.raises(IdGenerationError) as info:
        create_with_retry(db_session, Customer, attempt, entity="customer", max_retries=4, advance=advance)

    assert len(attempts) == 4
    assert info.value.status_code == 500
    assert info.value.detail == {
        "message": "Unable to create customer after 4 attempts. Please contact support.",
        "error": "ID generation failed",
    }


def test_unique_violation_is_reported_without_retry(db_session):
    db_session.add(new_customer("bob"))
    db_session.commit()

    advance = Advance()
    attempts = []

    def attempt():
        attempts.append(1)
        return insert(db_session, Customer(username="bob", email="other@example.com", password="x"))

    with pytest.raises(DuplicateFieldError) as info:
        create_with_retry(db_session, Customer, attempt, advance=advance)

    assert len(attempts) == 1
    assert advance.calls == []
    assert info.value.status_code == 400
    assert info.value.detail == "Username already exists"


def test_real_primary_key_collision_is_retried(db_session):
    db_session.add(new_customer("first"))
    db_session.commit()
    taken = db_session.query(Customer).first().id
    db_session.expunge_all()

    advance = Advance()
    attempts = []

    def attempt():
        attempts.append(1)
        # first attempt reuses an id already in the table
        row = new_customer("second")
        if len(attempts) == 1:
            row.id = taken
        return insert(db_session, row)

    row = create_with_retry(db_session, Customer, attempt, advance=advance)
    db_session.commit()

    assert row.id != taken
    assert len(attempts) == 2
    assert advance.calls == ["customers_id_seq"]


def test_other_integrity_errors_propagate(db_session):
    advance = Advance()

    with pytest.raises(IntegrityError):
        create_with_retry(
            db_session, Customer,
            lambda: insert(db_session, Customer(username="nomail", password="x")),
            advance=advance,
        )
    assert advance.calls == []


def test_failed_attempt_keeps_outer_transaction(db_session):
    db_session.add(new_customer("outer"))
    db_session.flush()
    attempts = []

    def attempt():
        attempts.append(1)
        if len(attempts) == 1:
            raise pk_collision()
        return insert(db_session, new_customer("inner"))

    create_with_retry(db_session, Customer, attempt, advance=Advance())
    db_session.commit()

    names = sorted(c.username for c in db_session.query(Customer))
    assert names == ["inner", "outer"]


def test_advance_error_is_swallowed(db_session):
    attempts = []

    def attempt():
        attempts.append(1)
        if len(attempts) == 1:
            raise pk_collision()
        return insert(db_session, new_customer())

    def broken_advance(db, sequence_name):
        raise IntegrityError("SELECT nextval(...)", {}, Exception("no such sequence"))

    row = create_with_retry(db_session, Customer, attempt, advance=broken_advance)
    assert row.id is not None


def test_advance_sequence_is_noop_on_sqlite(db_session):
    advance_sequence(db_session, "customers_id_seq")
