# marketplace/services/retry.py
"""
Insert helper that survives primary-key collisions.

Some rows in the store were inserted with explicit ids, so a table's id
sequence can lag behind its contents and hand out a value already in use.
When that happens the sequence is advanced and the same insert is tried
again, up to a fixed number of attempts. Each attempt runs in a SAVEPOINT so
a failed insert never discards the caller's surrounding transaction.
"""
import logging
from typing import Callable, Optional, TypeVar

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from marketplace.config.settings import PK_RETRY_LIMIT
from marketplace.database.conflicts import PRIMARY_KEY, UNIQUE, classify_integrity_error
from marketplace.services.errors import DuplicateFieldError, IdGenerationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def sequence_name_for(model) -> str:
    return f"{model.__tablename__}_id_seq"


def advance_sequence(db: Session, sequence_name: str) -> None:
    """Burn one value of a PostgreSQL sequence. Other backends have nothing to advance."""
    if db.get_bind().dialect.name != "postgresql":
        return
    db.execute(text("SELECT nextval(:seq)"), {"seq": sequence_name})


def create_with_retry(
    db: Session,
    model,
    attempt: Callable[[], T],
    *,
    entity: Optional[str] = None,
    sequence_name: Optional[str] = None,
    max_retries: Optional[int] = None,
    advance: Callable[[Session, str], None] = advance_sequence,
) -> T:
    """
    Run ``attempt`` (one insert + flush, returning the new row) until it stops
    colliding on the primary key.

    Raises DuplicateFieldError at once for any other unique violation and
    IdGenerationError once ``max_retries`` attempts have all collided.
    Every other error propagates untouched.
    """
    limit = PK_RETRY_LIMIT if max_retries is None else max_retries
    entity = entity or model.__tablename__
    sequence_name = sequence_name or sequence_name_for(model)

    for attempt_no in range(1, limit + 1):
        try:
            with db.begin_nested():
                return attempt()
        except IntegrityError as exc:
            conflict = classify_integrity_error(exc, model.__table__)
            if conflict.kind == UNIQUE:
                raise DuplicateFieldError(conflict.field) from exc
            if conflict.kind != PRIMARY_KEY:
                raise

            logger.warning(
                f"Primary key collision creating {entity} (attempt {attempt_no}/{limit}), advancing {sequence_name}"
            )
            try:
                with db.begin_nested():
                    advance(db, sequence_name)
            except SQLAlchemyError as seq_exc:
                logger.warning(f"Could not advance sequence {sequence_name}: {seq_exc}")

    logger.error(f"Giving up on {entity} after {limit} primary key collisions")
    raise IdGenerationError(entity, limit)


def insert(db: Session, row: T) -> T:
    """One attempt for create_with_retry: add ``row`` and flush so the INSERT hits the store."""
    db.add(row)
    db.flush()
    return row


def flush_unique(db: Session, model) -> None:
    """Flush pending updates, turning a unique violation into DuplicateFieldError."""
    try:
        with db.begin_nested():
            db.flush()
    except IntegrityError as exc:
        conflict = classify_integrity_error(exc, model.__table__)
        if conflict.kind == UNIQUE:
            raise DuplicateFieldError(conflict.field) from exc
        raise
