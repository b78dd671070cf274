# marketplace/database/conflicts.py
"""
Classification of IntegrityError raised on insert.

A primary-key collision is retryable (the id sequence fell behind the table),
any other unique violation is a caller error reported against a field.
PostgreSQL is recognised by SQLSTATE 23505 plus the constraint name; SQLite
only reports the failing column list, which is compared with the table's
primary key.
"""
import re
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import Table
from sqlalchemy.exc import IntegrityError

UNIQUE_VIOLATION = "23505"

PRIMARY_KEY = "primary_key"
UNIQUE = "unique"
OTHER = "other"

_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: ([\w.,\s]+)")
_CONSTRAINT_FIELD = re.compile(r"_([^_]+)_key$")


@dataclass(frozen=True)
class Conflict:
    kind: str
    field: Optional[str] = None
    constraint: Optional[str] = None

    @property
    def retryable(self) -> bool:
        return self.kind == PRIMARY_KEY


def _pg_details(orig):
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    diag = getattr(orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None) if diag is not None else None
    return code, constraint


def field_from_constraint(constraint: str, table_name: str) -> Optional[str]:
    prefix = f"{table_name}_"
    if constraint.startswith(prefix) and constraint.endswith("_key"):
        return constraint[len(prefix):-len("_key")] or None
    m = _CONSTRAINT_FIELD.search(constraint)
    return m.group(1) if m else None


def classify_integrity_error(exc: IntegrityError, table: Table) -> Conflict:
    orig = getattr(exc, "orig", None) or exc
    code, constraint = _pg_details(orig)

    if code == UNIQUE_VIOLATION:
        if constraint and constraint.endswith("_pkey"):
            return Conflict(PRIMARY_KEY, constraint=constraint)
        field = field_from_constraint(constraint, table.name) if constraint else None
        return Conflict(UNIQUE, field=field, constraint=constraint)

    m = _SQLITE_UNIQUE.search(str(orig))
    if m:
        columns = [c.strip().split(".")[-1] for c in m.group(1).split(",") if c.strip()]
        pk_columns = [c.name for c in table.primary_key.columns]
        if columns == pk_columns:
            return Conflict(PRIMARY_KEY)
        return Conflict(UNIQUE, field=columns[0] if columns else None)

    return Conflict(OTHER)
