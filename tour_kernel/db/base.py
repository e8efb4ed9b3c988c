"""
Module: tour_kernel.db.base
Responsibility: Declarative base for the SQLAlchemy ORM models.  Provides the
    UUID primary key convention and the type annotation map.
Architecture position: Kernel > DB.  Lowest-level import target within the
    persistence side.  MUST NOT import from models/, services/, selectors/,
    repositories/ or domain/.

Invariants enforced:
    - UUID primary keys stored as String(36), portable across SQLite and
      PostgreSQL.
    - Timestamps are timezone-aware.
    - Amounts never go through float: line totals travel as decimal strings
      inside JSON columns.
"""

from datetime import datetime
from typing import ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """
    UUID stored as its canonical 36-character string.

    Bound values may be UUIDs or UUID strings in any accepted spelling
    (braces, upper case); both are written canonically so lookups by a
    pasted id still match.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(value if isinstance(value, PyUUID) else PyUUID(str(value)))

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, PyUUID):
            return value
        return PyUUID(value)


class Base(DeclarativeBase):
    """
    Declarative base for all ORM models.

    Guarantees:
        - id is a uuid4 UUID stored as String(36).
        - datetime maps to DateTime(timezone=True).
    """

    type_annotation_map: ClassVar[dict] = {
        datetime: DateTime(timezone=True),
        PyUUID: UUIDString(),
        int: Integer,
    }

    id: Mapped[PyUUID] = mapped_column(
        UUIDString(),
        primary_key=True,
        default=uuid4,
    )
