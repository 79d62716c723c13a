"""SQLAlchemy Declarative Base — shared metadata for users, persons, tasks and shares.

Invariants:
    - All models inherit from Base
    - Constraint and index names follow NAMING_CONVENTION, so migrations and
      the ORM agree on names across PostgreSQL and SQLite
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
