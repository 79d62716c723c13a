"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Users, persons and tasks reference each other by identity value, not FK
    - Task is the aggregate root for its share entries

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from taskshare.models.user import User  # noqa: F401
from taskshare.models.person import Person  # noqa: F401
from taskshare.models.task import Task, TaskShare  # noqa: F401
