"""Identity Normalization — the single canonical form for every email comparison.

Invariants:
    - normalize_identity is idempotent: normalize(normalize(x)) == normalize(x)
    - Ownership checks, share matches and invite matches all compare normalized values
    - Anything that is not local@domain after trimming raises InvalidInputError
"""

import re

from taskshare.core.domain_types import Identity
from taskshare.core.errors import InvalidInputError

_EMAIL_SHAPE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MAX_IDENTITY_LENGTH = 254


def canonical_form(value: str) -> str:
    return value.strip().lower()


def normalize_identity(raw: str, field: str = "email") -> Identity:
    """Trim and lower-case an email into an Identity."""
    if not isinstance(raw, str):
        raise InvalidInputError("Email must be a string", field)
    value = canonical_form(raw)
    if not value:
        raise InvalidInputError("Email cannot be empty", field)
    if len(value) > MAX_IDENTITY_LENGTH or not _EMAIL_SHAPE.match(value):
        raise InvalidInputError(f"'{raw.strip()}' is not a valid email address", field)
    return Identity(value)


def same_identity(a: str, b: str) -> bool:
    """Case/whitespace-insensitive identity equality."""
    return canonical_form(a) == canonical_form(b)
