"""Identity Normalization — tests for the canonical email form.

Tests cover:
    - Trimming and lower-casing
    - Idempotence
    - Rejection of empty, malformed, oversize and non-string input
    - same_identity comparison shares the canonical form with normalize_identity
"""

import pytest

from taskshare.core.errors import InvalidInputError
from taskshare.core.identity import (
    MAX_IDENTITY_LENGTH, canonical_form, normalize_identity, same_identity,
)


# ─── normalize_identity ──────────────────────────────────────────

def test_normalize_trims_and_lowercases():
    assert normalize_identity("  Alice@Example.COM ") == "alice@example.com"


def test_normalize_is_idempotent():
    once = normalize_identity("Bob@Example.com")
    assert normalize_identity(once) == once


@pytest.mark.parametrize("raw", ["", "   ", "no-at-sign", "a@b", "a b@c.com", "@example.com"])
def test_normalize_rejects_malformed(raw):
    with pytest.raises(InvalidInputError) as exc:
        normalize_identity(raw)
    assert exc.value.field == "email"


def test_normalize_rejects_oversize():
    local = "a" * MAX_IDENTITY_LENGTH
    with pytest.raises(InvalidInputError):
        normalize_identity(f"{local}@example.com")


def test_normalize_rejects_non_string():
    with pytest.raises(InvalidInputError):
        normalize_identity(None)


def test_normalize_reports_custom_field():
    with pytest.raises(InvalidInputError) as exc:
        normalize_identity("bad", field="target")
    assert exc.value.field == "target"


# ─── same_identity ───────────────────────────────────────────────

def test_same_identity_ignores_case_and_whitespace():
    assert same_identity(" CAROL@example.com", "carol@EXAMPLE.com ")


def test_same_identity_distinguishes_addresses():
    assert not same_identity("carol@example.com", "carl@example.com")


def test_normalized_identity_is_the_canonical_form():
    raw = "  Dave@Example.COM "
    assert normalize_identity(raw) == canonical_form(raw)
    assert same_identity(raw, canonical_form(raw))
