"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate shape and length at the system boundary
    - Domain rules (email normalization, roles, quotas) stay in core/

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
