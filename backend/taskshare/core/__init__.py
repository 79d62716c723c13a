"""Core Layer — access-control and entitlement rules, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - All functions are pure and deterministic (token generation is the one
      deliberate source of randomness, isolated in invitations.py)

Design Decisions:
    - Functional core separated from imperative shell: services load state,
      call into core for the decision, then persist
"""
