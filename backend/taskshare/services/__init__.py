"""Service Layer — async orchestration around the functional core.

Invariants:
    - Each public method is one unit of work: it commits once or rolls back
    - Decisions are delegated to core/; services only load, persist and log
    - Every operation takes the actor explicitly, never from ambient request state
"""
