"""Infrastructure Layer — external service adapters and cross-cutting concerns.

Invariants:
    - Infrastructure never imports core decision logic, only core errors/protocols
    - External calls wrapped with timeout and error mapping
"""
