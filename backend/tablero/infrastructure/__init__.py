"""Infrastructure Layer — entity store backends and cross-cutting concerns.

Invariants:
    - Infrastructure never imports services/ or api/
    - All backend failures mapped to StoreError before leaving this layer

Design Decisions:
    - Two interchangeable EntityStore backends (memory, SQL) selected by settings
"""
