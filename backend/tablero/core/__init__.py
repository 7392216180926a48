"""Core Layer — pure domain logic, no IO, no async, no store access.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (timestamps and ids are passed in)

Design Decisions:
    - Functional core separated from imperative shell: the ordering engine and
      projector plan their writes here and only issue them in services/
"""
