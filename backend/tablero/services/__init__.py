"""Services Layer — repositories, ordering engine, projectors and CSV transceiver.

Invariants:
    - Services read snapshots, call pure core planners, then issue store writes
    - Store errors propagate unchanged; only the API layer translates them

Design Decisions:
    - One service per concern, wired by constructor injection (no globals)
"""
