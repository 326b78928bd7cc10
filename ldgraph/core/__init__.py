"""Core Layer — pure graph logic, no IO, no async, no logging side effects.

Invariants:
    - No module in core/ imports from services/, api/, schemas/ or infrastructure/
    - All functions are pure and deterministic (same graph + config → same output)

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
    - Graphs stay plain lists of dicts: callers pass JSON they already have
"""
