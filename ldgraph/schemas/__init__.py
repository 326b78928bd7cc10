"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (HTTP input and output)
    - Schemas carry no graph logic; services translate them into core values

Design Decisions:
    - Separate from core value types: schemas are API contracts, core types are frozen dataclasses
"""
