"""Core Layer — pure domain logic: state machine, access rules, presence map. No IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic; violations raise typed errors from core/errors.py

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
    - PresenceRegistry lives here: in-memory, synchronous, no transport knowledge
"""
