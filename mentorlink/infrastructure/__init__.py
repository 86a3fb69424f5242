"""Infrastructure Layer — database, stores, transport and cross-cutting concerns.

Invariants:
    - Stores implement the Protocols in core/repository_protocols.py
    - All SQLAlchemy failures mapped to StorageFailureError at the session boundary

Design Decisions:
    - One adapter per external concern (users, connections, messages, sockets)
"""
