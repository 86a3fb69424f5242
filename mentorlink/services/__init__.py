"""Services Layer — orchestrates core guards around store and transport IO.

Invariants:
    - Services depend on Protocols, never on SQLAlchemy or FastAPI types
    - All policy decisions delegated to core/

Design Decisions:
    - One service per concern: connections, messaging, presence, dispatch, access
"""
