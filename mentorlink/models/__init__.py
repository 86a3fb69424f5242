"""ORM Models — SQLAlchemy declarative models for users, connections and messages.

Invariants:
    - All models inherit from Base (db/base.py)
    - users is owned by the external registration flow; this service only reads it

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all / autogenerate
"""

from mentorlink.models.user import User  # noqa: F401
from mentorlink.models.connection import Connection  # noqa: F401
from mentorlink.models.message import Message  # noqa: F401
