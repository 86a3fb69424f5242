"""Presence Registry — in-memory map from user identity to its live transport session.

Invariants:
    - One slot per identity: register() overwrites and reports the displaced session
    - unregister() is compare-and-delete — a stale disconnect never clobbers a newer session
    - No TTL: entries live exactly as long as the transport session
    - Owned by the realtime layer of a single process; nothing else mutates it

Design Decisions:
    - Single-slot over multi-session fan-out: multi-device delivery is out of scope,
      but the displaced session is returned so the transport can tell it (ADR: no silent overwrite)
    - Plain dict, no lock: every mutation runs on the event loop thread between awaits
    - Snapshot returned as a sorted list: stable broadcast payloads, easy to assert
"""

from mentorlink.core.domain_types import SessionToken, UserId


class PresenceRegistry:
    """Process-local presence map. Replace with a shared store to run multiple workers."""

    def __init__(self) -> None:
        self._sessions: dict[UserId, SessionToken] = {}

    def register(self, user_id: UserId, session: SessionToken) -> SessionToken | None:
        """Record session as the user's active one. Returns the displaced session, if any."""
        previous = self._sessions.get(user_id)
        self._sessions[user_id] = session
        if previous is not None and previous != session:
            return previous
        return None

    def unregister(self, user_id: UserId, session: SessionToken) -> bool:
        """Remove the entry only if it still belongs to session. True if removed."""
        if self._sessions.get(user_id) != session:
            return False
        del self._sessions[user_id]
        return True

    def lookup(self, user_id: UserId) -> SessionToken | None:
        return self._sessions.get(user_id)

    def is_online(self, user_id: UserId) -> bool:
        return user_id in self._sessions

    def online_user_ids(self) -> list[UserId]:
        """Snapshot of every registered identity."""
        return sorted(self._sessions, key=str)

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)
