"""Connection State Machine — tests for pure transition guards.

Tests cover:
    - TRANSITIONS table: exactly the four legal moves
    - check_request: role guards, AlreadyRequested, AlreadyConnected
    - check_respond: NotFound for missing/non-pending, Forbidden for non-responder
    - check_remove: only from ACCEPTED, either party
    - other_party resolves the counterpart from both sides
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from uuid import uuid4

import pytest

from mentorlink.core.connection_rules import (
    TRANSITIONS,
    check_remove,
    check_request,
    check_respond,
    is_legal,
    next_state,
    other_party,
)
from mentorlink.core.domain_types import ConnectionAction, ConnectionState, Role
from mentorlink.core.errors import (
    AlreadyConnectedError,
    AlreadyRequestedError,
    ForbiddenError,
    InvalidRoleError,
    NotFoundError,
)


def _user(role: Role):
    return SimpleNamespace(id=uuid4(), role=role)


def _connection(mentor, mentee, state: ConnectionState):
    now = datetime.now(timezone.utc)
    return SimpleNamespace(
        id=uuid4(), mentor_id=mentor.id, mentee_id=mentee.id,
        state=state, created_at=now, updated_at=now,
    )


# ─── Transition table ────────────────────────────────────────────

def test_transition_table_has_exactly_four_legal_moves():
    assert len(TRANSITIONS) == 4


def test_request_only_legal_from_none():
    assert is_legal(None, ConnectionAction.REQUEST)
    assert not is_legal(ConnectionState.PENDING, ConnectionAction.REQUEST)
    assert not is_legal(ConnectionState.ACCEPTED, ConnectionAction.REQUEST)


def test_accept_and_reject_only_legal_from_pending():
    for action in (ConnectionAction.ACCEPT, ConnectionAction.REJECT):
        assert is_legal(ConnectionState.PENDING, action)
        assert not is_legal(None, action)
        assert not is_legal(ConnectionState.ACCEPTED, action)


def test_remove_only_legal_from_accepted():
    assert is_legal(ConnectionState.ACCEPTED, ConnectionAction.REMOVE)
    assert not is_legal(ConnectionState.PENDING, ConnectionAction.REMOVE)
    assert not is_legal(None, ConnectionAction.REMOVE)


def test_next_state_follows_lifecycle():
    assert next_state(None, ConnectionAction.REQUEST) == ConnectionState.PENDING
    assert next_state(ConnectionState.PENDING, ConnectionAction.ACCEPT) == ConnectionState.ACCEPTED
    assert next_state(ConnectionState.PENDING, ConnectionAction.REJECT) is None
    assert next_state(ConnectionState.ACCEPTED, ConnectionAction.REMOVE) is None


def test_next_state_raises_for_illegal_move():
    with pytest.raises(KeyError):
        next_state(ConnectionState.ACCEPTED, ConnectionAction.ACCEPT)


# ─── check_request ───────────────────────────────────────────────

def test_request_allowed_from_none():
    check_request(_user(Role.MENTEE), _user(Role.MENTOR), None)


def test_request_by_mentor_is_invalid_role():
    with pytest.raises(InvalidRoleError):
        check_request(_user(Role.MENTOR), _user(Role.MENTOR), None)


def test_request_to_mentee_is_invalid_role():
    with pytest.raises(InvalidRoleError):
        check_request(_user(Role.MENTEE), _user(Role.MENTEE), None)


def test_request_accepts_plain_string_roles_from_storage():
    actor = SimpleNamespace(id=uuid4(), role="mentee")
    target = SimpleNamespace(id=uuid4(), role="mentor")
    check_request(actor, target, None)


def test_request_while_pending_is_already_requested():
    mentee, mentor = _user(Role.MENTEE), _user(Role.MENTOR)
    existing = _connection(mentor, mentee, ConnectionState.PENDING)
    with pytest.raises(AlreadyRequestedError):
        check_request(mentee, mentor, existing)


def test_request_while_accepted_is_already_connected():
    mentee, mentor = _user(Role.MENTEE), _user(Role.MENTOR)
    existing = _connection(mentor, mentee, ConnectionState.ACCEPTED)
    with pytest.raises(AlreadyConnectedError):
        check_request(mentee, mentor, existing)


def test_role_checked_before_existing_state():
    mentor_a, mentor_b = _user(Role.MENTOR), _user(Role.MENTOR)
    existing = _connection(mentor_b, mentor_a, ConnectionState.PENDING)
    with pytest.raises(InvalidRoleError):
        check_request(mentor_a, mentor_b, existing)


# ─── check_respond ───────────────────────────────────────────────

@pytest.mark.parametrize("action", [ConnectionAction.ACCEPT, ConnectionAction.REJECT])
def test_respond_returns_pending_record_for_mentor(action):
    mentee, mentor = _user(Role.MENTEE), _user(Role.MENTOR)
    existing = _connection(mentor, mentee, ConnectionState.PENDING)
    assert check_respond(mentor.id, mentee.id, existing, action) is existing


@pytest.mark.parametrize("action", [ConnectionAction.ACCEPT, ConnectionAction.REJECT])
def test_respond_without_record_is_not_found(action):
    with pytest.raises(NotFoundError):
        check_respond(uuid4(), uuid4(), None, action)


@pytest.mark.parametrize("action", [ConnectionAction.ACCEPT, ConnectionAction.REJECT])
def test_respond_to_accepted_record_is_not_found(action):
    mentee, mentor = _user(Role.MENTEE), _user(Role.MENTOR)
    existing = _connection(mentor, mentee, ConnectionState.ACCEPTED)
    with pytest.raises(NotFoundError):
        check_respond(mentor.id, mentee.id, existing, action)


@pytest.mark.parametrize("action", [ConnectionAction.ACCEPT, ConnectionAction.REJECT])
def test_mentee_cannot_respond_to_own_request(action):
    mentee, mentor = _user(Role.MENTEE), _user(Role.MENTOR)
    existing = _connection(mentor, mentee, ConnectionState.PENDING)
    with pytest.raises(ForbiddenError):
        check_respond(mentee.id, mentor.id, existing, action)


# ─── check_remove ────────────────────────────────────────────────

def test_either_party_may_remove_accepted():
    mentee, mentor = _user(Role.MENTEE), _user(Role.MENTOR)
    existing = _connection(mentor, mentee, ConnectionState.ACCEPTED)
    assert check_remove(mentor.id, mentee.id, existing) is existing
    assert check_remove(mentee.id, mentor.id, existing) is existing


def test_remove_pending_is_not_found():
    mentee, mentor = _user(Role.MENTEE), _user(Role.MENTOR)
    existing = _connection(mentor, mentee, ConnectionState.PENDING)
    with pytest.raises(NotFoundError):
        check_remove(mentee.id, mentor.id, existing)


def test_remove_without_record_is_not_found():
    with pytest.raises(NotFoundError):
        check_remove(uuid4(), uuid4(), None)


def test_remove_by_outsider_is_forbidden():
    mentee, mentor = _user(Role.MENTEE), _user(Role.MENTOR)
    existing = _connection(mentor, mentee, ConnectionState.ACCEPTED)
    with pytest.raises(ForbiddenError):
        check_remove(uuid4(), mentor.id, existing)


# ─── other_party ─────────────────────────────────────────────────

def test_other_party_from_both_sides():
    mentee, mentor = _user(Role.MENTEE), _user(Role.MENTOR)
    conn = _connection(mentor, mentee, ConnectionState.ACCEPTED)
    assert other_party(conn, mentor.id) == mentee.id
    assert other_party(conn, mentee.id) == mentor.id


def test_other_party_rejects_outsider():
    mentee, mentor = _user(Role.MENTEE), _user(Role.MENTOR)
    conn = _connection(mentor, mentee, ConnectionState.ACCEPTED)
    with pytest.raises(ValueError):
        other_party(conn, uuid4())
