"""Tests for session lifecycle."""

import pytest

from integrity.config import Settings
from integrity.container import build_container
from integrity.core.exceptions import SessionNotFound


@pytest.fixture
def container(fake_detection):
    return build_container(Settings(history_capacity=3), detection=fake_detection)


def test_sessions_are_isolated(container, make_record):
    a = container.sessions.create()
    b = container.sessions.create()
    a.history.add_to_history(make_record("only-in-a"))

    assert a.session_id != b.session_id
    assert len(b.history) == 0
    assert container.sessions.get(a.session_id) is a


def test_capacity_comes_from_settings(container):
    assert container.sessions.create().history.capacity == 3


def test_discard_drops_session(container):
    session = container.sessions.create()
    container.sessions.discard(session.session_id)

    with pytest.raises(SessionNotFound):
        container.sessions.get(session.session_id)
    with pytest.raises(SessionNotFound):
        container.sessions.discard(session.session_id)
    assert len(container.sessions) == 0
