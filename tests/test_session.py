"""Tests for the session context."""

import pytest

from groomer.session import SessionContext, SessionUser


def test_start_sets_auth_header():
    session = SessionContext()
    assert session.auth_headers() == {}
    session.start("abc", SessionUser(id=1, username="ana", role="ADMIN"))
    assert session.is_authenticated
    assert session.user.is_admin
    assert session.auth_headers() == {"Authorization": "Bearer abc"}


def test_start_rejects_empty_token():
    with pytest.raises(ValueError):
        SessionContext().start("  ")


def test_invalidate_notifies_listeners():
    session = SessionContext(token="abc")
    seen = []
    remove = session.on_invalidate(lambda s: seen.append(s.is_authenticated))
    session.invalidate()
    assert seen == [False]
    assert session.token is None

    remove()
    session.invalidate()
    assert seen == [False]


def test_close_clears_without_notifying():
    session = SessionContext(token="abc")
    seen = []
    session.on_invalidate(seen.append)
    session.close()
    assert not session.is_authenticated
    session.invalidate()
    assert seen == []
