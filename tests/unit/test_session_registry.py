"""Tests for the live session registry."""

import pytest

from openinterviewer.core.config import interview_config
from openinterviewer.core.exceptions import SessionNotFoundError
from openinterviewer.domain.models.base import now_ms
from openinterviewer.services.session_registry import SessionRegistry


def test_add_get_remove(live_session):
    registry = SessionRegistry()
    registry.add(live_session)

    assert registry.get("session-1") is live_session
    assert "session-1" in registry
    assert len(registry) == 1

    registry.remove("session-1")
    assert "session-1" not in registry
    with pytest.raises(SessionNotFoundError):
        registry.get("session-1")


def test_one_lock_per_session(live_session):
    registry = SessionRegistry()
    registry.add(live_session)

    assert registry.lock_for("session-1") is registry.lock_for("session-1")
    with pytest.raises(SessionNotFoundError):
        registry.lock_for("other")


def test_idle_timeout_defaults_from_config():
    registry = SessionRegistry()

    expected = interview_config.limits.session_idle_timeout_seconds * 1000
    assert registry.idle_timeout_ms == expected


def test_idle_sessions_are_evicted(live_session):
    registry = SessionRegistry(idle_timeout_seconds=60)
    fresh = live_session.model_copy(update={"id": "session-2"})
    live_session.last_activity_at = now_ms() - 61_000
    registry.add(live_session)
    registry.add(fresh)

    assert "session-1" not in registry
    assert "session-2" in registry
    with pytest.raises(SessionNotFoundError):
        registry.lock_for("session-1")


def test_evict_idle_uses_given_clock(live_session):
    registry = SessionRegistry(idle_timeout_seconds=60)
    registry.add(live_session)
    now = live_session.last_activity_at

    assert registry.evict_idle(now=now + 60_000) == []
    assert registry.evict_idle(now=now + 60_001) == ["session-1"]
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_session_mid_turn_is_not_evicted(live_session):
    registry = SessionRegistry(idle_timeout_seconds=1)
    registry.add(live_session)

    async with registry.lock_for("session-1"):
        assert registry.evict_idle(now=now_ms() + 10_000) == []

    assert registry.evict_idle(now=now_ms() + 10_000) == ["session-1"]
