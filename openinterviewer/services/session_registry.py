"""
In-memory registry of live interview sessions.

Each session gets its own asyncio.Lock so turns of one session never
overlap, while different sessions proceed concurrently. Live sessions are
never persisted; a process restart drops them, and sessions left idle past
the configured timeout are evicted whenever a new one is registered.
"""

import asyncio
from typing import Dict, List, Optional

import structlog

from openinterviewer.core.config import interview_config
from openinterviewer.core.exceptions import SessionNotFoundError
from openinterviewer.domain.models.base import now_ms
from openinterviewer.domain.models.session import InterviewSession

log = structlog.get_logger(__name__)


class SessionRegistry:
    """Live sessions keyed by id, each with a turn lock."""

    def __init__(self, idle_timeout_seconds: Optional[int] = None):
        """
        Args:
            idle_timeout_seconds: Inactivity after which a session is evicted
                (default: limits.session_idle_timeout_seconds)
        """
        if idle_timeout_seconds is None:
            idle_timeout_seconds = interview_config.limits.session_idle_timeout_seconds
        self.idle_timeout_ms = idle_timeout_seconds * 1000
        self._sessions: Dict[str, InterviewSession] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def add(self, session: InterviewSession) -> None:
        self.evict_idle()
        self._sessions[session.id] = session
        self._locks[session.id] = asyncio.Lock()
        log.debug("session_registered", session_id=session.id)

    def get(self, session_id: str) -> InterviewSession:
        """
        Raises:
            SessionNotFoundError: If no live session has this id
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    def lock_for(self, session_id: str) -> asyncio.Lock:
        self.get(session_id)
        return self._locks[session_id]

    def remove(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)
        self._locks.pop(session_id, None)
        log.debug("session_unregistered", session_id=session_id)

    def evict_idle(self, now: Optional[int] = None) -> List[str]:
        """
        Drop sessions whose last activity is older than the idle timeout.

        A session with a turn in progress is kept regardless of age.

        Returns:
            Ids of the evicted sessions
        """
        cutoff = (now if now is not None else now_ms()) - self.idle_timeout_ms
        stale = [
            session_id
            for session_id, session in self._sessions.items()
            if session.last_activity_at < cutoff and not self._locks[session_id].locked()
        ]
        for session_id in stale:
            self._sessions.pop(session_id)
            self._locks.pop(session_id)

        if stale:
            log.info(
                "idle_sessions_evicted",
                count=len(stale),
                remaining=len(self._sessions),
                idle_timeout_ms=self.idle_timeout_ms,
            )
        return stale

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
