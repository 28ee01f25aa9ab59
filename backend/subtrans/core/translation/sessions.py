"""Transient pipeline sessions.

A session is the advisory, in-memory view of one running or finished job.
It is never trusted across process restarts; the cache record is.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol

from subtrans.models.database.enums import SessionStatus

from .models.context import ContentKey, Progress


@dataclass
class PipelineSession:
    """State of one job as seen by observers."""

    key: ContentKey
    status: SessionStatus = SessionStatus.IDLE
    progress: Progress = field(default_factory=Progress)
    translations: Dict[str, str] = field(default_factory=dict)
    cancelled: bool = False
    error_message: Optional[str] = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def session_id(self) -> str:
        return self.key.cache_key

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.LOADING

    def to_event(self) -> dict:
        """Snapshot broadcast to progress subscribers."""
        return {
            "session_id": self.session_id,
            "status": self.status.value,
            "current": self.progress.current,
            "total": self.progress.total,
            "percent": self.progress.percent,
            "translated": len(self.translations),
            "error_message": self.error_message,
        }


class SessionRegistry(Protocol):
    """Storage for sessions keyed by session id."""

    def get(self, session_id: str) -> Optional[PipelineSession]:
        ...

    def set(self, session: PipelineSession) -> None:
        ...

    def remove(self, session_id: str) -> None:
        ...

    def active(self) -> List[PipelineSession]:
        ...

    def all(self) -> List[PipelineSession]:
        ...


class InMemorySessionRegistry:
    """Process-local session registry."""

    def __init__(self):
        self._sessions: Dict[str, PipelineSession] = {}

    def get(self, session_id: str) -> Optional[PipelineSession]:
        return self._sessions.get(session_id)

    def set(self, session: PipelineSession) -> None:
        self._sessions[session.session_id] = session

    def remove(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def active(self) -> List[PipelineSession]:
        return [s for s in self._sessions.values() if s.is_active]

    def all(self) -> List[PipelineSession]:
        return list(self._sessions.values())
