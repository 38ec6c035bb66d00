import threading
from typing import Dict, List, Optional

from mathquiz.models import Session


class SessionRegistry:
    """Owns all live sessions, keyed by connection id.

    Iteration follows join order, which is the tie-break order of the
    leaderboard. Never take a session lock while holding the registry lock.
    """

    def __init__(self):
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def add(self, session: Session) -> Optional[Session]:
        """Insert a session, returning the one it replaced if any."""
        with self._lock:
            previous = self._sessions.pop(session.id, None)
            self._sessions[session.id] = session
            return previous

    def get(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(session_id)

    def remove(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.pop(session_id, None)

    def snapshot(self) -> List[Session]:
        with self._lock:
            return list(self._sessions.values())

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
