"""Leaderboard ranking and the winners banner.

Finished sessions always rank above sessions still in progress. Finished
sessions compare on score (desc) then elapsed time (asc); in-progress sessions
compare on score only. Python's sort is stable, so remaining ties keep the
registry's join order.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple

from mathquiz.models import Session


def format_elapsed(ms: int) -> str:
    """Render milliseconds as MM:SS.ff."""
    ms = max(0, int(ms))
    total_seconds, remainder = divmod(ms, 1000)
    minutes, seconds = divmod(total_seconds, 60)
    hundredths = f"{remainder:03d}"[:2]
    return f"{minutes:02d}:{seconds:02d}.{hundredths}"


def status_label(session: Session) -> str:
    if session.is_finished:
        return f"Finished ({format_elapsed(session.elapsed_ms or 0)})"
    return f"Q{session.question_index + 1}/{session.total}"


def sort_key(session: Session) -> Tuple[int, int, float]:
    if session.is_finished:
        return (0, -session.score, session.elapsed_ms or 0)
    return (1, -session.score, math.inf)


@dataclass(frozen=True)
class LeaderboardEntry:
    id: str
    display_name: str
    score: int
    status_label: str
    sort_key: Tuple[int, int, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'displayName': self.display_name,
            'score': self.score,
            'statusLabel': self.status_label,
        }


@dataclass(frozen=True)
class Winner:
    display_name: str
    score: int
    elapsed_ms: int

    @property
    def formatted_time(self) -> str:
        return format_elapsed(self.elapsed_ms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'displayName': self.display_name,
            'score': self.score,
            'formattedTime': self.formatted_time,
        }


def rank(sessions: Iterable[Session]) -> List[LeaderboardEntry]:
    entries = [
        LeaderboardEntry(
            id=s.id,
            display_name=s.display_name,
            score=s.score,
            status_label=status_label(s),
            sort_key=sort_key(s),
        )
        for s in sessions
    ]
    return sorted(entries, key=lambda e: e.sort_key)


def winners(sessions: Iterable[Session], limit: int = 3) -> List[Winner]:
    finished = [s for s in sessions if s.is_finished]
    finished.sort(key=lambda s: (-s.score, s.elapsed_ms or 0))
    return [
        Winner(display_name=s.display_name, score=s.score, elapsed_ms=s.elapsed_ms or 0)
        for s in finished[:limit]
    ]
