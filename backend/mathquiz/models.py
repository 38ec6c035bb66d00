import enum
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


class SessionStatus(str, enum.Enum):
    IN_PROGRESS = 'in_progress'
    FINISHED = 'finished'


@dataclass(frozen=True)
class Question:
    id: str
    prompt: str
    expected_answer: int
    points: int = 10

    def to_public_dict(self, index: int, total: int) -> Dict[str, Any]:
        """Payload for the newQuestion event. Never carries the answer."""
        return {
            'id': self.id,
            'text': self.prompt,
            'points': self.points,
            'index': index,
            'total': total,
        }


@dataclass(eq=False)
class Session:
    """One player's quiz run, keyed by the socket id of its connection."""

    id: str
    display_name: str
    question_set: Tuple[Question, ...]
    started_at: float
    score: int = 0
    question_index: int = 0
    status: SessionStatus = SessionStatus.IN_PROGRESS
    finished_at: Optional[float] = None
    elapsed_ms: Optional[int] = None
    # Live countdown alarm; None while finished or awaiting an advance
    timer: Optional[Any] = None
    # Scheduled advance task, set between feedback and the next question
    pending_advance: Optional[Any] = None
    lock: Any = field(default_factory=threading.RLock, repr=False)

    @property
    def total(self) -> int:
        return len(self.question_set)

    @property
    def is_finished(self) -> bool:
        return self.status == SessionStatus.FINISHED

    @property
    def current_question(self) -> Question:
        return self.question_set[self.question_index]

    def finish(self, now: float) -> None:
        if self.is_finished:
            return
        self.status = SessionStatus.FINISHED
        self.finished_at = now
        self.elapsed_ms = int(round((now - self.started_at) * 1000))
