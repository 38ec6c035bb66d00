import logging
import random
import threading
from typing import Any, Callable, List, Optional

from mathquiz.models import Session

from .leaderboard import LeaderboardEntry, Winner, format_elapsed, rank, winners as top_winners
from .evaluator import AnswerEvaluator, Outcome, send_feedback
from .questions import generate_question_set
from .registry import SessionRegistry
from .settings import QuizSettings
from .timer import CountdownTimer


logger = logging.getLogger(__name__)

MAX_DISPLAY_NAME_LENGTH = 64


class QuizEngine:
    """Session lifecycle: join, answer, advance, finish, disconnect.

    Every entry point resolves the session by id and mutates it only while
    holding that session's lock, so socket handlers, timer ticks and delayed
    advances for one session never interleave. Work for different sessions
    may run in any order.
    """

    def __init__(self, channel, scheduler, settings: Optional[QuizSettings] = None, rng: Optional[random.Random] = None):
        self.channel = channel
        self.scheduler = scheduler
        self.settings = settings or QuizSettings()
        self.rng = rng or random.Random()
        self.registry = SessionRegistry()
        self.timer = CountdownTimer(scheduler, channel, guard=self._with_session, on_expire=self._on_time_up)
        self.evaluator = AnswerEvaluator(self.timer, channel, self.schedule_advance, self.settings)
        self._winners_shown = False
        self._winners_lock = threading.Lock()

    # ---- Entry points ----

    def connect(self, session_id: str) -> None:
        logger.info(f"[connect] session={session_id}")
        self.broadcast_leaderboard()

    def join(self, session_id: str, display_name: Optional[str] = None) -> Session:
        name = self._display_name(display_name)
        previous = self.registry.remove(session_id)
        if previous is not None:
            logger.info(f"[rejoin] session={session_id} restarting run")
            self._release(previous)

        session = Session(
            id=session_id,
            display_name=name,
            question_set=generate_question_set(self.settings.question_count, self.rng),
            started_at=self.scheduler.time(),
        )
        self.registry.add(session)
        logger.info(f"[join] session={session_id} name={name}")

        with session.lock:
            self._emit_question(session)
            self.timer.start(session, self.settings.question_time_limit_sec)
        self.broadcast_leaderboard()
        self.notify_winners()
        return session

    def submit_answer(self, session_id: str, question_id: Any, raw_answer: Any) -> Optional[Outcome]:
        return self._with_session(session_id, self.evaluator.submit, question_id, raw_answer)

    def advance(
        self, session_id: str, expected_index: Optional[int] = None, expected_session: Optional[Session] = None
    ) -> None:
        finished = self._with_session(session_id, self._advance, expected_index, expected=expected_session)
        if finished is None:
            return
        self.broadcast_leaderboard()
        if finished:
            self.notify_winners()

    def disconnect(self, session_id: str) -> None:
        session = self.registry.remove(session_id)
        logger.info(f"[disconnect] session={session_id} had_session={session is not None}")
        if session is not None:
            self._release(session)
        self.broadcast_leaderboard()
        self.notify_winners()

    # ---- Scheduling ----

    def schedule_advance(self, session: Session, delay_ms: int) -> None:
        self._cancel_pending(session)
        session.pending_advance = self.scheduler.call_later(
            delay_ms / 1000.0, self.advance, session.id, session.question_index, session
        )
        logger.info(f"[advance-set] session={session.id} question={session.question_index + 1} delay={delay_ms}ms")

    # ---- Projections ----

    def leaderboard(self) -> List[LeaderboardEntry]:
        return rank(self.registry.snapshot())

    def winners(self) -> List[Winner]:
        return top_winners(self.registry.snapshot(), self.settings.winner_count)

    def broadcast_leaderboard(self) -> None:
        entries = self.leaderboard()
        self.channel.broadcast_all('updateLeaderboard', [e.to_dict() for e in entries])
        self.channel.broadcast_all('playerCount', len(entries))

    def notify_winners(self) -> None:
        with self._winners_lock:
            top = self.winners()
            if not top and not self._winners_shown:
                return
            self._winners_shown = bool(top)
            self.channel.broadcast_all('winnerNotification', [w.to_dict() for w in top])

    # ---- Internals ----

    def _with_session(
        self, session_id: str, fn: Callable[..., Any], *args: Any, expected: Optional[Session] = None
    ) -> Any:
        """Run fn(session, *args) under the session lock if it is still live.

        With ``expected`` set, only that exact session object qualifies; a
        rejoin on the same connection id does not.
        """
        session = self.registry.get(session_id)
        if session is None:
            logger.info(f"[skip] session={session_id} not found for {fn.__name__}")
            return None
        with session.lock:
            if self.registry.get(session_id) is not session or (expected is not None and expected is not session):
                logger.info(f"[skip] session={session_id} removed before {fn.__name__}")
                return None
            if session.is_finished:
                logger.info(f"[skip] session={session_id} finished, ignoring {fn.__name__}")
                return None
            return fn(session, *args)

    def _advance(self, session: Session, expected_index: Optional[int]) -> Optional[bool]:
        if expected_index is not None and expected_index != session.question_index:
            logger.info(
                f"[advance-skip] session={session.id} expected={expected_index} actual={session.question_index}"
            )
            return None
        self._cancel_pending(session)
        self.timer.cancel(session)

        session.question_index += 1
        if session.question_index < session.total:
            logger.info(f"[advance] session={session.id} question={session.question_index + 1}/{session.total}")
            self._emit_question(session)
            self.timer.start(session, self.settings.question_time_limit_sec)
            return False

        session.finish(self.scheduler.time())
        logger.info(f"[finish] session={session.id} score={session.score} elapsed={session.elapsed_ms}ms")
        self.channel.unicast(session.id, 'gameOver', {
            'score': session.score,
            'totalTime': format_elapsed(session.elapsed_ms),
            'elapsedMs': session.elapsed_ms,
        })
        return True

    def _on_time_up(self, session: Session) -> None:
        question = session.current_question
        logger.info(f"[time-up] session={session.id} question={session.question_index + 1}")
        self.schedule_advance(session, self.settings.timeout_advance_delay_ms)
        send_feedback(self.channel, session.id, {
            'isCorrect': False,
            'reason': 'Time up!',
            'correctAnswer': question.expected_answer,
        })

    def _emit_question(self, session: Session) -> None:
        payload = session.current_question.to_public_dict(session.question_index + 1, session.total)
        self.channel.unicast(session.id, 'newQuestion', payload)

    def _cancel_pending(self, session: Session) -> None:
        if session.pending_advance is not None:
            session.pending_advance.cancel()
            session.pending_advance = None

    def _release(self, session: Session) -> None:
        with session.lock:
            self.timer.cancel(session)
            self._cancel_pending(session)

    def _display_name(self, display_name: Optional[str]) -> str:
        name = display_name.strip() if isinstance(display_name, str) else ''
        if not name:
            return f"Player {self.rng.randrange(1000)}"
        return name[:MAX_DISPLAY_NAME_LENGTH]
