import enum
import logging
import math
import re
from typing import Any, Callable, Dict, Optional

from mathquiz.models import Session

from .errors import ValidationError
from .settings import QuizSettings


logger = logging.getLogger(__name__)

_LEADING_INTEGER = re.compile(r'\s*([+-]?\d+)')


class Outcome(str, enum.Enum):
    CORRECT = 'correct'
    INCORRECT = 'incorrect'
    INVALID_INPUT = 'invalid_input'
    SERVER_FAULT = 'server_fault'


REASONS = {
    Outcome.INCORRECT: 'Incorrect.',
    Outcome.INVALID_INPUT: 'Invalid Input.',
    Outcome.SERVER_FAULT: 'Server Error.',
}


def parse_answer(raw_answer: Any) -> int:
    """Read the leading integer of a submitted answer.

    Strings are read like a base-10 parseInt: "7", " 7 ", "7.5" and "7abc"
    all give 7. Floats are truncated toward zero.
    """
    if isinstance(raw_answer, bool):
        raise ValidationError(raw_answer)
    if isinstance(raw_answer, int):
        return raw_answer
    if isinstance(raw_answer, float):
        if not math.isfinite(raw_answer):
            raise ValidationError(raw_answer)
        return int(raw_answer)
    if isinstance(raw_answer, str):
        match = _LEADING_INTEGER.match(raw_answer)
        if match is None:
            raise ValidationError(raw_answer)
        return int(match.group(1))
    raise ValidationError(raw_answer)


def send_feedback(channel, session_id: str, payload: Dict[str, Any]) -> None:
    """Unicast answerFeedback; a transport error is logged, never raised."""
    try:
        channel.unicast(session_id, 'answerFeedback', payload)
    except Exception:
        logger.exception(f"[feedback-error] session={session_id}")


def _same_question(submitted_id: Any, question_id: str) -> bool:
    if submitted_id is None:
        return False
    return str(submitted_id) == question_id


class AnswerEvaluator:
    """Scores a submission against the session's current question.

    The caller holds the session lock and has checked that the session is
    registered and in progress.
    """

    def __init__(
        self,
        timer,
        channel,
        schedule_advance: Callable[[Session, int], None],
        settings: QuizSettings,
    ):
        self.timer = timer
        self.channel = channel
        self.schedule_advance = schedule_advance
        self.settings = settings

    def delay_for(self, outcome: Outcome) -> int:
        if outcome == Outcome.CORRECT:
            return self.settings.correct_advance_delay_ms
        if outcome == Outcome.SERVER_FAULT:
            return self.settings.fault_advance_delay_ms
        return self.settings.incorrect_advance_delay_ms

    def submit(self, session: Session, question_id: Any, raw_answer: Any) -> Optional[Outcome]:
        if session.pending_advance is not None:
            logger.info(f"[answer-skip] session={session.id} already answered question={session.question_index + 1}")
            return None

        # Stop the clock first so a timeout cannot fire after this answer
        self.timer.cancel(session)

        correct_answer = None
        try:
            question = session.current_question
            correct_answer = question.expected_answer
            try:
                answer = parse_answer(raw_answer)
            except ValidationError as exc:
                logger.info(f"[validation] session={session.id} {exc}")
                outcome = Outcome.INVALID_INPUT
            else:
                if _same_question(question_id, question.id) and answer == question.expected_answer:
                    outcome = Outcome.CORRECT
                    session.score += question.points
                else:
                    outcome = Outcome.INCORRECT
                logger.info(
                    f"[answer] session={session.id} name={session.display_name} q={question.prompt!r} "
                    f"submitted={answer} expected={question.expected_answer} result={outcome.value}"
                )
        except Exception:
            logger.exception(f"[evaluate-fault] session={session.id} question={session.question_index + 1}")
            outcome = Outcome.SERVER_FAULT

        # The advance is booked before feedback goes out; the send may fail
        self.schedule_advance(session, self.delay_for(outcome))
        send_feedback(self.channel, session.id, self._feedback(outcome, correct_answer))
        return outcome

    @staticmethod
    def _feedback(outcome: Outcome, correct_answer: Optional[int]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            'isCorrect': outcome == Outcome.CORRECT,
            'correctAnswer': correct_answer,
        }
        if outcome in REASONS:
            payload['reason'] = REASONS[outcome]
        return payload
