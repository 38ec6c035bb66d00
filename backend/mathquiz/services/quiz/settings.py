from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class QuizSettings:
    """Immutable engine configuration, usually built from the Flask config."""

    question_count: int = 10
    question_time_limit_sec: int = 60
    correct_advance_delay_ms: int = 1000
    incorrect_advance_delay_ms: int = 2000
    timeout_advance_delay_ms: int = 2000
    fault_advance_delay_ms: int = 3000
    winner_count: int = 3

    @staticmethod
    def from_config(config: Mapping[str, Any]) -> "QuizSettings":
        defaults = QuizSettings()
        return QuizSettings(
            question_count=int(config.get('QUESTION_COUNT', defaults.question_count)),
            question_time_limit_sec=int(config.get('QUESTION_TIME_LIMIT_SEC', defaults.question_time_limit_sec)),
            correct_advance_delay_ms=int(config.get('CORRECT_ADVANCE_DELAY_MS', defaults.correct_advance_delay_ms)),
            incorrect_advance_delay_ms=int(config.get('INCORRECT_ADVANCE_DELAY_MS', defaults.incorrect_advance_delay_ms)),
            timeout_advance_delay_ms=int(config.get('TIMEOUT_ADVANCE_DELAY_MS', defaults.timeout_advance_delay_ms)),
            fault_advance_delay_ms=int(config.get('FAULT_ADVANCE_DELAY_MS', defaults.fault_advance_delay_ms)),
            winner_count=int(config.get('WINNER_COUNT', defaults.winner_count)),
        )
