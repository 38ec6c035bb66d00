import itertools
import random
import time
from typing import Optional, Tuple

from mathquiz.models import Question

QUESTION_POINTS = 10

_id_sequence = itertools.count(1)


def _next_question_id(slot: int) -> str:
    # Timestamp plus a process-wide sequence: unique across all sessions
    return f"{int(time.time() * 1000)}-{slot}-{next(_id_sequence)}"


def render_prompt(a: int, b: int, c: int) -> str:
    if a == 1:
        return f"X + {b} = {c}"
    return f"{a}X + {b} = {c}"


def generate_question(slot: int, rng: random.Random) -> Question:
    """Build one linear equation A*X + B = C whose answer is X."""
    a = rng.randint(1, 5)
    b = rng.randint(1, 10)
    x = rng.randint(1, 10)
    return Question(
        id=_next_question_id(slot),
        prompt=render_prompt(a, b, a * x + b),
        expected_answer=x,
        points=QUESTION_POINTS,
    )


def generate_question_set(count: int, rng: Optional[random.Random] = None) -> Tuple[Question, ...]:
    rng = rng or random.Random()
    return tuple(generate_question(slot, rng) for slot in range(count))
