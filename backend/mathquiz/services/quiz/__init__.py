"""Quiz domain services: questions, timers, evaluation and ranking.

This package contains the session lifecycle engine. It is imported by the
socket handlers and HTTP routes, keeping transport concerns separated from
core game mechanics.
"""

from .engine import QuizEngine
from .settings import QuizSettings

__all__ = ['QuizEngine', 'QuizSettings']
