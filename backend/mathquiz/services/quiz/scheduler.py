import logging
import time
from typing import Any, Callable


logger = logging.getLogger(__name__)


class ScheduledTask:
    """Handle for one delayed callback.

    Cancelling marks the handle invalid; the callback is then never invoked,
    even if its worker is already sleeping.
    """

    def __init__(self, name: str = ''):
        self.name = name
        self.cancelled = False
        self.fired = False

    @property
    def live(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True

    def run(self, callback: Callable[..., Any], *args: Any) -> None:
        if not self.live:
            return
        self.fired = True
        try:
            callback(*args)
        except Exception:
            # One broken callback must not kill the worker or touch other sessions
            logger.exception(f"[task-error] task={self.name}")


class SocketIOScheduler:
    """Runs delayed callbacks as Flask-SocketIO background tasks.

    Uses socketio.sleep so the worker cooperates with eventlet/gevent when
    those async modes are active, and plain threads otherwise.
    """

    def __init__(self, socketio):
        self.socketio = socketio

    def time(self) -> float:
        return time.monotonic()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ScheduledTask:
        task = ScheduledTask(getattr(callback, '__name__', 'callback'))

        def _worker():
            self.socketio.sleep(delay)
            task.run(callback, *args)

        self.socketio.start_background_task(_worker)
        return task
