import logging
from typing import Callable, Optional

from mathquiz.models import Session

from .scheduler import ScheduledTask


logger = logging.getLogger(__name__)

TICK_INTERVAL_SEC = 1.0


class Alarm:
    """Countdown state for one question of one session."""

    def __init__(self, session_id: str, seconds_left: int):
        self.session_id = session_id
        self.seconds_left = seconds_left
        self.cancelled = False
        self.task: Optional[ScheduledTask] = None

    def cancel(self) -> None:
        self.cancelled = True
        if self.task is not None:
            self.task.cancel()
            self.task = None


class CountdownTimer:
    """Owns the single per-session countdown alarm.

    Ticks do not touch sessions directly: each fire goes through ``guard``,
    which resolves the session id against the registry, takes the session
    lock and drops the tick if the session is gone or finished.
    """

    def __init__(
        self,
        scheduler,
        channel,
        guard: Callable[..., None],
        on_expire: Callable[[Session], None],
    ):
        self.scheduler = scheduler
        self.channel = channel
        self.guard = guard
        self.on_expire = on_expire

    def start(self, session: Session, duration_seconds: int = 60) -> Alarm:
        self.cancel(session)
        alarm = Alarm(session.id, duration_seconds)
        session.timer = alarm
        logger.info(f"[timer-start] session={session.id} question={session.question_index + 1} duration={duration_seconds}s")
        self._send_tick(alarm)
        self._schedule(alarm)
        return alarm

    def cancel(self, session: Session) -> bool:
        alarm = session.timer
        if alarm is None:
            return False
        alarm.cancel()
        session.timer = None
        logger.info(f"[timer-cancel] session={session.id} remaining={alarm.seconds_left}s")
        return True

    def _send_tick(self, alarm: Alarm) -> None:
        try:
            self.channel.unicast(alarm.session_id, 'updateTimer', {'secondsLeft': alarm.seconds_left})
        except Exception:
            logger.exception(f"[tick-error] session={alarm.session_id}")

    def _schedule(self, alarm: Alarm) -> None:
        alarm.task = self.scheduler.call_later(TICK_INTERVAL_SEC, self._fire, alarm)

    def _fire(self, alarm: Alarm) -> None:
        if alarm.cancelled:
            return
        self.guard(alarm.session_id, self._tick, alarm)

    def _tick(self, session: Session, alarm: Alarm) -> None:
        # Re-checked under the session lock; a cancel may have raced the fire
        if alarm.cancelled or session.timer is not alarm:
            return
        alarm.seconds_left -= 1
        self._send_tick(alarm)
        if alarm.seconds_left > 0:
            self._schedule(alarm)
            return
        self.cancel(session)
        self.on_expire(session)
