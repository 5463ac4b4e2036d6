"""
Countdown driver for ExamSession.

Streamlit reruns and terminal prompts don't fire once a second, so instead of a
timer thread the clock is polled: each `sync()` delivers one `tick()` per whole
second elapsed since the previous sync and carries the fraction over.
"""
import logging
import time
from typing import Callable

from ensayos.session import ExamSession

logger = logging.getLogger(__name__)


class SessionClock:
    def __init__(self, session: ExamSession, time_source: Callable[[], float] = time.monotonic):
        self.session = session
        self._time = time_source
        self._last = time_source()

    def restart(self) -> None:
        """Start counting from now, e.g. right after the session has started."""
        self._last = self._time()

    def sync(self) -> int:
        """Deliver pending ticks. Returns how many were delivered."""
        now = self._time()
        elapsed = int(now - self._last)
        if elapsed <= 0:
            return 0
        self._last += elapsed

        delivered = 0
        while delivered < elapsed and not self.session.is_finished:
            self.session.tick()
            delivered += 1
        if delivered > 1:
            logger.debug(f"Clock caught up {delivered} ticks for attempt {self.session.attempt_id}")
        return delivered


def format_remaining(seconds: int) -> str:
    """MM:SS, or H:MM:SS from one hour up."""
    seconds = max(0, int(seconds))
    h, rest = divmod(seconds, 3600)
    m, s = divmod(rest, 60)
    if h:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"
