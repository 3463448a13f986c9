"""Task ID generation."""

import logging
import threading
import time
from collections.abc import Callable
from datetime import datetime

from mdtask.constants import GENERATE_ID_SLEEP_SECONDS, ID_TIME_FORMAT, TASK_ID_PREFIX

logger = logging.getLogger(__name__)


class TaskIdGenerator:
    """
    Issues ``task/<YYYYMMDDHHMMSS>`` IDs, at most one per clock second.

    IDs have one-second resolution, so the generator remembers the timestamp
    it issued last. A request arriving within that same second blocks (via
    ``sleep``) until the clock moves on. The lock makes this hold across
    threads of one process; separate processes are not coordinated.

    Args:
        clock: Returns the current local time
        sleep: Blocks for the given number of seconds
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last_stamp = ""

    def generate(self) -> str:
        with self._lock:
            stamp = self._clock().strftime(ID_TIME_FORMAT)
            while stamp == self._last_stamp:
                logger.debug("ID %s already issued, waiting for the next second", stamp)
                self._sleep(GENERATE_ID_SLEEP_SECONDS)
                stamp = self._clock().strftime(ID_TIME_FORMAT)
            self._last_stamp = stamp
        return f"{TASK_ID_PREFIX}{stamp}"


# Shared by every repository that is not given its own generator.
default_generator = TaskIdGenerator()


def generate_task_id() -> str:
    return default_generator.generate()
