"""Run control: cooperative cancel / pause / resume for an optimization run."""

import logging
import threading

logger = logging.getLogger(__name__)


class RunControl:
    """Command channel between a caller and a running optimizer.

    The optimizer calls checkpoint() once per generation. Cancellation is
    seen at the next checkpoint; a pause blocks the optimizer thread at the
    checkpoint until resume() or cancel() is called.
    """

    def __init__(self):
        self._cancelled = threading.Event()
        self._running = threading.Event()
        self._running.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def paused(self) -> bool:
        return not self._running.is_set()

    def cancel(self) -> None:
        self._cancelled.set()
        # Wake a paused optimizer so it can observe the cancellation
        self._running.set()

    def pause(self) -> None:
        if not self.cancelled:
            self._running.clear()

    def resume(self) -> None:
        self._running.set()

    def checkpoint(self, poll_interval: float = 0.1) -> bool:
        """Block while paused.

        Returns:
            True if the run should continue, False if it was cancelled
        """
        if self.paused:
            logger.info("Optimization paused")
            while not self._running.wait(timeout=poll_interval):
                pass
            if not self.cancelled:
                logger.info("Optimization resumed")
        return not self.cancelled
