"""
progress.py

Cosmetic progress estimate shown while a check is being analyzed.

Gemini gives no progress information, so the bar just creeps forward
by a random step every 200 ms and stops at 95%. When the real call
finishes the caller snaps it to 100% with finish(). The timer thread
is always stopped when the `with` block exits, on success or failure.
"""

from typing import Callable, Optional
import random
import threading


class ProgressEstimator:
    """
    ProgressEstimator runs a background timer that reports a fake
    percentage through `on_update`.

    Usage:
        with ProgressEstimator(on_update=bar.update) as progress:
            result = analyzer.analyze(...)
            progress.finish()
    """

    def __init__(
        self,
        on_update: Callable[[float], None],
        interval: float = 0.2,
        max_step: float = 15.0,
        cap: float = 95.0,
        rng: Optional[random.Random] = None
    ):
        self.on_update = on_update
        self.interval = interval
        self.max_step = max_step
        self.cap = cap
        self.rng = rng or random.Random()

        self._value = 0.0
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def value(self) -> float:
        with self._lock:
            return self._value

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "ProgressEstimator":
        if self.running:
            return self
        self._stop.clear()
        self._thread = threading.Thread(target=self._tick, name="progress-estimator", daemon=True)
        self._thread.start()
        return self

    def _tick(self) -> None:
        while not self._stop.wait(self.interval):
            with self._lock:
                self._value = min(self.cap, self._value + self.rng.uniform(0, self.max_step))
                value = self._value
            self.on_update(value)
            if value >= self.cap:
                break

    def stop(self) -> None:
        """Cancel the timer. Safe to call more than once."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def finish(self) -> None:
        """Real work is done: stop the timer and jump to 100%."""
        self.stop()
        with self._lock:
            self._value = 100.0
        self.on_update(100.0)

    def __enter__(self) -> "ProgressEstimator":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
