"""
Frame gate

Design intent:
- The camera pushes frames much faster than classification can run
- Accept at most one frame per min_interval, and never while a classification is in flight
- Dropped frames are gone for good (no queue, no backpressure buffer)
"""
import threading
from contextlib import contextmanager


class FrameGate:
    """
    Rate limiter + busy flag in front of the classifier.
    try_accept() and release() may be called from different threads.
    """

    def __init__(self, min_interval: float = 0.1):
        """
        Args:
            min_interval: minimum seconds between two accepted frames (0.1 = 10 Hz ceiling)
        """
        if min_interval < 0:
            raise ValueError(f"min_interval must be >= 0, got {min_interval}")
        self.min_interval = min_interval

        self._lock = threading.Lock()
        self._last_accepted_time = float("-inf")
        self._busy = False

    def try_accept(self, now: float) -> bool:
        """Accept the frame at `now` or drop it. Never blocks."""
        with self._lock:
            if self._busy:
                return False
            if now - self._last_accepted_time < self.min_interval:
                return False
            self._last_accepted_time = now
            self._busy = True
            return True

    def release(self):
        """Call exactly once per accepted frame, on every completion path."""
        with self._lock:
            self._busy = False

    @contextmanager
    def admit(self, now: float):
        """
        with gate.admit(now) as accepted:
            if accepted: classify(...)

        An accepted frame is released when the block exits, whatever happens inside.
        Only for callers that classify on the thread that accepted the frame.
        RecognitionPipeline accepts on the camera thread and releases on its
        classify worker, so it pairs try_accept() and release() itself.
        """
        accepted = self.try_accept(now)
        try:
            yield accepted
        finally:
            if accepted:
                self.release()

    def reset(self):
        """
        Forget the rate-limit timestamp.
        busy is left alone: the in-flight classification still owns its release().
        """
        with self._lock:
            self._last_accepted_time = float("-inf")

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._busy

    @property
    def last_accepted_time(self) -> float:
        with self._lock:
            return self._last_accepted_time
