"""
Prediction stabilizer

Design intent:
- Keep the last N vote tokens (label, or "" for nothing recognized)
- Majority vote over the window suppresses single noisy frames
- A new majority is published at once only if the window is unanimous;
  otherwise it has to hold until the next re-confirmation after update_threshold
- "" is a real stable value: the sink hides its output
"""
import logging
import threading
from collections import Counter, deque
from typing import Callable, Optional, Tuple

from signtranslator.core.clock import Clock, MonotonicClock
from signtranslator.core.dispatch import InlineDispatcher
from signtranslator.core.observation import EMPTY_TOKEN, Outcome, vote_token

logger = logging.getLogger(__name__)


def majority_token(tokens) -> str:
    """
    Most frequent token.
    Ties go to the tied token whose first occurrence in `tokens` is earliest.
    An empty sequence votes "".
    """
    counts = Counter(tokens)  # keys keep first-occurrence order
    if not counts:
        return EMPTY_TOKEN
    best = max(counts.values())
    return next(token for token, count in counts.items() if count == best)


class PredictionStabilizer:
    """
    Turns per-frame classification outcomes into debounced stable text.
    ingest() and reset() are serialized by an internal lock.
    """

    def __init__(
        self,
        publish: Callable[[str], None],
        window_size: int = 10,
        update_threshold: float = 0.5,
        minimum_confidence: float = 0.6,
        clock: Optional[Clock] = None,
        dispatcher=None
    ):
        """
        Args:
            publish: receives each published stable text (e.g. sink.on_stable_text_changed)
            window_size: number of votes in the sliding window
            update_threshold: seconds a stable value waits before it is re-published
            minimum_confidence: predictions below this vote ""
            clock: time source used when ingest()/reset() get no timestamp
            dispatcher: execution context for publish (inline by default)
        """
        if window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {window_size}")
        self.window_size = window_size
        self.update_threshold = update_threshold
        self.minimum_confidence = minimum_confidence
        self.clock = clock or MonotonicClock()
        self.dispatcher = dispatcher or InlineDispatcher()
        self._publish = publish

        self._lock = threading.Lock()
        self._history: deque = deque(maxlen=window_size)
        self._current_stable: str = EMPTY_TOKEN
        self._last_change_time: float = self.clock.now()

    def ingest(self, outcome: Outcome, now: Optional[float] = None) -> str:
        """
        Add one classification outcome and apply the publish rule.

        Returns:
            the current stable value after this ingest
        """
        if now is None:
            now = self.clock.now()
        token = vote_token(outcome, self.minimum_confidence)

        with self._lock:
            self._history.append(token)
            majority = majority_token(self._history)
            publish_value = None

            if majority == self._current_stable:
                # Periodic re-confirmation of an unchanged value
                if now - self._last_change_time >= self.update_threshold:
                    if majority != EMPTY_TOKEN or self._current_stable == EMPTY_TOKEN:
                        publish_value = majority
                        self._last_change_time = now
            else:
                self._current_stable = majority
                self._last_change_time = now
                # Unanimous window: trust it without waiting for the threshold
                if all(t == majority for t in self._history):
                    publish_value = majority

            logger.debug(f"vote={token!r} majority={majority!r} stable={self._current_stable!r}")
            current = self._current_stable

        if publish_value is not None:
            logger.info(f"Stable text -> {publish_value!r}")
            self.dispatcher.submit(self._publish, publish_value)
        return current

    def reset(self, now: Optional[float] = None):
        """Empty the window and go back to "" (camera stopped / input cleared)."""
        if now is None:
            now = self.clock.now()
        with self._lock:
            self._history.clear()
            self._current_stable = EMPTY_TOKEN
            self._last_change_time = now
        logger.info("Prediction stabilizer reset")

    def majority(self) -> str:
        with self._lock:
            return majority_token(self._history)

    @property
    def history(self) -> Tuple[str, ...]:
        with self._lock:
            return tuple(self._history)

    @property
    def current_stable(self) -> str:
        with self._lock:
            return self._current_stable

    @property
    def last_change_time(self) -> float:
        with self._lock:
            return self._last_change_time
