import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional

from signtranslator.core.clock import Clock, MonotonicClock
from signtranslator.core.config_loader import PipelineConfig
from signtranslator.core.dispatch import DispatcherStopped, InlineDispatcher, SerialDispatcher
from signtranslator.core.frame_gate import FrameGate
from signtranslator.core.interfaces import IPoseClassifier, IStableTextSink
from signtranslator.core.observation import ClassificationFailure, Outcome, RawObservation
from signtranslator.core.prediction_stabilizer import PredictionStabilizer


@dataclass
class PipelineStats:
    accepted_frames: int = 0
    dropped_frames: int = 0
    observations: int = 0
    absent: int = 0
    failures: int = 0


class RecognitionPipeline:
    """
    Frame -> FrameGate -> classifier (classify context) -> PredictionStabilizer (ingest context) -> sink.

    Both contexts default to background SerialDispatchers; pass InlineDispatcher
    to run everything on the caller (tests, replays).
    """

    def __init__(
        self,
        classifier: IPoseClassifier,
        sink: IStableTextSink,
        config: Optional[PipelineConfig] = None,
        clock: Optional[Clock] = None,
        classify_dispatcher=None,
        ingest_dispatcher=None,
        sink_dispatcher=None
    ):
        self.logger = logging.getLogger(__name__)
        self.config = config or PipelineConfig()
        self.clock = clock or MonotonicClock()
        self.classifier = classifier
        self.sink = sink

        self.classify_dispatcher = classify_dispatcher or SerialDispatcher("classify")
        self.ingest_dispatcher = ingest_dispatcher or SerialDispatcher("ingest")

        self.gate = FrameGate(min_interval=self.config.min_interval_seconds)
        self.stabilizer = PredictionStabilizer(
            publish=sink.on_stable_text_changed,
            window_size=self.config.window_size,
            update_threshold=self.config.update_threshold_seconds,
            minimum_confidence=self.config.minimum_confidence,
            clock=self.clock,
            dispatcher=sink_dispatcher or InlineDispatcher()
        )

        self.stats = PipelineStats()
        self._stats_lock = threading.Lock()

    def start(self):
        self.ingest_dispatcher.start()
        self.classify_dispatcher.start()
        self.logger.info("Recognition pipeline started")

    def stop(self):
        """Let in-flight work finish, then stop the worker contexts."""
        self.classify_dispatcher.stop()
        self.ingest_dispatcher.stop()
        self.logger.info("Recognition pipeline stopped")

    def submit_frame(self, frame: Any, now: Optional[float] = None) -> bool:
        """
        Offer one camera frame.

        Returns:
            True if the frame was accepted for classification, False if dropped
        """
        if now is None:
            now = self.clock.now()
        if not self.gate.try_accept(now):
            self._count("dropped_frames")
            self.logger.debug(f"Frame dropped at t={now:.3f}")
            return False

        try:
            self.classify_dispatcher.submit(self._classify_and_handoff, frame)
        except DispatcherStopped:
            self.gate.release()
            self._count("dropped_frames")
            self.logger.debug(f"Frame dropped at t={now:.3f}: pipeline is stopped")
            return False
        except Exception:
            self.gate.release()
            raise
        self._count("accepted_frames")
        return True

    def clear(self, now: Optional[float] = None):
        """Camera stopped or input cleared: empty the window and show nothing."""
        if now is None:
            now = self.clock.now()
        self.gate.reset()
        self.stabilizer.reset(now)
        self.stabilizer.dispatcher.submit(self.sink.on_stable_text_changed, "")

    @property
    def stable_text(self) -> str:
        return self.stabilizer.current_stable

    def _classify_and_handoff(self, frame: Any):
        try:
            outcome = self._classify(frame)
            self.ingest_dispatcher.submit(self._ingest, outcome, self.clock.now())
        finally:
            self.gate.release()

    def _classify(self, frame: Any) -> Outcome:
        try:
            outcome = self.classifier.classify(frame)
        except Exception as e:
            self.logger.warning(f"Classification failed: {e}")
            outcome = ClassificationFailure(reason=str(e) or e.__class__.__name__, error=e)

        if isinstance(outcome, ClassificationFailure):
            if outcome.error is None:
                self.logger.warning(f"Classifier reported failure: {outcome.reason}")
            self._count("failures")
        elif outcome is None or (isinstance(outcome, RawObservation) and outcome.is_absent):
            self._count("absent")
        else:
            self._count("observations")
        return outcome

    def _ingest(self, outcome: Outcome, now: float):
        self.stabilizer.ingest(outcome, now)

    def _count(self, field_name: str):
        with self._stats_lock:
            setattr(self.stats, field_name, getattr(self.stats, field_name) + 1)
