"""
Text -> sign sequence

Design intent:
- Typed text becomes a list of sign characters (A-Z, 1-9; there is no sign for 0)
- The signs are shown one at a time on a cancellable timer
- Typing is debounced so only the latest text gets translated
"""
import logging
from typing import Callable, List, Optional

from signtranslator.core.clock import Scheduler, TimerHandle
from signtranslator.core.config_loader import SequencerConfig

logger = logging.getLogger(__name__)


def signs_for_text(text: str) -> List[str]:
    """Upper-case the text and keep the characters that have a sign."""
    return [
        ch for ch in text.upper()
        if ch.isalpha() or (ch.isdigit() and ch != "0")
    ]


class SignSequencer:
    """
    Steps through the signs of the last translated text.

    current_index is -1 before the first sign appears and after stop()/clear().
    When the animation finishes, current_index stays on the last sign.
    """

    def __init__(self, scheduler: Scheduler, config: Optional[SequencerConfig] = None,
                 on_change: Optional[Callable[[int], None]] = None):
        self.scheduler = scheduler
        self.config = config or SequencerConfig()
        self.on_change = on_change

        self.signs: List[str] = []
        self.current_index = -1
        self.is_animating = False
        self._task: Optional[TimerHandle] = None

    def translate(self, text: str):
        self.stop()
        self.signs = signs_for_text(text)
        self._set_index(-1)
        if self.signs:
            self.is_animating = True
            self._task = self.scheduler.call_later(self.config.initial_delay_seconds, self._show_first)
            logger.info(f"Translating {len(self.signs)} signs: {''.join(self.signs)}")

    def stop(self):
        """Cancel the running animation and hide the current sign."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self.is_animating = False
        self._set_index(-1)

    def clear(self):
        self.stop()
        self.signs = []

    @property
    def current_character(self) -> Optional[str]:
        if 0 <= self.current_index < len(self.signs):
            return self.signs[self.current_index]
        return None

    def _show_first(self):
        if not self.signs:
            return
        self._set_index(0)
        self._continue()

    def _step(self):
        self._set_index(self.current_index + 1)
        self._continue()

    def _continue(self):
        if self.current_index >= len(self.signs) - 1:
            self._task = None
            self.is_animating = False
            return
        self._task = self.scheduler.call_later(self.config.step_seconds, self._step)

    def _set_index(self, index: int):
        if index == self.current_index:
            return
        self.current_index = index
        if self.on_change is not None:
            self.on_change(index)


class TextInputDebouncer:
    """Translates the input only after it has been still for `delay` seconds."""

    def __init__(self, sequencer: SignSequencer, scheduler: Scheduler, delay: Optional[float] = None):
        self.sequencer = sequencer
        self.scheduler = scheduler
        self.delay = sequencer.config.input_debounce_seconds if delay is None else delay
        self.text = ""
        self._task: Optional[TimerHandle] = None

    def on_text_changed(self, text: str):
        self._cancel()
        self.text = text
        if not text:
            self.sequencer.clear()
            return
        self._task = self.scheduler.call_later(self.delay, self._translate)

    def clear_text(self):
        self._cancel()
        self.text = ""
        self.sequencer.clear()

    def _translate(self):
        self._task = None
        if not self.text.strip():
            self.sequencer.clear()
            return
        self.sequencer.translate(self.text)

    def _cancel(self):
        if self._task is not None:
            self._task.cancel()
            self._task = None
