from abc import ABC, abstractmethod
from typing import Any, Optional, Union

from signtranslator.core.observation import RawObservation, ClassificationFailure


class IPoseClassifier(ABC):
    @abstractmethod
    def classify(self, frame: Any) -> Optional[Union[RawObservation, ClassificationFailure]]:
        """Return an observation, a failure, or None when no hand was found."""
        pass


class IStableTextSink(ABC):
    @abstractmethod
    def on_stable_text_changed(self, text: str):
        """Receives every publish, including repeats and empty strings ("hide output")."""
        pass
