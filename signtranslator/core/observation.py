from dataclasses import dataclass
from typing import Optional, Union

EMPTY_TOKEN = ""


@dataclass(frozen=True)
class RawObservation:
    """
    One classification result for an accepted frame.
    label=None is the explicit "absent" variant (no hand, no pose).
    """
    label: Optional[str] = None
    confidence: float = 0.0

    @classmethod
    def absent(cls) -> "RawObservation":
        return cls(label=None, confidence=0.0)

    @property
    def is_absent(self) -> bool:
        return self.label is None


@dataclass(frozen=True)
class ClassificationFailure:
    """The classifier could not produce a result. Votes like an absent observation."""
    reason: str
    error: Optional[BaseException] = None


Outcome = Union[RawObservation, ClassificationFailure, None]


def vote_token(outcome: Outcome, minimum_confidence: float) -> str:
    """Normalize a classification outcome to the token stored in the vote window."""
    if outcome is None or isinstance(outcome, ClassificationFailure):
        return EMPTY_TOKEN
    if outcome.is_absent or outcome.confidence < minimum_confidence:
        return EMPTY_TOKEN
    return outcome.label
