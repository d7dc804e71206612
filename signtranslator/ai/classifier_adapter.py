import os
import logging
import numpy as np
from typing import Any, Callable, Dict, List, Optional, Tuple

from signtranslator.core.interfaces import IPoseClassifier
from signtranslator.core.observation import RawObservation
from signtranslator.paths import get_resource_path

logger = logging.getLogger(__name__)


def load_labels(labels_path: str) -> List[str]:
    """
    Read a labels file. One label per line, "0 ClassName" or just "ClassName".
    """
    path = get_resource_path(labels_path)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Labels file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        lines = [line.strip() for line in f.readlines()]
    labels = [line.split(" ", 1)[-1] for line in lines if line]
    logger.info(f"Loaded {len(labels)} labels from {path}")
    return labels


def _as_features(keypoints: Any) -> Optional[np.ndarray]:
    """Hand keypoints -> (1, N) float32 batch, or None when there is no hand."""
    if keypoints is None:
        return None
    features = np.asarray(keypoints, dtype=np.float32)
    if features.size == 0:
        return None
    return features.reshape(1, -1)


class ScoreVectorClassifier(IPoseClassifier):
    """
    Adapter for models that return one score per class.
    model(features) -> scores of shape (num_classes,) or (1, num_classes)
    """

    def __init__(self, model: Callable[[np.ndarray], Any], labels: List[str]):
        if not labels:
            raise ValueError("labels must not be empty")
        self.model = model
        self.labels = list(labels)

    def classify(self, keypoints: Any) -> RawObservation:
        features = _as_features(keypoints)
        if features is None:
            return RawObservation.absent()

        scores = np.asarray(self.model(features), dtype=np.float32).reshape(-1)
        if scores.shape[0] != len(self.labels):
            raise ValueError(
                f"Model returned {scores.shape[0]} scores for {len(self.labels)} labels"
            )

        index = int(np.argmax(scores))
        return RawObservation(label=self.labels[index], confidence=float(scores[index]))


class LabelProbabilityClassifier(IPoseClassifier):
    """
    Adapter for models that return (label, {label: probability}).
    Confidence is the probability of the returned label, 0.0 when it is missing.
    """

    def __init__(self, model: Callable[[np.ndarray], Tuple[str, Dict[str, float]]]):
        self.model = model

    def classify(self, keypoints: Any) -> RawObservation:
        features = _as_features(keypoints)
        if features is None:
            return RawObservation.absent()

        label, probabilities = self.model(features)
        if not label:
            return RawObservation.absent()
        confidence = float((probabilities or {}).get(label, 0.0))
        return RawObservation(label=label, confidence=confidence)
