import yaml
import os
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from signtranslator.paths import get_resource_path

DEFAULT_CONFIG_PATH = "config/translator_config.yml"

logger = logging.getLogger(__name__)


class ConfigLoader:
    _instance = None
    _config: Dict[str, Any] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigLoader, cls).__new__(cls)
            cls._instance.load()
        return cls._instance

    def load(self, relative_path: str = DEFAULT_CONFIG_PATH):
        """Read (or re-read) the YAML config. A missing or broken file falls back to defaults."""
        config_path = get_resource_path(relative_path)
        try:
            if os.path.exists(config_path):
                with open(config_path, "r", encoding="utf-8") as f:
                    self._config = yaml.safe_load(f) or {}
            else:
                logger.warning(f"Config file not found: {config_path}")
                self._config = {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config: {e}")
            self._config = {}
        return self._config

    @property
    def config(self) -> Dict[str, Any]:
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)


@dataclass(frozen=True)
class PipelineConfig:
    """Constructor-time constants of one recognition pipeline."""
    window_size: int = 10
    update_threshold_seconds: float = 0.5
    min_interval_seconds: float = 0.1
    minimum_confidence: float = 0.6

    def __post_init__(self):
        if self.window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {self.window_size}")
        if self.update_threshold_seconds < 0:
            raise ValueError(f"update_threshold_seconds must be >= 0, got {self.update_threshold_seconds}")
        if self.min_interval_seconds < 0:
            raise ValueError(f"min_interval_seconds must be >= 0, got {self.min_interval_seconds}")
        if not 0.0 <= self.minimum_confidence <= 1.0:
            raise ValueError(f"minimum_confidence must be in [0, 1], got {self.minimum_confidence}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PipelineConfig":
        data = data or {}
        return cls(
            window_size=int(data.get("window_size", cls.window_size)),
            update_threshold_seconds=float(data.get("update_threshold_seconds", cls.update_threshold_seconds)),
            min_interval_seconds=float(data.get("min_interval_seconds", cls.min_interval_seconds)),
            minimum_confidence=float(data.get("minimum_confidence", cls.minimum_confidence)),
        )


@dataclass(frozen=True)
class SequencerConfig:
    """Timing of the text-to-sign playback."""
    initial_delay_seconds: float = 0.1
    step_seconds: float = 1.2
    input_debounce_seconds: float = 0.5

    def __post_init__(self):
        for name in ("initial_delay_seconds", "step_seconds", "input_debounce_seconds"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SequencerConfig":
        data = data or {}
        return cls(
            initial_delay_seconds=float(data.get("initial_delay_seconds", cls.initial_delay_seconds)),
            step_seconds=float(data.get("step_seconds", cls.step_seconds)),
            input_debounce_seconds=float(data.get("input_debounce_seconds", cls.input_debounce_seconds)),
        )
