# -*- coding: utf-8 -*-
"""
Sign Translator - command line entry point

Replays a recorded observation log through the recognition pipeline on
synthetic time, or prints the sign sequence of a text. Useful for tuning
window_size / thresholds without a camera.
"""
import argparse
import logging
import os
import sys
from typing import Any, Dict, List, Optional

import yaml

from signtranslator.core.clock import ManualClock, ManualScheduler
from signtranslator.core.config_loader import ConfigLoader, PipelineConfig, SequencerConfig
from signtranslator.core.dispatch import InlineDispatcher
from signtranslator.core.interfaces import IPoseClassifier, IStableTextSink
from signtranslator.core.observation import ClassificationFailure, RawObservation
from signtranslator.core.recognition_pipeline import RecognitionPipeline
from signtranslator.core.sign_sequencer import SignSequencer
from signtranslator.ui.sign_images import SignImageLibrary

logger = logging.getLogger(__name__)


def setup_logging(log_conf: Optional[Dict[str, Any]] = None, verbose: bool = False):
    log_conf = log_conf or {}
    level = logging.DEBUG if verbose else getattr(logging, str(log_conf.get("level", "INFO")).upper(), logging.INFO)
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_conf.get("file"):
        handlers.append(logging.FileHandler(log_conf["file"], encoding="utf-8"))
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
        force=True
    )


class ReplayClassifier(IPoseClassifier):
    """Each "frame" is one entry of the observation log."""

    def classify(self, frame: Dict[str, Any]):
        if frame.get("error"):
            return ClassificationFailure(reason=str(frame["error"]))
        label = frame.get("label")
        if label is None:
            return RawObservation.absent()
        return RawObservation(label=str(label), confidence=float(frame.get("confidence", 1.0)))


class PrintSink(IStableTextSink):
    def __init__(self, clock, out=None):
        self.clock = clock
        self.out = out or sys.stdout

    def on_stable_text_changed(self, text: str):
        shown = text if text else "<hidden>"
        print(f"{self.clock.now():8.3f}s  {shown}", file=self.out)


def load_observation_log(path: str) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        entries = yaml.safe_load(f) or []
    if not isinstance(entries, list):
        raise ValueError(f"{path}: expected a list of observations")
    return sorted(entries, key=lambda e: float(e.get("t", 0.0)))


def replay(entries: List[Dict[str, Any]], config: PipelineConfig, out=None) -> RecognitionPipeline:
    clock = ManualClock()
    pipeline = RecognitionPipeline(
        classifier=ReplayClassifier(),
        sink=PrintSink(clock, out),
        config=config,
        clock=clock,
        classify_dispatcher=InlineDispatcher(),
        ingest_dispatcher=InlineDispatcher()
    )
    for entry in entries:
        clock.set(float(entry.get("t", clock.now())))
        if entry.get("clear"):
            pipeline.clear()
            continue
        pipeline.submit_frame(entry)

    s = pipeline.stats
    logger.info(
        f"Replay done: accepted={s.accepted_frames} dropped={s.dropped_frames} "
        f"observations={s.observations} absent={s.absent} failures={s.failures}"
    )
    return pipeline


def play_text(text: str, config: SequencerConfig, library: Optional[SignImageLibrary] = None, out=None):
    out = out or sys.stdout
    library = library or SignImageLibrary()
    scheduler = ManualScheduler()
    sequencer = SignSequencer(scheduler, config)

    def on_change(index):
        if index < 0:
            return
        character = sequencer.signs[index]
        source = library.image_path(character) if library.has_image(character) else "(placeholder)"
        print(f"{scheduler.clock.now():8.3f}s  {source}  {character}", file=out)

    sequencer.on_change = on_change
    sequencer.translate(text)
    while sequencer.is_animating:
        scheduler.advance(config.step_seconds)
    return sequencer


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Sign Translator recognition core")
    parser.add_argument("--replay", help="YAML observation log to replay through the pipeline")
    parser.add_argument("--text", help="print the sign sequence of TEXT")
    parser.add_argument("--config", help="config file (relative to resources/ or absolute)")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    loader = ConfigLoader()
    if args.config:
        loader.load(args.config)
    setup_logging(loader.get("logging", {}), args.verbose)

    if not args.replay and args.text is None:
        parser.print_help()
        return 1

    try:
        if args.replay:
            if not os.path.exists(args.replay):
                logger.error(f"Observation log not found: {args.replay}")
                return 1
            replay(load_observation_log(args.replay), PipelineConfig.from_dict(loader.get("recognition", {})))
        if args.text is not None:
            signs_conf = loader.get("signs", {}) or {}
            library = SignImageLibrary(
                image_dir=signs_conf.get("image_dir", "signs"),
                size=tuple(signs_conf.get("image_size", (200, 200)))
            )
            play_text(args.text, SequencerConfig.from_dict(loader.get("sequencer", {})), library)
    except (ValueError, yaml.YAMLError) as e:
        logger.error(f"{e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
