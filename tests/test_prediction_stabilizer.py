import unittest
import random
import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from signtranslator.core.clock import ManualClock
from signtranslator.core.observation import ClassificationFailure, RawObservation
from signtranslator.core.prediction_stabilizer import PredictionStabilizer, majority_token


def obs(label, confidence=0.9):
    return RawObservation(label=label, confidence=confidence)


class RecordingDispatcher:
    def __init__(self):
        self.calls = []

    def submit(self, fn, *args):
        self.calls.append(args)
        fn(*args)


class TestMajorityToken(unittest.TestCase):
    def test_simple_majority(self):
        self.assertEqual(majority_token(["A", "A", "B"]), "A")

    def test_tie_goes_to_earliest_first_occurrence(self):
        self.assertEqual(majority_token(["A", "B", "A", "B"]), "A")
        self.assertEqual(majority_token(["B", "A", "A", "B"]), "B")
        self.assertEqual(majority_token(["", "A", "A", ""]), "")

    def test_empty_window(self):
        self.assertEqual(majority_token([]), "")


class TestPredictionStabilizer(unittest.TestCase):
    def setUp(self):
        self.clock = ManualClock()
        self.published = []
        self.stabilizer = PredictionStabilizer(publish=self.published.append, clock=self.clock)

    def feed(self, label, t, confidence=0.9):
        return self.stabilizer.ingest(obs(label, confidence), now=t)

    def test_history_never_exceeds_window(self):
        rng = random.Random(7)
        t = 0.0
        for _ in range(50):
            label = rng.choice(["A", "B", None])
            t += 0.1
            self.stabilizer.ingest(RawObservation(label=label, confidence=rng.random()), now=t)
            self.assertLessEqual(len(self.stabilizer.history), 10)
        self.assertEqual(len(self.stabilizer.history), 10)

    def test_eviction_is_fifo(self):
        stabilizer = PredictionStabilizer(publish=self.published.append, window_size=3, clock=self.clock)
        for label in ["A", "B", "C", "D"]:
            stabilizer.ingest(obs(label), now=0.0)
        self.assertEqual(stabilizer.history, ("B", "C", "D"))

    def test_unanimity_fast_path(self):
        for _ in range(10):
            self.feed("C", 0.0)
        # Published without any time passing
        self.assertEqual(self.published, ["C"])
        self.assertEqual(self.stabilizer.current_stable, "C")

    def test_single_outlier_does_not_flip(self):
        for i in range(9):
            self.feed("A", i * 0.1)
        self.feed("B", 0.9)

        self.assertEqual(self.stabilizer.majority(), "A")
        self.assertEqual(self.stabilizer.current_stable, "A")
        self.assertNotIn("B", self.published)

    def test_threshold_reconfirmation(self):
        self.feed("A", 0.0)
        self.assertEqual(self.published, ["A"])

        self.feed("A", 0.2)
        self.feed("A", 0.4)
        self.assertEqual(self.published, ["A"])

        # 0.6s since the last publish
        self.feed("A", 0.6)
        self.assertEqual(self.published, ["A", "A"])
        self.assertEqual(self.stabilizer.last_change_time, 0.6)

        self.feed("A", 0.8)
        self.assertEqual(self.published, ["A", "A"])
        self.feed("A", 1.2)
        self.assertEqual(self.published, ["A", "A", "A"])

    def test_ambiguous_change_waits_for_threshold(self):
        for _ in range(10):
            self.feed("A", 0.0)
        self.assertEqual(self.published, ["A"])

        # 5 B vs 5 A -> tie keeps A (re-confirmed once at t=1.0)
        for t in [1.0, 1.1, 1.2, 1.3, 1.4]:
            self.feed("B", t)
        self.assertEqual(self.stabilizer.current_stable, "A")
        self.assertEqual(self.published, ["A", "A"])

        # 6th B wins the window, but it is not unanimous -> no publish yet
        self.feed("B", 1.5)
        self.assertEqual(self.stabilizer.current_stable, "B")
        self.assertEqual(self.stabilizer.last_change_time, 1.5)
        self.assertEqual(self.published, ["A", "A"])

        self.feed("B", 1.7)
        self.assertEqual(self.published, ["A", "A"])

        self.feed("B", 2.1)
        self.assertEqual(self.published, ["A", "A", "B"])

    def test_fast_path_only_on_change(self):
        # A long stable run that later becomes unanimous again does not publish early
        stabilizer = PredictionStabilizer(publish=self.published.append, window_size=3, clock=self.clock)
        stabilizer.ingest(obs("A"), now=0.0)
        stabilizer.ingest(obs("B"), now=0.1)
        stabilizer.ingest(obs("A"), now=0.2)
        stabilizer.ingest(obs("A"), now=0.3)
        stabilizer.ingest(obs("A"), now=0.4)
        self.assertEqual(stabilizer.history, ("A", "A", "A"))
        self.assertEqual(self.published, ["A"])

    def test_low_confidence_votes_empty(self):
        self.feed("A", 0.0, confidence=0.59)
        self.assertEqual(self.stabilizer.history, ("",))
        self.feed("A", 0.1, confidence=0.6)
        self.assertEqual(self.stabilizer.history, ("", "A"))

    def test_absent_and_failure_vote_empty(self):
        self.stabilizer.ingest(RawObservation.absent(), now=0.0)
        self.stabilizer.ingest(ClassificationFailure(reason="model unavailable"), now=0.1)
        self.stabilizer.ingest(None, now=0.2)
        self.assertEqual(self.stabilizer.history, ("", "", ""))

    def test_empty_window_publishes_empty_string(self):
        stabilizer = PredictionStabilizer(publish=self.published.append, window_size=2, clock=self.clock)
        stabilizer.ingest(obs("A"), now=0.0)
        stabilizer.ingest(RawObservation.absent(), now=0.1)   # tie -> A kept
        stabilizer.ingest(RawObservation.absent(), now=0.2)   # unanimous "" -> published

        self.assertEqual(stabilizer.current_stable, "")
        self.assertEqual(self.published, ["A", ""])

        # Nothing recognized keeps being re-confirmed, not skipped
        stabilizer.ingest(RawObservation.absent(), now=0.8)
        self.assertEqual(self.published, ["A", "", ""])

    def test_reset_idempotence(self):
        for i in range(5):
            self.feed("A", i * 0.1)

        self.stabilizer.reset(now=5.0)
        once = (self.stabilizer.history, self.stabilizer.current_stable, self.stabilizer.last_change_time)
        self.stabilizer.reset(now=5.0)
        twice = (self.stabilizer.history, self.stabilizer.current_stable, self.stabilizer.last_change_time)

        self.assertEqual(once, twice)
        self.assertEqual(once, ((), "", 5.0))

    def test_late_ingest_after_reset_starts_fresh_window(self):
        for i in range(3):
            self.feed("A", i * 0.1)
        self.stabilizer.reset(now=1.0)
        self.feed("B", 1.0)

        self.assertEqual(self.stabilizer.history, ("B",))
        self.assertEqual(self.published[-1], "B")

    def test_reset_uses_clock_when_no_timestamp(self):
        self.clock.set(3.0)
        self.stabilizer.reset()
        self.assertEqual(self.stabilizer.last_change_time, 3.0)

    def test_publish_goes_through_dispatcher(self):
        dispatcher = RecordingDispatcher()
        stabilizer = PredictionStabilizer(publish=self.published.append, clock=self.clock, dispatcher=dispatcher)
        stabilizer.ingest(obs("A"), now=0.0)
        self.assertEqual(dispatcher.calls, [("A",)])
        self.assertEqual(self.published, ["A"])

    def test_invalid_window(self):
        with self.assertRaises(ValueError):
            PredictionStabilizer(publish=self.published.append, window_size=0)


if __name__ == '__main__':
    unittest.main()
