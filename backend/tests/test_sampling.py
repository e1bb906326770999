"""Gaze sampler tests against a scripted face detector."""

import asyncio
import unittest

from interview_coach.gaze import BoundingBox
from interview_coach.sampling import DetectionFrame, GazeSampler
from interview_coach.session import SessionAggregator

CENTERED = DetectionFrame(
    box=BoundingBox(x=270, y=190, width=100, height=100),
    frame_width=640,
    frame_height=480,
)
NO_FACE = DetectionFrame(box=None, frame_width=640, frame_height=480)


class ScriptedDetector:
    def __init__(self, frames, ready=True):
        self.frames = list(frames)
        self.ready = ready
        self.calls = 0

    async def detect(self):
        self.calls += 1
        frame = self.frames[min(self.calls, len(self.frames)) - 1]
        if isinstance(frame, Exception):
            raise frame
        return frame


class TestGazeSampler(unittest.TestCase):
    """Single ticks and the periodic loop."""

    def setUp(self):
        self.readings = []

    def test_sample_once_classifies(self):
        sampler = GazeSampler(ScriptedDetector([CENTERED]), self.readings.append, interval=0.01)
        reading = asyncio.run(sampler.sample_once())
        self.assertEqual(reading.score, 90)
        self.assertEqual(self.readings, [reading])

    def test_not_ready_skips_tick(self):
        detector = ScriptedDetector([CENTERED], ready=False)
        sampler = GazeSampler(detector, self.readings.append, interval=0.01)
        self.assertIsNone(asyncio.run(sampler.sample_once()))
        self.assertEqual(detector.calls, 0)
        self.assertEqual(self.readings, [])

    def test_detector_failure_is_logged_and_skipped(self):
        sampler = GazeSampler(ScriptedDetector([RuntimeError("camera gone")]), self.readings.append, interval=0.01)
        with self.assertLogs("interview.sampling", level="WARNING") as logs:
            self.assertIsNone(asyncio.run(sampler.sample_once()))
        self.assertIn("camera gone", logs.output[0])
        self.assertEqual(self.readings, [])

    def test_loop_feeds_aggregator_until_stopped(self):
        aggregator = SessionAggregator()
        aggregator.start()
        detector = ScriptedDetector([CENTERED, NO_FACE])
        sampler = GazeSampler(detector, aggregator.record_reading, interval=0.01)

        async def run():
            sampler.start()
            self.assertTrue(sampler.running)
            await asyncio.sleep(0.1)
            await sampler.stop()

        asyncio.run(run())
        self.assertFalse(sampler.running)
        self.assertGreaterEqual(len(aggregator.gaze_scores), 2)
        self.assertEqual(aggregator.gaze_scores[0], 90)
        self.assertEqual(aggregator.gaze_scores[1], 0)
        self.assertEqual(aggregator.face_detection_count, 1)

    def test_stop_before_start_is_noop(self):
        sampler = GazeSampler(ScriptedDetector([CENTERED]), self.readings.append, interval=0.01)
        asyncio.run(sampler.stop())
        self.assertFalse(sampler.running)

    def test_interval_must_be_positive(self):
        with self.assertRaises(ValueError):
            GazeSampler(ScriptedDetector([CENTERED]), self.readings.append, interval=0)


if __name__ == "__main__":
    unittest.main()
