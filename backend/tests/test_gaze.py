"""
Gaze classifier tests.

Frames are 640x480, so the center tolerance is 96px horizontally and 72px
vertically.
"""

import unittest

from interview_coach.gaze import BoundingBox, classify_gaze

FRAME_W = 640
FRAME_H = 480


def box_centered_at(cx, cy, size=100):
    return BoundingBox(x=cx - size / 2, y=cy - size / 2, width=size, height=size)


class TestClassifyGaze(unittest.TestCase):
    """Discrete score bands for face position relative to frame center."""

    def test_centered_face_scores_90(self):
        """A face dead center lands in the tightest band."""
        reading = classify_gaze(box_centered_at(320, 240), FRAME_W, FRAME_H)
        self.assertEqual(reading.score, 90)
        self.assertTrue(reading.face_detected)

    def test_within_tolerance_scores_75(self):
        """Offset of 60px is past half tolerance but inside full tolerance."""
        reading = classify_gaze(box_centered_at(380, 240), FRAME_W, FRAME_H)
        self.assertEqual(reading.score, 75)

    def test_within_one_and_half_tolerance_scores_60(self):
        reading = classify_gaze(box_centered_at(440, 240), FRAME_W, FRAME_H)
        self.assertEqual(reading.score, 60)

    def test_far_off_center_scores_40(self):
        reading = classify_gaze(box_centered_at(520, 240), FRAME_W, FRAME_H)
        self.assertEqual(reading.score, 40)

    def test_vertical_offset_alone_drops_band(self):
        """dy of 50px exceeds half of the 72px vertical tolerance."""
        reading = classify_gaze(box_centered_at(320, 290), FRAME_W, FRAME_H)
        self.assertEqual(reading.score, 75)

    def test_band_edges_are_exclusive(self):
        """dx equal to half tolerance (48px) is not inside the tightest band."""
        reading = classify_gaze(box_centered_at(368, 240), FRAME_W, FRAME_H)
        self.assertEqual(reading.score, 75)

    def test_no_face_scores_zero(self):
        reading = classify_gaze(None, FRAME_W, FRAME_H)
        self.assertEqual(reading.score, 0)
        self.assertFalse(reading.face_detected)

    def test_invalid_frame_size_raises(self):
        with self.assertRaises(ValueError):
            classify_gaze(box_centered_at(0, 0), 0, FRAME_H)

    def test_monotonic_in_normalized_offset(self):
        """Moving the face further from center never raises the score."""
        previous = None
        for step in range(0, 300, 4):
            reading = classify_gaze(box_centered_at(320 + step, 240 + step * 0.75), FRAME_W, FRAME_H)
            if previous is not None:
                self.assertLessEqual(reading.score, previous)
            previous = reading.score
        self.assertEqual(previous, 40)

    def test_scores_stay_in_range(self):
        for cx in (-1000, 0, 320, 640, 5000):
            reading = classify_gaze(box_centered_at(cx, 240), FRAME_W, FRAME_H)
            self.assertGreaterEqual(reading.score, 0)
            self.assertLessEqual(reading.score, 100)


if __name__ == "__main__":
    unittest.main()
