# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from pydantic import ValidationError

from nodeperson.breathing.canvas import WellnessCanvas, default_pattern, describe_canvas
from nodeperson.breathing.patterns import (
    ALL_PATTERNS,
    BreathingPattern,
    BreathingPhase,
    InvalidPatternError,
    UnknownPatternError,
    get_pattern,
    phases_offset,
)


class TestBreathingPatterns(unittest.TestCase):
    def test_cycle_and_total_duration(self) -> None:
        for pattern in ALL_PATTERNS:
            expected_cycle = (
                pattern.inhale_seconds
                + pattern.hold_seconds
                + pattern.exhale_seconds
                + pattern.hold_after_exhale_seconds
            )
            self.assertEqual(pattern.cycle_duration, expected_cycle)
            self.assertEqual(pattern.total_duration, expected_cycle * pattern.cycles)

    def test_presets(self) -> None:
        self.assertEqual([p.id for p in ALL_PATTERNS], ["box", "sleep478", "relaxed", "running", "wimhof"])
        box = get_pattern("box")
        self.assertEqual(box.cycle_duration, 16)
        self.assertEqual(box.total_duration, 128)
        self.assertEqual(get_pattern("running").total_duration, 100)
        with self.assertRaises(UnknownPatternError):
            get_pattern("nope")

    def test_patterns_are_immutable(self) -> None:
        box = get_pattern("box")
        with self.assertRaises(ValidationError):
            box.cycles = 3  # type: ignore[misc]

    def test_all_zero_pattern_is_rejected(self) -> None:
        empty = BreathingPattern(id="empty", name="Empty", cycles=3)
        with self.assertRaises(InvalidPatternError):
            empty.ensure_valid()
        self.assertIs(get_pattern("sleep478").ensure_valid(), get_pattern("sleep478"))

    def test_negative_durations_and_zero_cycles_fail_validation(self) -> None:
        with self.assertRaises(ValidationError):
            BreathingPattern(id="x", name="x", inhale_seconds=-1, exhale_seconds=2)
        with self.assertRaises(ValidationError):
            BreathingPattern(id="x", name="x", inhale_seconds=1, cycles=0)
        # Construction errors are ValueErrors, like InvalidPatternError.
        self.assertTrue(issubclass(ValidationError, ValueError))

    def test_phase_durations_and_offsets(self) -> None:
        sleep = get_pattern("sleep478")
        self.assertEqual(BreathingPhase.HOLD_AFTER_INHALE.duration(sleep), 7)
        self.assertEqual(BreathingPhase.HOLD_AFTER_EXHALE.duration(sleep), 0)
        self.assertEqual(phases_offset(BreathingPhase.INHALE, sleep), 0)
        self.assertEqual(phases_offset(BreathingPhase.EXHALE, sleep), 11)
        self.assertEqual(phases_offset(BreathingPhase.HOLD_AFTER_EXHALE, sleep), 19)

    def test_phase_labels(self) -> None:
        self.assertEqual(BreathingPhase.INHALE.label, "吸氣")
        self.assertEqual(BreathingPhase.HOLD_AFTER_EXHALE.english_label, "Rest")
        self.assertEqual(BreathingPhase("holdAfterInhale"), BreathingPhase.HOLD_AFTER_INHALE)


class TestWellnessCanvas(unittest.TestCase):
    def test_default_patterns(self) -> None:
        self.assertEqual(default_pattern(WellnessCanvas.FLOW_STATE).id, "box")
        self.assertEqual(default_pattern(WellnessCanvas.BETTER_SLEEP).id, "sleep478")
        self.assertEqual(default_pattern(WellnessCanvas.COMFORT_VISION).id, "relaxed")
        self.assertEqual(default_pattern(WellnessCanvas.ATHLETIC_PERFORMANCE).id, "running")
        self.assertEqual(default_pattern(WellnessCanvas.METABOLISM_REPAIR).id, "wimhof")

    def test_describe_canvas(self) -> None:
        info = describe_canvas(WellnessCanvas.COMFORT_VISION)
        self.assertEqual(info.subtitle, "Vision Pro Comfort")
        self.assertEqual(info.default_duration_seconds, 300)
        self.assertEqual(info.accent_color_hex, "#059669")
        self.assertEqual(len(info.benefits), 4)

    def test_parse(self) -> None:
        self.assertIs(WellnessCanvas.parse("betterSleep"), WellnessCanvas.BETTER_SLEEP)
        self.assertIsNone(WellnessCanvas.parse("unknown"))


if __name__ == "__main__":
    unittest.main()
