# -*- coding: utf-8 -*-
"""
呼吸模式

Breathing techniques with four timed phases, plus the fixed preset list.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, computed_field


class InvalidPatternError(ValueError):
    """Raised when a pattern cannot drive a bounded session."""


class UnknownPatternError(KeyError):
    """Raised when a preset identifier is not in the preset list."""


class BreathingPattern(BaseModel):
    """A breathing technique with timed phases. Any phase may be zero to skip it."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    name_zh: str = ""
    inhale_seconds: float = Field(0.0, ge=0)
    hold_seconds: float = Field(0.0, ge=0)
    exhale_seconds: float = Field(0.0, ge=0)
    hold_after_exhale_seconds: float = Field(0.0, ge=0)
    cycles: int = Field(1, ge=1)
    description: str = ""

    @computed_field  # type: ignore[misc]
    @property
    def cycle_duration(self) -> float:
        """Total duration of one cycle"""
        return (
            self.inhale_seconds
            + self.hold_seconds
            + self.exhale_seconds
            + self.hold_after_exhale_seconds
        )

    @computed_field  # type: ignore[misc]
    @property
    def total_duration(self) -> float:
        """Total duration for all cycles"""
        return self.cycle_duration * self.cycles

    def ensure_valid(self) -> "BreathingPattern":
        if self.cycle_duration <= 0:
            raise InvalidPatternError(
                f"Pattern {self.id!r} has no timed phase; all four durations are zero"
            )
        return self


class BreathingPhase(str, Enum):
    """Phase of a breathing cycle, in cycle order."""

    INHALE = "inhale"
    HOLD_AFTER_INHALE = "holdAfterInhale"
    EXHALE = "exhale"
    HOLD_AFTER_EXHALE = "holdAfterExhale"

    @property
    def label(self) -> str:
        return _PHASE_LABELS[self]

    @property
    def english_label(self) -> str:
        return _PHASE_ENGLISH_LABELS[self]

    def duration(self, pattern: BreathingPattern) -> float:
        """Duration for this phase given a breathing pattern"""
        if self is BreathingPhase.INHALE:
            return pattern.inhale_seconds
        if self is BreathingPhase.HOLD_AFTER_INHALE:
            return pattern.hold_seconds
        if self is BreathingPhase.EXHALE:
            return pattern.exhale_seconds
        return pattern.hold_after_exhale_seconds


PHASE_ORDER: List[BreathingPhase] = list(BreathingPhase)

_PHASE_LABELS = {
    BreathingPhase.INHALE: "吸氣",
    BreathingPhase.HOLD_AFTER_INHALE: "屏息",
    BreathingPhase.EXHALE: "吐氣",
    BreathingPhase.HOLD_AFTER_EXHALE: "靜止",
}

_PHASE_ENGLISH_LABELS = {
    BreathingPhase.INHALE: "Inhale",
    BreathingPhase.HOLD_AFTER_INHALE: "Hold",
    BreathingPhase.EXHALE: "Exhale",
    BreathingPhase.HOLD_AFTER_EXHALE: "Rest",
}


def phases_offset(phase: BreathingPhase, pattern: BreathingPattern) -> float:
    """Seconds spent in the phases preceding ``phase`` within one cycle."""
    offset = 0.0
    for p in PHASE_ORDER:
        if p is phase:
            break
        offset += p.duration(pattern)
    return offset


# ---- Presets ----

# Equal phase breathing, used for focus work.
BOX_BREATHING = BreathingPattern(
    id="box",
    name="Box Breathing",
    name_zh="方塊呼吸法",
    inhale_seconds=4,
    hold_seconds=4,
    exhale_seconds=4,
    hold_after_exhale_seconds=4,
    cycles=8,
    description="Equal phase breathing for deep focus and calm.",
)

SLEEP_BREATHING_478 = BreathingPattern(
    id="sleep478",
    name="4-7-8 Sleep Breathing",
    name_zh="4-7-8 助眠呼吸法",
    inhale_seconds=4,
    hold_seconds=7,
    exhale_seconds=8,
    hold_after_exhale_seconds=0,
    cycles=6,
    description="Extended exhale activates parasympathetic nervous system for sleep.",
)

RELAXED_BREATHING = BreathingPattern(
    id="relaxed",
    name="Relaxed Breathing",
    name_zh="放鬆呼吸",
    inhale_seconds=4,
    hold_seconds=2,
    exhale_seconds=6,
    hold_after_exhale_seconds=0,
    cycles=10,
    description="Long exhale for relaxation and eye relief.",
)

# 3-step inhale, 2-step exhale, synced with footstrike.
RUNNING_CADENCE = BreathingPattern(
    id="running",
    name="Running Cadence",
    name_zh="跑步節奏呼吸",
    inhale_seconds=3,
    hold_seconds=0,
    exhale_seconds=2,
    hold_after_exhale_seconds=0,
    cycles=20,
    description="3-step inhale, 2-step exhale for sustained running.",
)

POWER_BREATHING = BreathingPattern(
    id="wimhof",
    name="Power Breathing",
    name_zh="力量呼吸法",
    inhale_seconds=2,
    hold_seconds=0,
    exhale_seconds=2,
    hold_after_exhale_seconds=0,
    cycles=30,
    description="Rapid deep breathing to boost metabolism and recovery.",
)

ALL_PATTERNS: List[BreathingPattern] = [
    BOX_BREATHING,
    SLEEP_BREATHING_478,
    RELAXED_BREATHING,
    RUNNING_CADENCE,
    POWER_BREATHING,
]

_PATTERNS_BY_ID: Dict[str, BreathingPattern] = {p.id: p for p in ALL_PATTERNS}


def get_pattern(pattern_id: str) -> BreathingPattern:
    try:
        return _PATTERNS_BY_ID[pattern_id]
    except KeyError:
        raise UnknownPatternError(pattern_id) from None
