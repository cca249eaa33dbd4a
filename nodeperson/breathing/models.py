# -*- coding: utf-8 -*-
"""Breathing domain: Pydantic models for snapshots and control payloads."""

from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .canvas import CanvasInfo
from .patterns import BreathingPattern, BreathingPhase


class SessionState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    PAUSED = "paused"


class BreathingSnapshot(BaseModel):
    """Read-only view of the engine, one per tick, for renderers."""

    model_config = ConfigDict(frozen=True)

    state: SessionState
    canvas: str
    pattern_id: str
    pattern_name: str
    phase: BreathingPhase
    phase_label: str
    phase_english_label: str
    phase_progress: float = Field(..., ge=0, le=1)
    overall_progress: float = Field(..., ge=0, le=1)
    current_cycle: int
    total_cycles: int
    cycle_label: str
    elapsed_seconds: float
    elapsed_formatted: str
    phase_duration_formatted: str
    breathing_scale: float = Field(..., ge=0.5, le=1.0)
    is_active: bool
    is_paused: bool


class StartSessionRequest(BaseModel):
    pattern_id: Optional[str] = Field(None, description="preset id; defaults to the canvas pattern")
    canvas: Optional[str] = Field(None, description="canvas id to select before starting")


class SelectCanvasRequest(BaseModel):
    canvas: str


ControlAction = Literal["start", "pause", "resume", "stop", "toggle"]


class ControlMessage(BaseModel):
    action: ControlAction
    pattern_id: Optional[str] = None
    canvas: Optional[str] = None


class PatternListResponse(BaseModel):
    items: List[BreathingPattern]


class CanvasListResponse(BaseModel):
    items: List[CanvasInfo]
