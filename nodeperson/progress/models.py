# -*- coding: utf-8 -*-
"""Wellness progress: Pydantic models."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional, Set
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field, field_serializer


def day_key(day: date) -> str:
    return day.isoformat()


class WellnessSession(BaseModel):
    """A recorded wellness session."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    canvas: str = Field(..., description="canvas identifier, or the pattern id when no canvas applies")
    pattern_id: str
    started_at: datetime = Field(default_factory=datetime.now)
    duration: float = Field(0.0, ge=0, description="seconds")
    completed_cycles: int = Field(0, ge=0)
    is_completed: bool = False


class WellnessDailyProgress(BaseModel):
    """Daily wellness progress snapshot."""

    date: str = Field(..., description="YYYY-MM-DD")
    sessions_completed: int = Field(0, ge=0)
    total_minutes: float = Field(0.0, ge=0)
    canvases_used: Set[str] = Field(default_factory=set)

    @computed_field  # type: ignore[misc]
    @property
    def canvas_count(self) -> int:
        return len(self.canvases_used)

    @field_serializer("canvases_used")
    def _serialize_canvases(self, value: Set[str]) -> List[str]:
        return sorted(value)

    @classmethod
    def empty(cls, day: date) -> "WellnessDailyProgress":
        return cls(date=day_key(day))


class WellnessStreak(BaseModel):
    """Streak tracking data."""

    current_streak: int = Field(0, ge=0)
    longest_streak: int = Field(0, ge=0)
    last_active_date: str = Field("", description="YYYY-MM-DD, empty when no activity yet")
    total_sessions: int = Field(0, ge=0)
    total_minutes: float = Field(0.0, ge=0)


class SessionHistoryResponse(BaseModel):
    items: List[WellnessSession]
    limit: int


class ProgressOverviewResponse(BaseModel):
    streak: WellnessStreak
    today: WellnessDailyProgress
    last_session: Optional[WellnessSession] = None
