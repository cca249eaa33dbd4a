# -*- coding: utf-8 -*-
"""Wellness progress endpoints (streak, today, history)."""

from __future__ import annotations

from fastapi import APIRouter, Query

from ..breathing.service import engine, progress_store
from ..config import settings
from .models import (
    ProgressOverviewResponse,
    SessionHistoryResponse,
    WellnessDailyProgress,
    WellnessStreak,
)

router = APIRouter(prefix="/api/progress", tags=["Progress"])


@router.get("", response_model=ProgressOverviewResponse, summary="Streak, today and last session")
def get_overview():
    return ProgressOverviewResponse(
        streak=progress_store.streak,
        today=progress_store.today_progress(),
        last_session=engine.last_session,
    )


@router.get("/streak", response_model=WellnessStreak, summary="Streak aggregate")
def get_streak():
    return progress_store.streak


@router.get("/today", response_model=WellnessDailyProgress, summary="Today's progress")
def get_today():
    return progress_store.today_progress()


@router.get("/sessions", response_model=SessionHistoryResponse, summary="Recent sessions")
def list_sessions(limit: int = Query(default=20, ge=1)):
    limit = min(limit, settings.history_limit)
    return SessionHistoryResponse(items=progress_store.recent_sessions(limit), limit=limit)
