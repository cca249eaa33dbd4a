# -*- coding: utf-8 -*-
"""Breathing session endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from .canvas import WellnessCanvas, describe_canvas
from .models import (
    BreathingSnapshot,
    CanvasListResponse,
    PatternListResponse,
    SelectCanvasRequest,
    StartSessionRequest,
)
from .patterns import ALL_PATTERNS, InvalidPatternError, UnknownPatternError
from .service import UnknownCanvasError, apply_control, engine, resolve_canvas

router = APIRouter(prefix="/api/breathing", tags=["Breathing"])


@router.get("/patterns", response_model=PatternListResponse, summary="List preset breathing patterns")
def list_patterns():
    return PatternListResponse(items=ALL_PATTERNS)


@router.get("/canvases", response_model=CanvasListResponse, summary="List wellness canvases")
def list_canvases():
    return CanvasListResponse(items=[describe_canvas(c) for c in WellnessCanvas])


@router.get("/session", response_model=BreathingSnapshot, summary="Current engine snapshot")
def get_session():
    return engine.snapshot()


@router.post("/canvas", response_model=BreathingSnapshot, summary="Select a canvas and its default pattern")
def select_canvas(request: SelectCanvasRequest):
    try:
        canvas = resolve_canvas(request.canvas)
    except UnknownCanvasError:
        raise HTTPException(status_code=404, detail=f"Unknown canvas: {request.canvas}")
    if not engine.select_canvas(canvas):
        raise HTTPException(status_code=409, detail="A session is in progress")
    return engine.snapshot()


@router.post("/session/start", response_model=BreathingSnapshot, summary="Start a session")
def start_session(request: StartSessionRequest | None = None):
    request = request or StartSessionRequest()
    try:
        return apply_control(engine, "start", pattern_id=request.pattern_id, canvas=request.canvas)
    except UnknownPatternError:
        raise HTTPException(status_code=404, detail=f"Unknown pattern: {request.pattern_id}")
    except UnknownCanvasError:
        raise HTTPException(status_code=404, detail=f"Unknown canvas: {request.canvas}")
    except InvalidPatternError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.post("/session/pause", response_model=BreathingSnapshot, summary="Pause the running session")
def pause_session():
    return apply_control(engine, "pause")


@router.post("/session/resume", response_model=BreathingSnapshot, summary="Resume a paused session")
def resume_session():
    return apply_control(engine, "resume")


@router.post("/session/stop", response_model=BreathingSnapshot, summary="Stop and record the session")
def stop_session():
    return apply_control(engine, "stop")


@router.post("/session/toggle", response_model=BreathingSnapshot, summary="Start, pause or resume")
def toggle_session():
    return apply_control(engine, "toggle")
