# -*- coding: utf-8 -*-
"""Process-wide engine instance and the control operations shared by HTTP and websocket."""

from __future__ import annotations

from typing import Optional

from ..progress.storage import ProgressStore
from .canvas import WellnessCanvas
from .engine import BreathingSessionEngine
from .models import BreathingSnapshot
from .patterns import get_pattern


class UnknownCanvasError(KeyError):
    pass


def resolve_canvas(value: str) -> WellnessCanvas:
    canvas = WellnessCanvas.parse(value)
    if canvas is None:
        raise UnknownCanvasError(value)
    return canvas


def apply_control(
    engine: BreathingSessionEngine,
    action: str,
    *,
    pattern_id: Optional[str] = None,
    canvas: Optional[str] = None,
) -> BreathingSnapshot:
    """Run one control action and return the resulting snapshot.

    Raises UnknownPatternError, UnknownCanvasError or InvalidPatternError
    for bad start parameters; other invalid transitions are no-ops.
    """
    if action == "start":
        pattern = get_pattern(pattern_id) if pattern_id else None
        if canvas:
            engine.select_canvas(resolve_canvas(canvas))
        engine.start_session(pattern)
    elif action == "pause":
        engine.pause()
    elif action == "resume":
        engine.resume()
    elif action == "stop":
        engine.stop()
    elif action == "toggle":
        engine.toggle()
    else:
        raise ValueError(f"Unknown action: {action}")
    return engine.snapshot()


progress_store = ProgressStore()
engine = BreathingSessionEngine(progress_store)
