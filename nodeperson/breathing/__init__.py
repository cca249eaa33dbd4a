# -*- coding: utf-8 -*-
"""
呼吸模块
"""

from .canvas import WellnessCanvas
from .engine import BreathingSessionEngine
from .models import BreathingSnapshot, SessionState
from .patterns import (
    ALL_PATTERNS,
    BreathingPattern,
    BreathingPhase,
    InvalidPatternError,
    UnknownPatternError,
    get_pattern,
)

__all__ = [
    'ALL_PATTERNS',
    'BreathingPattern',
    'BreathingPhase',
    'BreathingSessionEngine',
    'BreathingSnapshot',
    'InvalidPatternError',
    'SessionState',
    'UnknownPatternError',
    'WellnessCanvas',
    'get_pattern',
]
