# -*- coding: utf-8 -*-
"""
实时模块

The websocket module owns the process-wide stream manager; import it
explicitly (``nodeperson.realtime.websocket``) where it is needed.
"""

from .ticker import SessionTicker

__all__ = [
    'SessionTicker',
]
