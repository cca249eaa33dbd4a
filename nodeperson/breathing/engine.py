# -*- coding: utf-8 -*-
"""
呼吸会话引擎

Timer-driven state machine behind the breathing indicator: session
lifecycle, phase/cycle progression, elapsed-time accounting, animation
scale and progress fractions. Finished sessions are handed to the
progress store.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from ..config import settings
from ..progress.models import WellnessDailyProgress, WellnessSession, WellnessStreak
from ..progress.storage import ProgressStore, local_today
from .canvas import WellnessCanvas, default_pattern
from .models import BreathingSnapshot, SessionState
from .patterns import (
    PHASE_ORDER,
    BreathingPattern,
    BreathingPhase,
    InvalidPatternError,
    phases_offset,
)

logger = logging.getLogger(__name__)

# Float accumulation of tick intervals must not delay a phase boundary by a tick.
_EPSILON = 1e-9

MIN_SCALE = 0.5
MAX_SCALE = 1.0

SnapshotListener = Callable[[BreathingSnapshot], None]


def breathing_scale(phase: BreathingPhase, progress: float) -> float:
    """Scale factor for the breathing circle (0.5…1.0)."""
    if phase is BreathingPhase.INHALE:
        return MIN_SCALE + (MAX_SCALE - MIN_SCALE) * progress
    if phase is BreathingPhase.HOLD_AFTER_INHALE:
        return MAX_SCALE
    if phase is BreathingPhase.EXHALE:
        return MAX_SCALE - (MAX_SCALE - MIN_SCALE) * progress
    return MIN_SCALE


class BreathingSessionEngine:
    """Single-session breathing engine.

    All mutation happens under one re-entrant lock, so the periodic driver
    and control calls may come from different threads. Automatic completion
    runs inside ``tick`` and finalizes the session before the lock is released.
    """

    def __init__(
        self,
        store: Optional[ProgressStore] = None,
        *,
        canvas: Optional[WellnessCanvas] = None,
        tick_interval: Optional[float] = None,
    ) -> None:
        self.store = store
        self.tick_interval: float = tick_interval or settings.tick_interval
        self._lock = threading.RLock()
        self._listeners: List[SnapshotListener] = []

        self.selected_canvas: WellnessCanvas = (
            canvas
            or WellnessCanvas.parse(settings.default_canvas)
            or WellnessCanvas.FLOW_STATE
        )
        self.current_pattern: BreathingPattern = default_pattern(self.selected_canvas)
        self.current_phase = BreathingPhase.INHALE
        self.phase_progress = 0.0
        self.overall_progress = 0.0
        self.current_cycle = 0
        self.is_session_active = False
        self.is_paused = False
        self.elapsed_seconds = 0.0
        self.breathing_scale = MIN_SCALE
        self.last_session: Optional[WellnessSession] = None

        self._phase_elapsed = 0.0
        self._pending = 0.0
        self._current_session: Optional[WellnessSession] = None

        if self.store is not None:
            self.store.load()

    # ---- state ----

    @property
    def state(self) -> SessionState:
        if not self.is_session_active:
            return SessionState.IDLE
        if self.is_paused:
            return SessionState.PAUSED
        return SessionState.ACTIVE

    @property
    def streak(self) -> WellnessStreak:
        if self.store is None:
            return WellnessStreak()
        return self.store.streak

    @property
    def daily_progress(self) -> WellnessDailyProgress:
        if self.store is None:
            return WellnessDailyProgress.empty(local_today())
        return self.store.today_progress()

    # ---- canvas selection ----

    def select_canvas(self, canvas: WellnessCanvas) -> bool:
        with self._lock:
            if self.is_session_active:
                return False
            self.selected_canvas = canvas
            self.current_pattern = default_pattern(canvas)
            self._reset_display()
            snapshot = self.snapshot()
        self._notify(snapshot)
        return True

    # ---- session control ----

    def start_session(self, pattern: Optional[BreathingPattern] = None) -> bool:
        """Start a session; a no-op returning False while one is running."""
        with self._lock:
            if self.is_session_active:
                return False
            pattern = pattern or self.current_pattern
            try:
                pattern.ensure_valid()
            except InvalidPatternError as exc:
                logger.warning("Rejected breathing session: %s", exc)
                raise

            self.current_pattern = pattern
            self._current_session = WellnessSession(
                canvas=self.selected_canvas.value,
                pattern_id=pattern.id,
            )
            self.is_session_active = True
            self.is_paused = False
            self.current_cycle = 1
            self.current_phase = BreathingPhase.INHALE
            self._phase_elapsed = 0.0
            self._pending = 0.0
            self.elapsed_seconds = 0.0
            self.overall_progress = 0.0
            self.phase_progress = 0.0
            self.breathing_scale = MIN_SCALE
            logger.info(
                "Breathing session started: %s (%s, %d cycles)",
                self._current_session.id,
                pattern.id,
                pattern.cycles,
            )
            snapshot = self.snapshot()
        self._notify(snapshot)
        return True

    def pause(self) -> None:
        with self._lock:
            if not self.is_session_active or self.is_paused:
                return
            self.is_paused = True
            snapshot = self.snapshot()
        self._notify(snapshot)

    def resume(self) -> None:
        with self._lock:
            if not self.is_session_active or not self.is_paused:
                return
            self.is_paused = False
            snapshot = self.snapshot()
        self._notify(snapshot)

    def stop(self) -> Optional[WellnessSession]:
        """Finalize the running session, record it and return to idle."""
        with self._lock:
            session = self._finish()
            if session is None:
                return None
            snapshot = self.snapshot()
        self._notify(snapshot)
        return session

    def toggle(self) -> None:
        with self._lock:
            if not self.is_session_active:
                action = self.start_session
            elif self.is_paused:
                action = self.resume
            else:
                action = self.pause
        # Runs outside the lock so listeners are notified unlocked; the target re-checks state.
        action()

    # ---- timing ----

    def tick(self, dt: Optional[float] = None) -> None:
        """Advance the running session by one tick (``tick_interval`` by default)."""
        with self._lock:
            if not self.is_session_active or self.is_paused:
                return
            self._step(self.tick_interval if dt is None else dt)
            snapshot = self.snapshot()
        self._notify(snapshot)

    def advance(self, elapsed: float) -> int:
        """Feed measured wall time; runs as many fixed-size ticks as it covers.

        The remainder carries over to the next call, so late or missed
        scheduler callbacks neither lose nor duplicate time.
        """
        with self._lock:
            if not self.is_session_active or self.is_paused:
                self._pending = 0.0
                return 0
            self._pending += max(elapsed, 0.0)
            steps = 0
            while (
                self.is_session_active
                and not self.is_paused
                and self._pending >= self.tick_interval - _EPSILON
            ):
                self._pending -= self.tick_interval
                self._step(self.tick_interval)
                steps += 1
            if steps == 0:
                return 0
            snapshot = self.snapshot()
        self._notify(snapshot)
        return steps

    def _step(self, dt: float) -> None:
        pattern = self.current_pattern
        self._phase_elapsed += dt
        self.elapsed_seconds += dt

        phase_duration = self.current_phase.duration(pattern)
        if phase_duration <= 0:
            self._advance_phase()
            return

        self.phase_progress = min(self._phase_elapsed / phase_duration, 1.0)
        self.breathing_scale = breathing_scale(self.current_phase, self.phase_progress)

        total_duration = pattern.total_duration
        if total_duration > 0:
            cycle_offset = (self.current_cycle - 1) * pattern.cycle_duration
            phase_offset = phases_offset(self.current_phase, pattern)
            session_elapsed = cycle_offset + phase_offset + self._phase_elapsed
            self.overall_progress = min(session_elapsed / total_duration, 1.0)

        if self._phase_elapsed >= phase_duration - _EPSILON:
            self._advance_phase()

    def _advance_phase(self) -> None:
        self._phase_elapsed = 0.0
        self.phase_progress = 0.0

        idx = PHASE_ORDER.index(self.current_phase)
        for nxt in PHASE_ORDER[idx + 1:]:
            if nxt.duration(self.current_pattern) > 0:
                self.current_phase = nxt
                self.breathing_scale = breathing_scale(nxt, 0.0)
                return
        self._complete_cycle()

    def _complete_cycle(self) -> None:
        self.current_cycle += 1
        self.current_phase = BreathingPhase.INHALE
        self.breathing_scale = breathing_scale(self.current_phase, 0.0)
        logger.debug("Cycle %d complete", self.current_cycle - 1)

        if self.current_cycle > self.current_pattern.cycles:
            self._finish()

    def _finish(self) -> Optional[WellnessSession]:
        if not self.is_session_active or self._current_session is None:
            return None
        pattern = self.current_pattern
        session = self._current_session.model_copy(
            update={
                "duration": self.elapsed_seconds,
                "completed_cycles": max(0, self.current_cycle - 1),
                "is_completed": self.current_cycle > pattern.cycles,
            }
        )
        logger.info(
            "Breathing session %s: %s after %.1fs, %d/%d cycles",
            "completed" if session.is_completed else "stopped",
            session.id,
            session.duration,
            session.completed_cycles,
            pattern.cycles,
        )
        if self.store is not None:
            self.store.record_session(session)

        self.last_session = session
        self._current_session = None
        self.is_session_active = False
        self.is_paused = False
        self._pending = 0.0
        self._reset_display()
        return session

    def _reset_display(self) -> None:
        self.current_phase = BreathingPhase.INHALE
        self.phase_progress = 0.0
        self.overall_progress = 0.0
        self.current_cycle = 0
        self.elapsed_seconds = 0.0
        self._phase_elapsed = 0.0
        self.breathing_scale = MIN_SCALE

    # ---- formatted values ----

    @property
    def elapsed_formatted(self) -> str:
        total = int(round(self.elapsed_seconds, 3))
        return f"{total // 60}:{total % 60:02d}"

    @property
    def phase_duration_formatted(self) -> str:
        return f"{self.current_phase.duration(self.current_pattern):.0f} s"

    @property
    def cycle_label(self) -> str:
        cycles = self.current_pattern.cycles
        return f"{min(self.current_cycle, cycles)}/{cycles}"

    # ---- observation ----

    def snapshot(self) -> BreathingSnapshot:
        with self._lock:
            return BreathingSnapshot(
                state=self.state,
                canvas=self.selected_canvas.value,
                pattern_id=self.current_pattern.id,
                pattern_name=self.current_pattern.name,
                phase=self.current_phase,
                phase_label=self.current_phase.label,
                phase_english_label=self.current_phase.english_label,
                phase_progress=self.phase_progress,
                overall_progress=self.overall_progress,
                current_cycle=self.current_cycle,
                total_cycles=self.current_pattern.cycles,
                cycle_label=self.cycle_label,
                elapsed_seconds=round(self.elapsed_seconds, 3),
                elapsed_formatted=self.elapsed_formatted,
                phase_duration_formatted=self.phase_duration_formatted,
                breathing_scale=self.breathing_scale,
                is_active=self.is_session_active,
                is_paused=self.is_paused,
            )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, snapshot: BreathingSnapshot) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception as exc:
                logger.error("Snapshot listener failed: %s", exc)
