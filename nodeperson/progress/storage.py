# -*- coding: utf-8 -*-
"""Wellness progress storage: streak and daily aggregates (SQLite key/value records)."""

from __future__ import annotations

import logging
import sqlite3
import threading
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..app_db import db_conn, init_app_db
from ..config import settings
from .models import WellnessDailyProgress, WellnessSession, WellnessStreak, day_key

logger = logging.getLogger(__name__)

STREAK_KEY = "wellness_streak"
DAILY_KEY = "wellness_daily"

_M = TypeVar("_M", bound=BaseModel)


def local_today() -> date:
    if settings.timezone is not None:
        return datetime.now(settings.timezone).date()
    return date.today()


def _parse_day(value: str) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def update_streak(streak: WellnessStreak, today: date, minutes: float) -> WellnessStreak:
    """Apply one recorded session to the streak aggregate."""
    current = streak.current_streak
    today_key = day_key(today)
    if streak.last_active_date != today_key:
        last = _parse_day(streak.last_active_date)
        if last is not None and last == today - timedelta(days=1):
            current += 1
        else:
            current = 1
    return streak.model_copy(
        update={
            "current_streak": current,
            "longest_streak": max(streak.longest_streak, current),
            "last_active_date": today_key,
            "total_sessions": streak.total_sessions + 1,
            "total_minutes": streak.total_minutes + minutes,
        }
    )


class ProgressStore:
    """Write-through store for the streak and today's progress.

    Read or write failures never propagate: a missing or corrupt record is
    treated as no history and the in-memory aggregates stay authoritative.
    """

    def __init__(
        self,
        db_path: Optional[Path] = None,
        *,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.db_path = db_path or settings.db_path
        self._today = today or local_today
        # recordSession is read-modify-write on both aggregates.
        self._lock = threading.Lock()
        self.streak = WellnessStreak()
        self.daily = WellnessDailyProgress.empty(self._today())
        self._db_ready = self._init_db()

    def _init_db(self) -> bool:
        try:
            init_app_db(self.db_path)
        except (sqlite3.Error, OSError) as exc:
            logger.warning("Progress store unavailable at %s: %s", self.db_path, exc)
            return False
        return True

    # ---- records ----

    def _read(self, key: str, model: Type[_M]) -> Optional[_M]:
        if not self._db_ready:
            return None
        try:
            with db_conn(self.db_path) as conn:
                row = conn.execute(
                    "SELECT payload_json FROM records WHERE key = ?",
                    (key,),
                ).fetchone()
        except (sqlite3.Error, OSError) as exc:
            logger.warning("Failed to read %s: %s", key, exc)
            return None
        if not row:
            return None
        try:
            return model.model_validate_json(row["payload_json"])
        except ValidationError as exc:
            logger.warning("Discarding corrupt %s record: %s", key, exc.errors()[:1])
            return None

    def _write(self, key: str, value: BaseModel) -> None:
        if not self._db_ready:
            return
        try:
            with db_conn(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO records (key, payload_json, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        payload_json = excluded.payload_json,
                        updated_at = excluded.updated_at
                    """,
                    (key, value.model_dump_json(), datetime.utcnow().isoformat()),
                )
        except (sqlite3.Error, OSError) as exc:
            logger.warning("Failed to persist %s: %s", key, exc)

    def _append_history(self, session: WellnessSession, day: str) -> None:
        if not self._db_ready:
            return
        try:
            with db_conn(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO wellness_sessions (
                        id, canvas, pattern_id, started_at, duration, completed_cycles, is_completed, day
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        session.id,
                        session.canvas,
                        session.pattern_id,
                        session.started_at.isoformat(),
                        float(session.duration),
                        int(session.completed_cycles),
                        1 if session.is_completed else 0,
                        day,
                    ),
                )
        except (sqlite3.Error, OSError) as exc:
            logger.warning("Failed to append session %s to history: %s", session.id, exc)

    # ---- public API ----

    def load(self) -> Tuple[WellnessStreak, WellnessDailyProgress]:
        today_key = day_key(self._today())
        with self._lock:
            self.streak = self._read(STREAK_KEY, WellnessStreak) or WellnessStreak()
            daily = self._read(DAILY_KEY, WellnessDailyProgress)
            if daily is None or daily.date != today_key:
                daily = WellnessDailyProgress.empty(self._today())
            self.daily = daily
            return self.streak, self.daily

    def today_progress(self) -> WellnessDailyProgress:
        with self._lock:
            if self.daily.date != day_key(self._today()):
                self.daily = WellnessDailyProgress.empty(self._today())
            return self.daily

    def record_session(self, session: WellnessSession) -> Tuple[WellnessStreak, WellnessDailyProgress]:
        """Fold one finished session into today's progress and the streak."""
        minutes = session.duration / 60.0
        with self._lock:
            today = self._today()
            today_key = day_key(today)
            daily = self.daily if self.daily.date == today_key else WellnessDailyProgress.empty(today)
            self.daily = daily.model_copy(
                update={
                    "sessions_completed": daily.sessions_completed + 1,
                    "total_minutes": daily.total_minutes + minutes,
                    "canvases_used": set(daily.canvases_used) | {session.canvas},
                }
            )
            self._write(DAILY_KEY, self.daily)

            self.streak = update_streak(self.streak, today, minutes)
            self._write(STREAK_KEY, self.streak)

            self._append_history(session, today_key)
            logger.info(
                "Recorded session %s (%s, %.1f min); streak=%d",
                session.id,
                session.canvas,
                minutes,
                self.streak.current_streak,
            )
            return self.streak, self.daily

    def recent_sessions(self, limit: int = 20) -> List[WellnessSession]:
        if not self._db_ready or limit <= 0:
            return []
        try:
            with db_conn(self.db_path) as conn:
                rows = conn.execute(
                    "SELECT * FROM wellness_sessions ORDER BY started_at DESC LIMIT ?",
                    (int(limit),),
                ).fetchall()
        except (sqlite3.Error, OSError) as exc:
            logger.warning("Failed to read session history: %s", exc)
            return []

        out: List[WellnessSession] = []
        for row in rows:
            r = dict(row)
            try:
                out.append(
                    WellnessSession(
                        id=r["id"],
                        canvas=r["canvas"],
                        pattern_id=r["pattern_id"],
                        started_at=datetime.fromisoformat(r["started_at"]),
                        duration=r["duration"],
                        completed_cycles=r["completed_cycles"],
                        is_completed=bool(r["is_completed"]),
                    )
                )
            except (ValidationError, ValueError):
                continue
        return out
