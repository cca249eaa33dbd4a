# -*- coding: utf-8 -*-

from __future__ import annotations

import shutil
import sqlite3
import tempfile
import threading
import unittest
from datetime import date, datetime, timedelta
from pathlib import Path

from nodeperson.progress.models import WellnessDailyProgress, WellnessSession, WellnessStreak
from nodeperson.progress.storage import DAILY_KEY, STREAK_KEY, ProgressStore, update_streak


def make_session(canvas: str = "flowState", seconds: float = 120.0, **kwargs) -> WellnessSession:
    return WellnessSession(canvas=canvas, pattern_id="box", duration=seconds, **kwargs)


class TestProgressStore(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="nodeperson-progress-"))
        self.db_path = self._tmp / "progress.db"
        self.day = date(2026, 3, 10)

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp, ignore_errors=True)

    def _store(self) -> ProgressStore:
        store = ProgressStore(self.db_path, today=lambda: self.day)
        store.load()
        return store

    def test_fresh_store_has_no_history(self) -> None:
        store = self._store()
        self.assertEqual(store.streak, WellnessStreak())
        self.assertEqual(store.daily.date, "2026-03-10")
        self.assertEqual(store.daily.sessions_completed, 0)
        self.assertEqual(store.recent_sessions(), [])

    def test_same_day_sessions_do_not_inflate_streak(self) -> None:
        store = self._store()
        store.streak = WellnessStreak(current_streak=3, longest_streak=4, last_active_date="2026-03-10")
        for _ in range(4):
            store.record_session(make_session())
        self.assertEqual(store.daily.sessions_completed, 4)
        self.assertAlmostEqual(store.daily.total_minutes, 8.0)
        self.assertEqual(store.streak.current_streak, 3)
        self.assertEqual(store.streak.longest_streak, 4)
        self.assertEqual(store.streak.total_sessions, 4)

    def test_consecutive_day_then_gap(self) -> None:
        store = self._store()
        store.streak = WellnessStreak(current_streak=5, longest_streak=5, last_active_date="2026-03-09")
        store.record_session(make_session())
        self.assertEqual(store.streak.current_streak, 6)
        self.assertEqual(store.streak.longest_streak, 6)
        self.assertEqual(store.streak.last_active_date, "2026-03-10")

        self.day = self.day + timedelta(days=3)
        store.record_session(make_session())
        self.assertEqual(store.streak.current_streak, 1)
        self.assertEqual(store.streak.longest_streak, 6)
        self.assertEqual(store.daily.date, "2026-03-13")
        self.assertEqual(store.daily.sessions_completed, 1)

    def test_records_persist_across_loads(self) -> None:
        store = self._store()
        store.record_session(make_session("flowState", 60))
        store.record_session(make_session("betterSleep", 90))
        store.record_session(make_session("flowState", 30))

        reloaded = self._store()
        self.assertEqual(reloaded.streak.total_sessions, 3)
        self.assertAlmostEqual(reloaded.streak.total_minutes, 3.0)
        self.assertEqual(reloaded.daily.sessions_completed, 3)
        self.assertEqual(reloaded.daily.canvases_used, {"flowState", "betterSleep"})
        self.assertEqual(reloaded.daily.canvas_count, 2)

    def test_stale_daily_record_is_discarded(self) -> None:
        store = self._store()
        store.record_session(make_session())

        self.day = self.day + timedelta(days=1)
        reloaded = self._store()
        self.assertEqual(reloaded.daily.date, "2026-03-11")
        self.assertEqual(reloaded.daily.sessions_completed, 0)
        self.assertEqual(reloaded.streak.total_sessions, 1)

    def test_today_progress_rolls_over(self) -> None:
        store = self._store()
        store.record_session(make_session())
        self.day = self.day + timedelta(days=1)
        self.assertEqual(store.today_progress(), WellnessDailyProgress.empty(self.day))

    def test_corrupt_records_are_treated_as_empty(self) -> None:
        self._store()
        with sqlite3.connect(str(self.db_path)) as conn:
            conn.execute(
                "INSERT OR REPLACE INTO records (key, payload_json, updated_at) VALUES (?, ?, ?)",
                (STREAK_KEY, "{not json", "x"),
            )
            conn.execute(
                "INSERT OR REPLACE INTO records (key, payload_json, updated_at) VALUES (?, ?, ?)",
                (DAILY_KEY, '{"date": "2026-03-10", "sessions_completed": -4}', "x"),
            )
        conn.close()

        with self.assertLogs("nodeperson.progress.storage", level="WARNING"):
            store = self._store()
        self.assertEqual(store.streak, WellnessStreak())
        self.assertEqual(store.daily.sessions_completed, 0)

    def test_unavailable_storage_is_not_fatal(self) -> None:
        blocker = self._tmp / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        with self.assertLogs("nodeperson.progress.storage", level="WARNING"):
            store = ProgressStore(blocker / "nested" / "progress.db", today=lambda: self.day)
        streak, daily = store.load()
        self.assertEqual(streak, WellnessStreak())
        store.record_session(make_session())
        self.assertEqual(store.streak.total_sessions, 1)
        self.assertEqual(store.daily.sessions_completed, 1)
        self.assertEqual(store.recent_sessions(), [])

    def test_session_history_newest_first(self) -> None:
        store = self._store()
        base = datetime(2026, 3, 10, 8, 0, 0)
        for minutes in (0, 10, 20):
            store.record_session(
                make_session(started_at=base + timedelta(minutes=minutes), completed_cycles=minutes // 10)
            )
        history = store.recent_sessions(limit=2)
        self.assertEqual(len(history), 2)
        self.assertEqual(history[0].started_at, base + timedelta(minutes=20))
        self.assertEqual(history[0].completed_cycles, 2)
        self.assertEqual(history[1].started_at, base + timedelta(minutes=10))

    def test_concurrent_sessions_on_one_day_are_all_counted(self) -> None:
        store = self._store()
        workers = 8
        barrier = threading.Barrier(workers)

        def _record() -> None:
            barrier.wait()
            store.record_session(make_session())

        threads = [threading.Thread(target=_record) for _ in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(store.daily.sessions_completed, workers)
        self.assertEqual(store.streak.total_sessions, workers)
        self.assertAlmostEqual(store.streak.total_minutes, 2.0 * workers)
        self.assertEqual(store.streak.current_streak, 1)

        reloaded = self._store()
        self.assertEqual(reloaded.daily.sessions_completed, workers)
        self.assertEqual(reloaded.streak.total_sessions, workers)
        self.assertEqual(len(reloaded.recent_sessions(limit=workers * 2)), workers)


class TestUpdateStreak(unittest.TestCase):
    def test_first_session_starts_streak(self) -> None:
        streak = update_streak(WellnessStreak(), date(2026, 1, 1), 2.5)
        self.assertEqual(streak.current_streak, 1)
        self.assertEqual(streak.longest_streak, 1)
        self.assertEqual(streak.last_active_date, "2026-01-01")
        self.assertEqual(streak.total_minutes, 2.5)

    def test_unparseable_last_date_resets(self) -> None:
        streak = update_streak(
            WellnessStreak(current_streak=9, longest_streak=9, last_active_date="yesterday"),
            date(2026, 1, 1),
            1.0,
        )
        self.assertEqual(streak.current_streak, 1)
        self.assertEqual(streak.longest_streak, 9)

    def test_month_boundary_counts_as_consecutive(self) -> None:
        streak = update_streak(
            WellnessStreak(current_streak=2, longest_streak=2, last_active_date="2026-02-28"),
            date(2026, 3, 1),
            1.0,
        )
        self.assertEqual(streak.current_streak, 3)


if __name__ == "__main__":
    unittest.main()
