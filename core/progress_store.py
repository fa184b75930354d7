"""
Progress statistics for the Eunoia application.
Tracks weekly and lifetime minutes, the daily streak, completed dates
and achievements, and persists them after every change.
"""

import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Union

from PySide6.QtCore import QObject, Signal

from .errors import PersistenceUnavailable
from .models import (
    ACHIEVEMENT_ALL_THEMES, ACHIEVEMENT_FIRST_SESSION, ACHIEVEMENT_TEN_HOURS,
    ACHIEVEMENT_THREE_DAY, Achievement, ProgressSnapshot, week_start_for,
    weekday_index,
)
from .storage import Storage
from .themes import theme_ids

logger = logging.getLogger(__name__)

TEN_HOURS_MINUTES = 600
STREAK_GOAL_DAYS = 3


def _build_predicates(all_theme_ids: Iterable[str]) -> Dict[str, Callable[[ProgressSnapshot], bool]]:
    required = set(all_theme_ids)
    return {
        ACHIEVEMENT_FIRST_SESSION: lambda s: len(s.completed_dates) >= 1,
        ACHIEVEMENT_THREE_DAY: lambda s: s.streak_days >= STREAK_GOAL_DAYS,
        ACHIEVEMENT_TEN_HOURS: lambda s: s.total_minutes >= TEN_HOURS_MINUTES,
        ACHIEVEMENT_ALL_THEMES: lambda s: bool(required) and required <= s.themes_tried,
    }


class ProgressStore(QObject):
    """
    Owner of the ProgressSnapshot.

    Updates build a new snapshot and swap it in whole, so readers only
    ever see a complete snapshot.

    Signals:
        progress_changed: Emitted with the new snapshot after each update
        achievement_unlocked: Emitted once per newly unlocked achievement
    """

    progress_changed = Signal(ProgressSnapshot)
    achievement_unlocked = Signal(Achievement)

    def __init__(
        self,
        storage: Optional[Storage] = None,
        all_theme_ids: Optional[Iterable[str]] = None,
        today: Callable[[], date] = date.today,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)

        self.storage = storage
        self._today = today
        self._predicates = _build_predicates(
            theme_ids() if all_theme_ids is None else all_theme_ids
        )
        self._snapshot = self._load()

    def _load(self) -> ProgressSnapshot:
        """Load from storage, falling back to empty progress."""
        if self.storage is None:
            return ProgressSnapshot()
        try:
            snapshot = self.storage.load_progress()
        except PersistenceUnavailable as e:
            logger.warning("Could not load progress, using defaults: %s", e)
            return ProgressSnapshot()
        if snapshot is None:
            return ProgressSnapshot()
        return self._rolled_over(snapshot, self._today())

    @staticmethod
    def _rolled_over(snapshot: ProgressSnapshot, day: date) -> ProgressSnapshot:
        """Return ``snapshot`` with the weekly chart moved on to the week of ``day``."""
        week_start = week_start_for(day)
        if snapshot.week_start is None or week_start <= snapshot.week_start:
            return snapshot
        rolled = snapshot.copy()
        rolled.weekly_minutes = [0] * 7
        rolled.week_start = week_start
        return rolled

    def _current(self) -> ProgressSnapshot:
        self._snapshot = self._rolled_over(self._snapshot, self._today())
        return self._snapshot

    @property
    def snapshot(self) -> ProgressSnapshot:
        """A copy of the current snapshot."""
        return self._current().copy()

    @property
    def streak_days(self) -> int:
        return self._snapshot.streak_days

    @property
    def total_minutes(self) -> int:
        return self._snapshot.total_minutes

    @property
    def weekly_minutes(self) -> List[int]:
        return list(self._current().weekly_minutes)

    def is_completed(self, day: date) -> bool:
        return day in self._snapshot.completed_dates

    def record_session_completion(
        self,
        duration_minutes: int,
        day_completed: Union[date, datetime],
        theme_id: Optional[str] = None
    ) -> ProgressSnapshot:
        """
        Record a finished session.

        Args:
            duration_minutes: Minutes meditated.
            day_completed: When it finished; the time of day is dropped.
            theme_id: Theme used, counted towards the explorer badge.

        Returns:
            The new snapshot.
        """
        if duration_minutes < 0:
            raise ValueError("duration_minutes must be non-negative")
        if isinstance(day_completed, datetime):
            day_completed = day_completed.date()

        # Start a fresh chart when the session falls in a later week
        new = self._rolled_over(self._current(), day_completed).copy()
        week_start = week_start_for(day_completed)
        if new.week_start is None:
            new.week_start = week_start

        if week_start == new.week_start:
            new.weekly_minutes[weekday_index(day_completed)] += duration_minutes
        new.total_minutes += duration_minutes

        last = new.last_completed_date
        if last is not None and day_completed == last:
            pass
        elif last is not None and day_completed == last + timedelta(days=1):
            new.streak_days += 1
        else:
            new.streak_days = 1
        new.completed_dates.add(day_completed)

        if theme_id:
            new.themes_tried.add(theme_id)

        unlocked = self._evaluate_achievements(new)

        self._snapshot = new
        self._persist()

        logger.info(
            "Session recorded: %s min on %s, streak %s",
            duration_minutes, day_completed, new.streak_days
        )
        for achievement in unlocked:
            logger.info("Achievement unlocked: %s", achievement.title)
            self.achievement_unlocked.emit(replace(achievement))
        self.progress_changed.emit(self.snapshot)
        return self.snapshot

    def _evaluate_achievements(self, snapshot: ProgressSnapshot) -> List[Achievement]:
        """Unlock every achievement whose predicate now holds."""
        newly_unlocked = []
        for achievement in snapshot.achievements:
            if achievement.is_unlocked:
                continue
            predicate = self._predicates.get(achievement.id)
            if predicate is not None and predicate(snapshot):
                achievement.is_unlocked = True
                newly_unlocked.append(achievement)
        return newly_unlocked

    def _persist(self):
        if self.storage is None:
            return
        try:
            self.storage.save_progress(self._snapshot)
        except PersistenceUnavailable as e:
            logger.warning("Could not save progress, keeping it in memory: %s", e)
