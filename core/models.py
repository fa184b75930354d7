"""
Data models for the Eunoia meditation application.
Uses dataclasses for clean, type-annotated data structures.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import List, Optional, Set, Tuple


# Sunday-first, matching the weekly chart and the calendar grid
DAY_ABBREVIATIONS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

MOODS = ["😊", "😌", "😔", "😤", "🤔"]


def weekday_index(day: date) -> int:
    """Return the Sunday-based weekday index (Sun=0 .. Sat=6)."""
    return (day.weekday() + 1) % 7


def week_start_for(day: date) -> date:
    """Return the Sunday that starts the week containing ``day``."""
    return day - timedelta(days=weekday_index(day))


@dataclass(frozen=True, eq=False)
class Theme:
    """
    A named ambient-sound/visual preset for a session.
    Identity is the ``id``; the other fields are display data.
    """
    id: str
    name: str
    description: str
    primary_color: str
    secondary_color: str
    sound_file_name: str
    benefits: Tuple[str, ...] = ()
    icon: str = ""

    def __eq__(self, other):
        if not isinstance(other, Theme):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)


@dataclass(frozen=True)
class DurationPreset:
    """Selectable session length."""
    label: str
    seconds: int

    @property
    def minutes(self) -> int:
        return self.seconds // 60

    def __str__(self) -> str:
        return self.label


DURATION_PRESETS = [
    DurationPreset("5 minutes", 300),
    DurationPreset("10 minutes", 600),
    DurationPreset("15 minutes", 900),
    DurationPreset("20 minutes", 1200),
    DurationPreset("30 minutes", 1800),
]

DEFAULT_DURATION_SECONDS = 600


@dataclass
class AppSettings:
    """Application settings stored in the settings table."""
    sound_enabled: bool = True
    haptics_enabled: bool = True
    default_duration_seconds: int = DEFAULT_DURATION_SECONDS
    default_intensity: float = 0.5
    sounds_dir: str = ""


@dataclass
class SessionState:
    """
    Current session state published by the SessionController.
    Used to pass playback and countdown state to UI components.
    """
    current_theme: Theme
    is_playing: bool = False
    intensity: float = 0.5
    remaining_seconds: int = 0
    selected_duration: int = DEFAULT_DURATION_SECONDS

    def format_remaining(self) -> str:
        """Format remaining time as MM:SS."""
        minutes = self.remaining_seconds // 60
        seconds = self.remaining_seconds % 60
        return f"{minutes:02d}:{seconds:02d}"


@dataclass
class Achievement:
    """One-way unlockable badge."""
    id: str
    title: str
    description: str
    icon: str
    is_unlocked: bool = False

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'icon': self.icon,
            'is_unlocked': self.is_unlocked,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Achievement":
        return cls(
            id=data['id'],
            title=data.get('title', ''),
            description=data.get('description', ''),
            icon=data.get('icon', ''),
            is_unlocked=bool(data.get('is_unlocked', False)),
        )


ACHIEVEMENT_FIRST_SESSION = "firstSession"
ACHIEVEMENT_THREE_DAY = "threeDay"
ACHIEVEMENT_TEN_HOURS = "tenHours"
ACHIEVEMENT_ALL_THEMES = "allThemes"


def default_achievements() -> List[Achievement]:
    """Return a fresh, all-locked achievement list."""
    return [
        Achievement(ACHIEVEMENT_FIRST_SESSION, "First Step",
                    "Complete your first meditation", "foot.fill"),
        Achievement(ACHIEVEMENT_THREE_DAY, "Consistent",
                    "Meditate for 3 days in a row", "flame.fill"),
        Achievement(ACHIEVEMENT_TEN_HOURS, "Deep Diver",
                    "Complete 10 hours of meditation", "water.waves"),
        Achievement(ACHIEVEMENT_ALL_THEMES, "Explorer",
                    "Try all meditation themes", "map.fill"),
    ]


@dataclass
class ProgressSnapshot:
    """
    Aggregate meditation statistics.
    Loaded at start, replaced as a whole on every session completion.
    """
    weekly_minutes: List[int] = field(default_factory=lambda: [0] * 7)
    total_minutes: int = 0
    streak_days: int = 0
    completed_dates: Set[date] = field(default_factory=set)
    achievements: List[Achievement] = field(default_factory=default_achievements)
    themes_tried: Set[str] = field(default_factory=set)
    week_start: Optional[date] = None

    @property
    def last_completed_date(self) -> Optional[date]:
        return max(self.completed_dates) if self.completed_dates else None

    def is_unlocked(self, achievement_id: str) -> bool:
        return any(a.id == achievement_id and a.is_unlocked for a in self.achievements)

    def copy(self) -> "ProgressSnapshot":
        """Return a deep enough copy that mutating it leaves self untouched."""
        return replace(
            self,
            weekly_minutes=list(self.weekly_minutes),
            completed_dates=set(self.completed_dates),
            achievements=[replace(a) for a in self.achievements],
            themes_tried=set(self.themes_tried),
        )

    def to_dict(self) -> dict:
        return {
            'weekly_minutes': list(self.weekly_minutes),
            'total_minutes': self.total_minutes,
            'streak_days': self.streak_days,
            'completed_dates': sorted(d.isoformat() for d in self.completed_dates),
            'achievements': [a.to_dict() for a in self.achievements],
            'themes_tried': sorted(self.themes_tried),
            'week_start': self.week_start.isoformat() if self.week_start else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProgressSnapshot":
        weekly = [max(0, int(v)) for v in data.get('weekly_minutes', [])][:7]
        weekly += [0] * (7 - len(weekly))

        # Keep the current achievement definitions, restore unlocked flags
        unlocked = {
            a['id'] for a in data.get('achievements', []) if a.get('is_unlocked')
        }
        achievements = default_achievements()
        for achievement in achievements:
            achievement.is_unlocked = achievement.id in unlocked

        week_start = data.get('week_start')
        return cls(
            weekly_minutes=weekly,
            total_minutes=max(0, int(data.get('total_minutes', 0))),
            streak_days=max(0, int(data.get('streak_days', 0))),
            completed_dates={date.fromisoformat(d) for d in data.get('completed_dates', [])},
            achievements=achievements,
            themes_tried=set(data.get('themes_tried', [])),
            week_start=date.fromisoformat(week_start) if week_start else None,
        )


@dataclass(frozen=True)
class JournalEntry:
    """
    A saved reflection after a session.
    Never changed after creation.
    """
    id: str
    date: datetime
    mood: str
    notes: str
    theme: str
    duration_seconds: int

    @classmethod
    def create(
        cls,
        mood: str,
        notes: str,
        theme: str,
        duration_seconds: int,
        when: Optional[datetime] = None
    ) -> "JournalEntry":
        """Build a new entry with a generated id, stamped now by default."""
        return cls(
            id=uuid.uuid4().hex,
            date=when or datetime.now(),
            mood=mood,
            notes=notes,
            theme=theme,
            duration_seconds=duration_seconds,
        )

    @property
    def duration_minutes(self) -> int:
        return self.duration_seconds // 60
