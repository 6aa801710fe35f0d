# chat_analyzer/domain/models.py
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, date
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

# Calendar-day identity used for bucketing; str form is date.isoformat() (YYYY-MM-DD)
DayKey = date


def day_key_of(timestamp: datetime) -> DayKey:
    """Drops the time of day from a timestamp."""
    return timestamp.date()


class HeaderDialect(str, Enum):
    """Field order of the date part of a message header."""
    DAY_FIRST = "day_first"
    MONTH_FIRST = "month_first"


class SkipReason(str, Enum):
    """Why a line produced no event."""
    NO_MATCH = "no_match"
    INVALID_DATETIME = "invalid_datetime"


@dataclass(frozen=True)
class Event:
    """A single chat message header."""
    timestamp: datetime
    sender: str


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing one line: either a matched event or a skip."""
    event: Optional[Event] = None
    reason: Optional[SkipReason] = None

    @classmethod
    def matched(cls, event: Event) -> "ParseResult":
        return cls(event=event)

    @classmethod
    def skipped(cls, reason: SkipReason) -> "ParseResult":
        return cls(reason=reason)

    @property
    def is_matched(self) -> bool:
        return self.event is not None


@dataclass(frozen=True)
class ParsedChat:
    """Events extracted from a full export plus per-reason skip counts."""
    events: Tuple[Event, ...]
    total_lines: int
    skipped: Counter = field(default_factory=Counter)

    @property
    def has_events(self) -> bool:
        return bool(self.events)


@dataclass
class DayBucket:
    """Senders active, and senders first seen, on one day of the window."""
    active_users: Set[str] = field(default_factory=set)
    new_users: Set[str] = field(default_factory=set)


@dataclass
class UserWindowState:
    """Per-sender state, scoped to the analysis window."""
    first_seen_day: DayKey
    active_days: Set[DayKey] = field(default_factory=set)


@dataclass(frozen=True)
class DailyStat:
    """Activity counts for one day."""
    date: DayKey
    active_users: int = 0
    new_users: int = 0


@dataclass(frozen=True)
class PowerUser:
    user: str
    active_days: int


@dataclass(frozen=True)
class ReportWindow:
    start: DayKey
    end: DayKey


@dataclass(frozen=True)
class Report:
    """Trailing-window activity report."""
    window: ReportWindow
    daily_stats: Tuple[DailyStat, ...]
    power_users: Tuple[PowerUser, ...]

    def to_dict(self) -> Dict:
        """Serializes the report into its JSON wire shape."""
        return {
            "window": {
                "start": self.window.start.isoformat(),
                "end": self.window.end.isoformat(),
            },
            "dailyStats": [
                {
                    "date": stat.date.isoformat(),
                    "activeUsers": stat.active_users,
                    "newUsers": stat.new_users,
                }
                for stat in self.daily_stats
            ],
            "powerUsers": [
                {"user": power_user.user, "activeDays": power_user.active_days}
                for power_user in self.power_users
            ],
        }


@dataclass(frozen=True)
class AnalysisResult:
    """A report together with the parse that fed it."""
    report: Report
    parsed: ParsedChat
    reference_time: datetime

    @property
    def event_count(self) -> int:
        return len(self.parsed.events)

    def senders(self) -> List[str]:
        """Distinct senders seen anywhere in the export, in first-seen order."""
        return list(dict.fromkeys(event.sender for event in self.parsed.events))
