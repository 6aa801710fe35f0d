# chat_analyzer/infrastructure/aggregation/window_aggregator.py
import logging
from datetime import datetime, timedelta
from typing import Dict, Iterable, List

from ...domain.interfaces import IWindowAggregator
from ...domain.models import (
    DayBucket, DayKey, DailyStat, Event, PowerUser, Report, ReportWindow,
    UserWindowState, day_key_of
)

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 7
DEFAULT_POWER_USER_MIN_DAYS = 4


class WindowAggregator(IWindowAggregator):
    """
    Single-pass aggregation of events into a trailing window of calendar days.
    All state lives inside one aggregate() call, so an instance can be shared
    between concurrent analyses.
    """

    def __init__(
            self,
            window_days: int = DEFAULT_WINDOW_DAYS,
            power_user_min_days: int = DEFAULT_POWER_USER_MIN_DAYS
    ):
        if window_days < 1:
            raise ValueError(f"window_days must be at least 1, got {window_days}")
        if power_user_min_days < 1:
            raise ValueError(f"power_user_min_days must be at least 1, got {power_user_min_days}")
        self.window_days = window_days
        self.power_user_min_days = power_user_min_days

    def window_for(self, now: datetime) -> ReportWindow:
        """The window of `window_days` calendar days ending on the day of `now`, inclusive."""
        today = day_key_of(now)
        return ReportWindow(start=today - timedelta(days=self.window_days - 1), end=today)

    def aggregate(self, events: Iterable[Event], now: datetime) -> Report:
        window = self.window_for(now)
        buckets: Dict[DayKey, DayBucket] = {}
        users: Dict[str, UserWindowState] = {}
        in_window = 0

        for event in events:
            day = day_key_of(event.timestamp)
            if day < window.start or day > window.end:
                continue
            in_window += 1

            bucket = buckets.get(day)
            if bucket is None:
                bucket = buckets[day] = DayBucket()
            bucket.active_users.add(event.sender)

            state = users.get(event.sender)
            if state is None:
                state = users[event.sender] = UserWindowState(first_seen_day=day)
            elif day < state.first_seen_day:
                # Exports are chronological, but merged or edited logs may not be
                state.first_seen_day = day
            state.active_days.add(day)

        for sender, state in users.items():
            buckets[state.first_seen_day].new_users.add(sender)

        daily_stats: List[DailyStat] = []
        for offset in range(self.window_days):
            day = window.start + timedelta(days=offset)
            bucket = buckets.get(day)
            if bucket is None:
                daily_stats.append(DailyStat(date=day))
            else:
                daily_stats.append(DailyStat(
                    date=day,
                    active_users=len(bucket.active_users),
                    new_users=len(bucket.new_users)
                ))

        power_users = [
            PowerUser(user=sender, active_days=len(state.active_days))
            for sender, state in users.items()
            if len(state.active_days) >= self.power_user_min_days
        ]
        # Most active first; ties by name so repeated runs produce identical reports
        power_users.sort(key=lambda p: (-p.active_days, p.user))

        logger.debug(
            f"Aggregated {in_window} in-window events for {window.start.isoformat()}..{window.end.isoformat()}: "
            f"{len(users)} senders, {len(power_users)} power users"
        )
        return Report(window=window, daily_stats=tuple(daily_stats), power_users=tuple(power_users))
