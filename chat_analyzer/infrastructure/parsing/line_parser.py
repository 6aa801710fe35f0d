# chat_analyzer/infrastructure/parsing/line_parser.py
import re
import logging
from collections import Counter
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from ...domain.interfaces import ILineParser
from ...domain.models import Event, HeaderDialect, ParseResult, ParsedChat, SkipReason

logger = logging.getLogger(__name__)

# "5/1/24, 9:00 AM - Alice: hi"  /  "05/01/2024, 21:00 - Alice: hi"
HEADER_PATTERN = re.compile(
    r'^(\d{1,2})/(\d{1,2})/(\d{4}|\d{2}),\s+(\d{1,2}):(\d{2})\s*([AaPp][Mm])?\s+-\s+([^:]+):\s+(.+)$'
)

# Direction marks some exports put in front of each line
_LEADING_MARKS = '\u200e\u200f'


def parse_dialects(names: Iterable[str]) -> Tuple[HeaderDialect, ...]:
    """Converts configured dialect names into HeaderDialect values."""
    dialects: List[HeaderDialect] = []
    for name in names:
        cleaned = name.strip().lower()
        if not cleaned:
            continue
        try:
            dialect = HeaderDialect(cleaned)
        except ValueError:
            raise ValueError(
                f"Unknown header dialect '{name}'. "
                f"Supported: {', '.join(d.value for d in HeaderDialect)}"
            )
        if dialect not in dialects:
            dialects.append(dialect)
    if not dialects:
        raise ValueError("At least one header dialect must be enabled.")
    return tuple(dialects)


def to_24_hour(hour: int, meridiem: Optional[str]) -> int:
    """Applies an optional AM/PM suffix to an hour value."""
    if not meridiem:
        return hour
    meridiem = meridiem.lower()
    if meridiem == "pm" and hour < 12:
        return hour + 12
    if meridiem == "am" and hour == 12:
        return 0
    return hour


class WhatsAppLineParser(ILineParser):
    """Recognizes WhatsApp-style message headers and extracts (timestamp, sender)."""

    def __init__(
            self,
            dialects: Sequence[HeaderDialect] = (HeaderDialect.DAY_FIRST, HeaderDialect.MONTH_FIRST)
    ):
        if not dialects:
            raise ValueError("At least one header dialect must be enabled.")
        self.dialects = tuple(dialects)

    def parse_line(self, line: str) -> ParseResult:
        match = HEADER_PATTERN.match(line.rstrip('\r').lstrip(_LEADING_MARKS))
        if not match:
            return ParseResult.skipped(SkipReason.NO_MATCH)

        first, second, year_str, hour_str, minute_str, meridiem, sender, _body = match.groups()
        sender = sender.strip()
        if not sender:
            return ParseResult.skipped(SkipReason.NO_MATCH)

        year = int(year_str)
        if year < 100:
            year += 2000
        hour = to_24_hour(int(hour_str), meridiem)
        minute = int(minute_str)

        for dialect in self.dialects:
            if dialect is HeaderDialect.DAY_FIRST:
                day, month = int(first), int(second)
            else:
                month, day = int(first), int(second)
            try:
                timestamp = datetime(year, month, day, hour, minute)
            except ValueError:
                continue
            return ParseResult.matched(Event(timestamp=timestamp, sender=sender))

        return ParseResult.skipped(SkipReason.INVALID_DATETIME)

    def parse_text(self, text: str) -> ParsedChat:
        events: List[Event] = []
        skipped: Counter = Counter()
        lines = re.split(r'\r?\n', text)

        for line in lines:
            result = self.parse_line(line)
            if result.is_matched:
                events.append(result.event)
            else:
                skipped[result.reason] += 1

        logger.debug(f"Parsed {len(events)} events from {len(lines)} lines; skipped: {dict(skipped)}")
        return ParsedChat(events=tuple(events), total_lines=len(lines), skipped=skipped)
