from datetime import datetime

import pytest

from chat_analyzer.application.services.chat_analysis_service import ChatAnalysisService
from chat_analyzer.domain.models import HeaderDialect
from chat_analyzer.infrastructure.aggregation.window_aggregator import WindowAggregator
from chat_analyzer.infrastructure.parsing.line_parser import WhatsAppLineParser

# Window for this reference instant is 2024-01-01 .. 2024-01-07
REFERENCE_TIME = datetime(2024, 1, 7, 12, 0)


def header(timestamp: datetime, sender: str, body: str = "hello", twelve_hour: bool = True,
           four_digit_year: bool = False) -> str:
    """Formats a day-first message header line the way chat exports write them."""
    year = f"{timestamp.year}" if four_digit_year else f"{timestamp.year % 100:02d}"
    if twelve_hour:
        hour = timestamp.hour % 12 or 12
        suffix = "AM" if timestamp.hour < 12 else "PM"
        clock = f"{hour}:{timestamp.minute:02d} {suffix}"
    else:
        clock = f"{timestamp.hour:02d}:{timestamp.minute:02d}"
    return f"{timestamp.day}/{timestamp.month}/{year}, {clock} - {sender}: {body}"


@pytest.fixture
def parser():
    return WhatsAppLineParser()


@pytest.fixture
def day_first_parser():
    return WhatsAppLineParser(dialects=(HeaderDialect.DAY_FIRST,))


@pytest.fixture
def aggregator():
    return WindowAggregator()


@pytest.fixture
def service(parser, aggregator):
    return ChatAnalysisService(line_parser=parser, aggregator=aggregator, clock=lambda: REFERENCE_TIME)
