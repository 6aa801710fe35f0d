# chat_analyzer/domain/interfaces.py
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, Optional

from .models import ParseResult, ParsedChat, Event, Report, AnalysisResult


class ILineParser(ABC):
    """Parser interface turning raw export lines into events."""

    @abstractmethod
    def parse_line(self, line: str) -> ParseResult:
        """Parse one line. Never raises for malformed input."""
        pass

    @abstractmethod
    def parse_text(self, text: str) -> ParsedChat:
        """Parse a whole export, collecting events in input order."""
        pass


class IWindowAggregator(ABC):
    """Aggregator interface for trailing-window reports."""

    @abstractmethod
    def aggregate(self, events: Iterable[Event], now: datetime) -> Report:
        """Build the report for the window ending on the day of `now`."""
        pass


class IChatAnalysisService(ABC):
    """Service interface for analyzing chat exports."""

    @abstractmethod
    def parse_chat(self, text: str) -> ParsedChat:
        """Extract events from an export without aggregating them."""
        pass

    @abstractmethod
    async def analyze_chat(self, text: Optional[str], now: Optional[datetime] = None) -> AnalysisResult:
        """
        Parse and aggregate an export.
        Raises EmptyChatError for blank input and NoValidMessagesError when no
        message header could be parsed.
        """
        pass
