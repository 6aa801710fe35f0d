# chat_analyzer/application/services/chat_analysis_service.py
import logging
from datetime import datetime
from typing import Callable, Optional

from ...domain.exceptions import EmptyChatError, NoValidMessagesError
from ...domain.interfaces import IChatAnalysisService, ILineParser, IWindowAggregator
from ...domain.models import AnalysisResult, ParsedChat

logger = logging.getLogger(__name__)


class ChatAnalysisService(IChatAnalysisService):
    """Service turning a raw chat export into a trailing-window activity report."""

    def __init__(
            self,
            line_parser: ILineParser,
            aggregator: IWindowAggregator,
            clock: Callable[[], datetime] = datetime.now
    ):
        self._line_parser = line_parser
        self._aggregator = aggregator
        self._clock = clock

    def parse_chat(self, text: str) -> ParsedChat:
        return self._line_parser.parse_text(text)

    async def analyze_chat(self, text: Optional[str], now: Optional[datetime] = None) -> AnalysisResult:
        if text is None or not text.strip():
            raise EmptyChatError()

        parsed = self.parse_chat(text)
        if not parsed.has_events:
            logger.info(f"No message headers found in {parsed.total_lines} lines.")
            raise NoValidMessagesError(total_lines=parsed.total_lines)

        reference_time = now or self._clock()
        report = self._aggregator.aggregate(parsed.events, reference_time)
        logger.info(
            f"Analyzed {len(parsed.events)} messages from {parsed.total_lines} lines "
            f"for window {report.window.start.isoformat()}..{report.window.end.isoformat()}"
        )
        logger.debug(f"Skipped lines by reason: {dict(parsed.skipped)}")
        return AnalysisResult(report=report, parsed=parsed, reference_time=reference_time)
