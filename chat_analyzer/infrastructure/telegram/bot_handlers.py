# chat_analyzer/infrastructure/telegram/bot_handlers.py
import logging
from typing import List, Optional, Set

from telegram import Update
from telegram.ext import ContextTypes

from ...domain.exceptions import ChatAnalysisError
from ...domain.interfaces import IChatAnalysisService
from ...presentation.report_formatter import format_report

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Chat Activity Analyzer\n\n"
    "Send me an exported WhatsApp chat (.txt, exported without media) and I will reply with "
    "a {window_days}-day activity report: active and new participants per day, plus power users.\n\n"
    "Commands:\n"
    "/start - show this message\n"
    "/help - show this message"
)


class TelegramBotHandlers:
    """Telegram bot command and document handlers."""

    def __init__(
            self,
            analysis_service: IChatAnalysisService,
            allowed_user_ids: Optional[List[int]] = None,
            max_upload_bytes: int = 10 * 1024 * 1024,
            window_days: int = 7
    ):
        self._analysis_service = analysis_service
        self._allowed_user_ids: Set[int] = set(allowed_user_ids or [])
        self._max_upload_bytes = max_upload_bytes
        self._help_text = HELP_TEXT.format(window_days=window_days)

    def _is_allowed(self, user_id: int) -> bool:
        """Everyone is allowed when no allow-list is configured."""
        return not self._allowed_user_ids or user_id in self._allowed_user_ids

    async def _deny_if_not_allowed(self, update: Update) -> bool:
        if update.effective_user and self._is_allowed(update.effective_user.id):
            return False
        if update.message:
            await update.message.reply_text("Access denied.")
        return True

    async def start_handler(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if await self._deny_if_not_allowed(update):
            return
        await update.message.reply_text(self._help_text)

    async def document_handler(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Analyze an uploaded chat export and reply with the report."""
        if await self._deny_if_not_allowed(update):
            return

        message = update.message
        document = message.document if message else None
        if document is None:
            return

        file_name = document.file_name or ""
        if not file_name.lower().endswith(".txt") and document.mime_type != "text/plain":
            await message.reply_text("Please upload a .txt file only.")
            return
        if document.file_size and document.file_size > self._max_upload_bytes:
            await message.reply_text(f"File too large. Maximum size is {self._max_upload_bytes} bytes.")
            return

        try:
            tg_file = await document.get_file()
            raw = await tg_file.download_as_bytearray()
            try:
                text = bytes(raw).decode("utf-8-sig")
            except UnicodeDecodeError:
                await message.reply_text("File is not valid UTF-8 text. Please upload an exported chat .txt file.")
                return

            result = await self._analysis_service.analyze_chat(text)
            logger.info(f"Analyzed '{file_name}' for user {update.effective_user.id}: {result.event_count} messages")
            await message.reply_text(format_report(result))
        except ChatAnalysisError as e:
            await message.reply_text(str(e))
        except Exception as e:
            logger.error(f"Error analyzing chat document '{file_name}': {e}", exc_info=True)
            await message.reply_text("Analysis failed. Please try again later.")
