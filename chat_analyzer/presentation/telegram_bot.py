# chat_analyzer/presentation/telegram_bot.py
import asyncio
import logging
from telegram.ext import Application, CommandHandler, MessageHandler, filters

from ..infrastructure.telegram.bot_handlers import TelegramBotHandlers

logger = logging.getLogger(__name__)


class TelegramBotApplication:
    """Manages the Telegram bot application setup and execution."""

    def __init__(self, token: str, handlers_class: TelegramBotHandlers):
        if not token:
            raise ValueError("Telegram bot token is required.")
        self.token = token
        self.handlers = handlers_class
        self.application = Application.builder().token(self.token).build()
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Setup command and document handlers."""
        self.application.add_handler(CommandHandler("start", self.handlers.start_handler))
        self.application.add_handler(CommandHandler("help", self.handlers.start_handler))
        self.application.add_handler(MessageHandler(filters.Document.ALL, self.handlers.document_handler))

        logger.info("Telegram bot handlers configured.")

    async def run(self) -> None:
        """Start the Telegram bot polling and keep it alive until cancelled."""
        logger.info("Starting Chat Analyzer Telegram Bot...")
        try:
            await self.application.initialize()
            await self.application.start()
            await self.application.updater.start_polling()
            logger.info("Chat Analyzer Telegram Bot started successfully.")
            while True:
                await asyncio.sleep(3600)
        except asyncio.CancelledError:
            logger.info("Telegram bot task cancelled.")
            raise
        except Exception as e:
            logger.error(f"Error running Telegram bot: {e}", exc_info=True)
        finally:
            logger.info("Stopping Chat Analyzer Telegram Bot...")
            if self.application.updater and self.application.updater.running:
                await self.application.updater.stop()
            if self.application.running:
                await self.application.stop()
            await self.application.shutdown()
            logger.info("Chat Analyzer Telegram Bot stopped.")
