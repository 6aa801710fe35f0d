# main.py - HTTP upload API with optional Telegram front end
import asyncio
import logging
import uvicorn

from chat_analyzer.config.settings import settings
from chat_analyzer.domain.interfaces import IChatAnalysisService
from chat_analyzer.infrastructure.parsing.line_parser import WhatsAppLineParser, parse_dialects
from chat_analyzer.infrastructure.aggregation.window_aggregator import WindowAggregator
from chat_analyzer.application.services.chat_analysis_service import ChatAnalysisService
from chat_analyzer.infrastructure.telegram.bot_handlers import TelegramBotHandlers
from chat_analyzer.presentation.telegram_bot import TelegramBotApplication
from chat_analyzer.infrastructure.http.analysis_server import AnalysisHttpServer

# Global variables to store app components
telegram_bot_app = None
analysis_http_server = None


def configure_logging():
    """Configures application-wide logging."""
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=settings.LOG_LEVEL
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("telegram.ext").setLevel(logging.INFO)
    logging.getLogger("uvicorn").setLevel(logging.INFO)


def initialize_components():
    """Initialize all application components."""
    global telegram_bot_app, analysis_http_server

    logger = logging.getLogger(__name__)
    logger.info("Initializing application components...")

    # 1. Initialize the parsing and aggregation core
    line_parser = WhatsAppLineParser(dialects=parse_dialects(settings.CHAT_HEADER_DIALECTS))
    aggregator = WindowAggregator(
        window_days=settings.WINDOW_DAYS,
        power_user_min_days=settings.POWER_USER_MIN_DAYS
    )
    logger.info("Parser and aggregator initialized.")

    # 2. Initialize Services
    analysis_service: IChatAnalysisService = ChatAnalysisService(
        line_parser=line_parser,
        aggregator=aggregator
    )
    logger.info("Services initialized.")

    # 3. Initialize Telegram Bot, if configured
    if settings.TELEGRAM_BOT_TOKEN:
        telegram_handlers = TelegramBotHandlers(
            analysis_service=analysis_service,
            allowed_user_ids=settings.ALLOWED_USER_IDS,
            max_upload_bytes=settings.MAX_UPLOAD_BYTES,
            window_days=settings.WINDOW_DAYS,
        )
        telegram_bot_app = TelegramBotApplication(
            token=settings.TELEGRAM_BOT_TOKEN,
            handlers_class=telegram_handlers
        )
        logger.info("Telegram Bot Application initialized.")

    # 4. Initialize HTTP Server
    analysis_http_server = AnalysisHttpServer(
        analysis_service=analysis_service,
        api_key=settings.API_KEY,
        max_upload_bytes=settings.MAX_UPLOAD_BYTES,
        cors_origins=settings.CORS_ORIGINS
    )
    logger.info("HTTP Analysis Server initialized.")

    return analysis_http_server.app


async def main_async():
    """Main async function."""
    configure_logging()
    logger = logging.getLogger(__name__)
    telegram_task = None

    try:
        app = initialize_components()

        if telegram_bot_app:
            logger.info("Starting Telegram bot...")
            telegram_task = asyncio.create_task(telegram_bot_app.run())

        config = uvicorn.Config(
            app=app,
            host=settings.HTTP_HOST,
            port=settings.HTTP_PORT,
            log_level="info"
        )
        server = uvicorn.Server(config)

        logger.info(f"Starting HTTP server on http://{settings.HTTP_HOST}:{settings.HTTP_PORT}")
        await server.serve()

    except KeyboardInterrupt:
        logger.info("Application shutting down due to KeyboardInterrupt...")
    except Exception as e:
        logger.critical(f"Unhandled exception in main: {e}", exc_info=True)
    finally:
        logger.info("Application shutdown sequence initiated.")
        if telegram_task and not telegram_task.done():
            telegram_task.cancel()
            try:
                await telegram_task
            except asyncio.CancelledError:
                pass
        logger.info("Application finished.")


if __name__ == "__main__":
    asyncio.run(main_async())
