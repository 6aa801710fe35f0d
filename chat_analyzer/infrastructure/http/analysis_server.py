# chat_analyzer/infrastructure/http/analysis_server.py
from fastapi import FastAPI, File, Header, HTTPException, Depends, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional
import logging

from ...domain.exceptions import ChatAnalysisError, EmptyChatError
from ...domain.interfaces import IChatAnalysisService

logger = logging.getLogger(__name__)


class WindowModel(BaseModel):
    start: str
    end: str


class DailyStatModel(BaseModel):
    date: str
    activeUsers: int
    newUsers: int


class PowerUserModel(BaseModel):
    user: str
    activeDays: int


class AnalysisResponse(BaseModel):
    """Response model for an analyzed upload."""
    message: str
    fileName: str
    originalName: str
    window: WindowModel
    dailyStats: List[DailyStatModel]
    powerUsers: List[PowerUserModel]


class AnalysisHttpServer:
    """HTTP server accepting chat export uploads and returning activity reports."""

    def __init__(
            self,
            analysis_service: IChatAnalysisService,
            api_key: Optional[str] = None,
            max_upload_bytes: int = 10 * 1024 * 1024,
            cors_origins: Optional[List[str]] = None
    ):
        self.analysis_service = analysis_service
        self.api_key = api_key
        self.max_upload_bytes = max_upload_bytes
        self.app = FastAPI(title="Chat Analyzer API", version="1.0.0")
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins or ["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )
        self._setup_routes()

    def _verify_api_key(self, x_api_key: Optional[str] = Header(None)) -> bool:
        """Verify API key for authentication, when one is configured."""
        if self.api_key and x_api_key != self.api_key:
            raise HTTPException(status_code=401, detail="Invalid API key")
        return True

    @staticmethod
    def _error(status_code: int, message: str) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"error": message})

    def _setup_routes(self) -> None:
        """Setup HTTP routes."""

        @self.app.get("/", response_class=PlainTextResponse)
        async def root():
            return "Chat Analyzer Backend Running"

        @self.app.get("/health")
        async def health_check():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": datetime.now()}

        @self.app.post(
            "/api/chat/upload",
            response_model=AnalysisResponse,
            responses={400: {}, 401: {}, 413: {}, 500: {}}
        )
        async def upload_chat(
                chatFile: Optional[UploadFile] = File(None),
                _: bool = Depends(self._verify_api_key)
        ):
            """Analyze an exported chat .txt file sent as multipart field 'chatFile'."""
            if chatFile is None:
                return self._error(400, str(EmptyChatError()))

            try:
                raw = await chatFile.read(self.max_upload_bytes + 1)
                if len(raw) > self.max_upload_bytes:
                    return self._error(413, f"File too large. Maximum size is {self.max_upload_bytes} bytes.")
                try:
                    text = raw.decode("utf-8-sig")
                except UnicodeDecodeError:
                    return self._error(400, "File is not valid UTF-8 text. Please upload an exported chat .txt file.")

                result = await self.analysis_service.analyze_chat(text)
                original_name = chatFile.filename or "chat.txt"
                return {
                    "message": "Analysis complete",
                    "fileName": f"{int(result.reference_time.timestamp() * 1000)}-{original_name}",
                    "originalName": original_name,
                    **result.report.to_dict(),
                }
            except ChatAnalysisError as e:
                return self._error(400, str(e))
            except Exception as e:
                logger.error(f"Error analyzing uploaded chat: {e}", exc_info=True)
                return self._error(500, "File upload failed")
            finally:
                await chatFile.close()

        @self.app.exception_handler(HTTPException)
        async def http_error_handler(request, exc: HTTPException):
            return self._error(exc.status_code, str(exc.detail))
