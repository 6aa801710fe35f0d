# chat_analyzer/presentation/analyzer_client.py - Library for callers of the upload API
import aiohttp
import logging
from typing import Optional, Union

logger = logging.getLogger(__name__)


class ChatAnalyzerClient:
    """Client for uploading chat exports to the analyzer server."""

    def __init__(self, base_url: str, api_key: Optional[str] = None):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self.session is None or self.session.closed:
            headers = {"X-API-Key": self.api_key} if self.api_key else None
            self.session = aiohttp.ClientSession(headers=headers)
        return self.session

    async def upload_chat(self, content: Union[str, bytes], filename: str = "chat.txt") -> Optional[dict]:
        """Upload an export and return the report JSON, or None on failure."""
        if isinstance(content, str):
            content = content.encode("utf-8")

        form = aiohttp.FormData()
        form.add_field("chatFile", content, filename=filename, content_type="text/plain")

        try:
            session = await self._get_session()
            async with session.post(f"{self.base_url}/api/chat/upload", data=form) as response:
                if response.status == 200:
                    logger.debug(f"Chat '{filename}' analyzed")
                    return await response.json()
                else:
                    error_text = await response.text()
                    logger.error(f"Failed to analyze chat: {response.status} - {error_text}")
                    return None
        except aiohttp.ClientError as e:
            logger.error(f"Error uploading chat: {e}")
            return None

    async def health(self) -> bool:
        """Check whether the analyzer server is up."""
        try:
            session = await self._get_session()
            async with session.get(f"{self.base_url}/health") as response:
                return response.status == 200
        except aiohttp.ClientError as e:
            logger.error(f"Error checking analyzer health: {e}")
            return False

    async def close(self):
        """Close the HTTP session."""
        if self.session and not self.session.closed:
            await self.session.close()
