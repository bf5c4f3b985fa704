"""
Download Manager
Client for the search/download API and temp-file media delivery
"""

import os
import time
from typing import Any, Dict, Optional

import httpx

from bot.transport import MessagingTransport
from utils.logger import LoggerMixin
from utils.whatsapp import WhatsAppUtils

API_TIMEOUT = 60.0
DOWNLOAD_TIMEOUT = 300.0
CHUNK_SIZE = 64 * 1024


class DownloadApiError(Exception):
    """Raised when the download API fails or returns no usable data."""


class DownloadManager(LoggerMixin):
    """Search/download API access plus local file handling."""

    def __init__(
        self,
        api_base: str,
        api_key: str,
        temp_dir: str,
        max_file_size: int,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__("Download")
        self.api_base = api_base.rstrip("/")
        self.api_key = api_key
        self.temp_dir = temp_dir
        self.max_file_size = max_file_size
        self._client = client or httpx.AsyncClient(follow_redirects=True)

    async def api_request(self, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Any:
        """
        POST to an API endpoint.

        Args:
            endpoint: Path such as ``/search/youtube``
            data: JSON body

        Returns:
            The response's ``data`` field

        Raises:
            DownloadApiError: On transport failure, error status or ``success: false``
        """
        try:
            response = await self._client.post(
                f"{self.api_base}{endpoint}",
                json=data or {},
                headers={"Content-Type": "application/json", "x-api-key": self.api_key},
                timeout=API_TIMEOUT,
            )
        except httpx.HTTPError as e:
            self.error(f"API Error on {endpoint}: {e}")
            raise DownloadApiError("API request failed") from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            self.error(f"API Error on {endpoint}: {response.status_code} {message or ''}")
            raise DownloadApiError(message or "API request failed")

        if not isinstance(body, dict) or not body.get("success"):
            message = body.get("message") if isinstance(body, dict) else None
            raise DownloadApiError(message or "API request failed")

        return body.get("data")

    async def get_file_size(self, url: str) -> int:
        """Content length of a remote file, 0 if unknown."""
        try:
            response = await self._client.head(url, timeout=API_TIMEOUT)
            return int(response.headers.get("content-length") or 0)
        except (httpx.HTTPError, ValueError) as e:
            self.debug(f"HEAD {url} failed: {e}")
            return 0

    async def download_file(self, url: str, filename: str) -> str:
        """
        Stream a remote file into the temp directory.

        Args:
            url: File URL
            filename: Local file name

        Returns:
            Local path
        """
        os.makedirs(self.temp_dir, exist_ok=True)
        filepath = os.path.join(self.temp_dir, filename)

        try:
            async with self._client.stream("GET", url, timeout=DOWNLOAD_TIMEOUT) as response:
                response.raise_for_status()
                with open(filepath, "wb") as handle:
                    async for chunk in response.aiter_bytes(CHUNK_SIZE):
                        handle.write(chunk)
        except httpx.HTTPError as e:
            self.cleanup_file(filepath)
            raise DownloadApiError(f"Download failed: {e}") from e

        self.debug(f"Downloaded {url} to {filepath}")
        return filepath

    def temp_filename(self, extension: str) -> str:
        return f"{int(time.time() * 1000)}{extension}"

    async def send_file(
        self,
        transport: MessagingTransport,
        chat_id: str,
        filepath: str,
        caption: str,
        mimetype: str,
    ) -> None:
        """
        Upload a downloaded file, refusing files above the size limit.

        The local file is always removed afterwards.
        """
        try:
            file_size = os.path.getsize(filepath)
            if file_size > self.max_file_size:
                await transport.send_message(
                    chat_id,
                    f"⚠️ File too large ({WhatsAppUtils.format_size(file_size)})\n"
                    "WhatsApp limit is 2GB. Please use a different quality or format.",
                )
                return
            await transport.send_file(chat_id, filepath, caption, mimetype)
        finally:
            self.cleanup_file(filepath)

    def cleanup_file(self, filepath: str) -> None:
        try:
            if os.path.exists(filepath):
                os.remove(filepath)
        except OSError as e:
            self.error(f"Cleanup error: {e}")

    async def close(self) -> None:
        await self._client.aclose()
