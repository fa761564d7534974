"""
Firebase Storage REST client.

Uploads raw bytes with a single media upload request and builds the public
download URL from the token Storage returns.
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from shared.exceptions import PermissionDeniedError, TransportError
from shared.http import error_payload, read_json

from .exceptions import StorageUploadError
from .interfaces import IStorageClient

logger = logging.getLogger(__name__)

STORAGE_BASE_URL = "https://firebasestorage.googleapis.com/v0"


class StorageClient(IStorageClient):
    """Uploader for one Storage bucket."""

    def __init__(
        self,
        bucket: str,
        http: httpx.AsyncClient,
        base_url: str = STORAGE_BASE_URL,
    ) -> None:
        self._bucket = bucket
        self._http = http
        self._base_url = base_url.rstrip("/")

    def download_url(self, path: str, download_token: Optional[str] = None) -> str:
        url = f"{self._base_url}/b/{self._bucket}/o/{quote(path, safe='')}?alt=media"
        if download_token:
            url += f"&token={download_token}"
        return url

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: str,
        token: Optional[str] = None,
    ) -> str:
        headers = {"Content-Type": content_type}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._http.post(
                f"{self._base_url}/b/{self._bucket}/o",
                params={"uploadType": "media", "name": path},
                content=data,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise TransportError("storage", str(e) or type(e).__name__)

        if response.status_code in (401, 403):
            raise PermissionDeniedError()
        if not response.is_success:
            error = error_payload(response)
            raise StorageUploadError(
                str(error.get("message") or f"HTTP {response.status_code}"),
                status_code=response.status_code,
            )

        metadata = read_json(response)
        # Several comma-separated tokens are possible; any one works
        download_token = str(metadata.get("downloadTokens") or "").split(",")[0] or None
        logger.info(f"Uploaded {len(data)} bytes to {path}")
        return self.download_url(metadata.get("name") or path, download_token)
