"""Serves an order's stored document back to staff.

Local references are streamed from disk, remote URLs are fetched and relayed.
Inline PDFs go out without a Content-Disposition header so browsers open them
in their built-in viewer instead of downloading.
"""
import logging
import mimetypes
from urllib.parse import quote

import httpx
from fastapi.responses import FileResponse, Response

from translation_desk.config import settings
from translation_desk.errors import NotFoundError, StorageError
from translation_desk.models.order import Order
from translation_desk.services.storage_service import LocalFileStorage, is_remote_reference

logger = logging.getLogger(__name__)

INLINE = "inline"
ATTACHMENT = "attachment"


def content_disposition(disposition: str, filename: str) -> str:
    try:
        filename.encode("ascii")
    except UnicodeEncodeError:
        return f"{disposition}; filename*=utf-8''{quote(filename)}"
    safe = filename.replace('"', "").replace("\\", "")
    return f'{disposition}; filename="{safe}"'


def resolve_media_type(order: Order, upstream: str | None = None) -> str:
    if order.file_type:
        return order.file_type
    if upstream:
        return upstream.split(";")[0].strip()
    guessed, _ = mimetypes.guess_type(order.original_file_name)
    return guessed or "application/octet-stream"


def is_pdf(media_type: str, filename: str) -> bool:
    return media_type == "application/pdf" or filename.lower().endswith(".pdf")


def build_headers(order: Order, media_type: str, disposition: str) -> dict[str, str]:
    if disposition == INLINE and is_pdf(media_type, order.original_file_name):
        return {}
    return {"Content-Disposition": content_disposition(disposition, order.original_file_name or "download")}


class FileProxy:
    def __init__(
        self,
        storage: LocalFileStorage,
        *,
        timeout: float | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._storage = storage
        self._timeout = timeout or settings.file_fetch_timeout_seconds
        self._client = http_client

    def _fetch(self, url: str) -> httpx.Response:
        client = self._client or httpx.Client(timeout=self._timeout, follow_redirects=True)
        try:
            response = client.get(url)
        except httpx.HTTPError as exc:
            logger.error("Fetching %s failed: %s", url, exc)
            raise StorageError("Could not retrieve the file from storage") from exc
        finally:
            if self._client is None:
                client.close()
        if response.status_code == 404:
            raise NotFoundError("File not found in storage")
        if response.status_code >= 400:
            logger.error("Storage returned %s for %s", response.status_code, url)
            raise StorageError("Could not retrieve the file from storage")
        return response

    def respond(self, order: Order, disposition: str) -> Response:
        if is_remote_reference(order.file_url):
            upstream = self._fetch(order.file_url)
            media_type = resolve_media_type(order, upstream.headers.get("content-type"))
            return Response(
                content=upstream.content,
                media_type=media_type,
                headers=build_headers(order, media_type, disposition),
            )

        path = self._storage.resolve(order.file_url)
        if path is None:
            raise NotFoundError("File missing from storage")
        media_type = resolve_media_type(order)
        return FileResponse(
            path=str(path),
            media_type=media_type,
            headers=build_headers(order, media_type, disposition),
        )
