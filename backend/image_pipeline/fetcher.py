"""
Image Fetcher

Handles:
- Downloading a remote image over HTTP
- Resolving the local extension from the response Content-Type
- Streaming the body into the originals root under a random base name
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from .errors import StorageWriteError, TransportError, UnresolvableContentType
from .extensions import resolve_extension
from .naming import new_base_name
from .storage import LocalStorage

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Paths produced by fetching one image URL."""
    url: str
    original_path: str
    compressed_path: str        # Intended location, not written yet
    base_name: str
    extension: str


class Fetcher:
    """
    Downloads images into the originals root of a LocalStorage.

    Usage:
        fetcher = Fetcher(storage, timeout=30)
        result = await fetcher.fetch("https://example.com/a.jpg")
        await fetcher.close()
    """

    def __init__(
        self,
        storage: LocalStorage,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        retries: int = 0,
        retry_backoff: float = 0.5,
        require_success_status: bool = True,
    ):
        self.storage = storage
        self.timeout = timeout
        self.retries = max(0, retries)
        self.retry_backoff = retry_backoff
        self.require_success_status = require_success_status

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
        )

    async def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            await self.client.aclose()

    async def fetch(self, url: str) -> FetchResult:
        """
        Download ``url`` into the originals root.

        Only transport failures are retried, with exponential backoff.

        Raises:
            TransportError: request failed or returned a non-success status.
            UnresolvableContentType: no extension maps to the Content-Type.
            StorageWriteError: the file could not be written.
        """
        attempt = 0
        while True:
            try:
                return await self._fetch_once(url)
            except TransportError as e:
                if attempt >= self.retries:
                    raise
                delay = self.retry_backoff * (2 ** attempt)
                attempt += 1
                logger.warning(
                    f"[Fetcher] Retry {attempt}/{self.retries} in {delay:.2f}s: "
                    f"{url[:80]} ({e.message})"
                )
                await asyncio.sleep(delay)

    async def _fetch_once(self, url: str) -> FetchResult:
        logger.info(f"[Fetcher] Downloading: {url[:80]}")
        original_path: Optional[str] = None
        try:
            async with self.client.stream("GET", url, timeout=self.timeout) as response:
                if self.require_success_status and not response.is_success:
                    logger.error(f"[Fetcher] HTTP {response.status_code}: {url[:80]}")
                    raise TransportError(
                        f"failed to download image: HTTP {response.status_code}",
                        url=url,
                        status_code=response.status_code,
                    )

                content_type = response.headers.get("content-type", "")
                try:
                    extension = resolve_extension(content_type)
                except UnresolvableContentType as e:
                    e.url = url
                    logger.error(
                        f"[Fetcher] Failed to detect file extension for "
                        f"content type {content_type!r}: {url[:80]}"
                    )
                    raise

                base_name = new_base_name()
                filename = f"{base_name}{extension}"
                try:
                    original_path = await self.storage.write_file(
                        self.storage.originals_dir,
                        filename,
                        response.aiter_bytes(),
                    )
                except StorageWriteError as e:
                    e.url = url
                    raise
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self._discard(original_path)
            logger.error(f"[Fetcher] Failed to download image {url[:80]}: {e}")
            raise TransportError(f"failed to download image: {e}", url=url) from e
        except BaseException:
            # Closing the response can still fail or be cancelled after the write
            self._discard(original_path)
            raise

        compressed_path = self.storage.path_for(self.storage.compressed_dir, filename)
        logger.info(f"[Fetcher] Image downloaded: {url[:80]} -> {original_path}")

        return FetchResult(
            url=url,
            original_path=original_path,
            compressed_path=compressed_path,
            base_name=base_name,
            extension=extension,
        )

    def _discard(self, original_path: Optional[str]) -> None:
        if original_path is not None:
            self.storage.delete_file(original_path)
