"""
Image Pipeline Orchestrator

Drives Fetcher then Compressor for every image URL of a product
submission and collects two positionally aligned path lists.

Batch semantics are all-or-nothing: the first failure aborts the
call and no partial ProductImageSet is returned.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .compressor import Compressor
from .errors import PipelineError
from .fetcher import FetchResult, Fetcher
from .paths import normalize_paths
from .storage import LocalStorage

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Configuration for batch image processing."""
    max_concurrency: int = 1        # 1 = strictly sequential, in input order
    cleanup_on_failure: bool = True # Remove files written by a failed batch


@dataclass
class ProductImageSet:
    """Original and derived paths, aligned 1:1 with the input URLs."""
    originals: List[str] = field(default_factory=list)
    derived: List[str] = field(default_factory=list)

    def normalized(self) -> "ProductImageSet":
        return ProductImageSet(
            originals=normalize_paths(self.originals),
            derived=normalize_paths(self.derived),
        )


class ImagePipeline:
    """
    Usage:
        pipeline = ImagePipeline(storage, fetcher, compressor)
        image_set = await pipeline.process_images(urls)
    """

    def __init__(
        self,
        storage: LocalStorage,
        fetcher: Fetcher,
        compressor: Compressor,
        config: Optional[PipelineConfig] = None,
    ):
        self.storage = storage
        self.fetcher = fetcher
        self.compressor = compressor
        self.config = config or PipelineConfig()

    async def process_images(self, urls: Sequence[str]) -> ProductImageSet:
        """
        Fetch and compress every URL.

        Raises:
            StorageInitError: a storage root could not be created.
            PipelineError: the first failure of any stage, for any URL.
        """
        urls = list(urls)
        self.storage.ensure_roots()

        if not urls:
            return ProductImageSet()

        logger.info(f"[ImagePipeline] Processing {len(urls)} images")

        written: List[str] = []
        try:
            if self.config.max_concurrency <= 1 or len(urls) == 1:
                results = []
                for url in urls:
                    results.append(await self._process_one(url, written))
            else:
                results = await self._process_concurrently(urls, written)
        except BaseException as e:
            if isinstance(e, PipelineError):
                logger.error(f"[ImagePipeline] Batch aborted: {e.message} {e.context()}")
            if self.config.cleanup_on_failure:
                self._discard(written)
            raise

        image_set = ProductImageSet(
            originals=[r.original_path for r in results],
            derived=[r.compressed_path for r in results],
        )
        logger.info(f"[ImagePipeline] Batch complete: {len(urls)} images")
        return image_set

    async def _process_one(self, url: str, written: List[str]) -> FetchResult:
        """Fetch one URL and derive its compressed copy."""
        fetched = await self.fetcher.fetch(url)
        written.append(fetched.original_path)

        try:
            self.compressor.compress(fetched.original_path, fetched.compressed_path)
        except PipelineError as e:
            e.url = e.url or url
            raise
        written.append(fetched.compressed_path)
        return fetched

    async def _process_concurrently(
        self,
        urls: List[str],
        written: List[str],
    ) -> List[FetchResult]:
        """Run fetch+compress pairs under a semaphore, one result slot per URL."""
        semaphore = asyncio.Semaphore(self.config.max_concurrency)
        slots: List[Optional[FetchResult]] = [None] * len(urls)

        async def run_with_semaphore(index: int, url: str) -> None:
            async with semaphore:
                slots[index] = await self._process_one(url, written)

        tasks = [
            asyncio.create_task(run_with_semaphore(i, url))
            for i, url in enumerate(urls)
        ]

        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return [slot for slot in slots if slot is not None]

    def _discard(self, paths: List[str]) -> None:
        removed = sum(1 for path in paths if self.storage.delete_file(path))
        if removed:
            logger.info(f"[ImagePipeline] Removed {removed} files from failed batch")


async def create_product_images(
    pipeline: ImagePipeline,
    urls: Sequence[str],
) -> ProductImageSet:
    """
    Process a product's image URLs and return forward-slash paths.

    Raises:
        PipelineError: any pipeline failure; nothing should be persisted.
    """
    image_set = await pipeline.process_images(urls)
    return image_set.normalized()
