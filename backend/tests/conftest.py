"""
Catalog test configuration

Shared pytest fixtures:
- storage: LocalStorage rooted in a temporary directory
- image_bytes: encode a generated image in a given format
- remote: fake image host served through httpx.MockTransport
"""

import sys
from io import BytesIO
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import httpx
import pytest
from PIL import Image

# Add the backend directory to the Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from image_pipeline import Compressor, Fetcher, ImagePipeline, LocalStorage, PipelineConfig


# ============================================
# Image Helpers
# ============================================

def make_image_bytes(fmt: str = "JPEG", size: Tuple[int, int] = (100, 50), mode: str = "RGB") -> bytes:
    """Encode a gradient image so resampling has real content to work on."""
    gradient = Image.linear_gradient("L")
    img = Image.merge("RGB", (
        gradient.transpose(Image.Transpose.ROTATE_90).resize(size),
        gradient.resize(size),
        Image.new("L", size, 128),
    ))
    if mode != "RGB":
        img = img.convert(mode)
    buffer = BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    return make_image_bytes


# ============================================
# Fake Remote Host
# ============================================

class FakeRemote:
    """
    Serves canned responses by URL and records requested URLs.

    Usage:
        remote.add("https://x/a.jpg", body, "image/jpeg")
        remote.fail("https://x/down")
    """

    def __init__(self):
        self.responses: Dict[str, Tuple[int, str, bytes]] = {}
        self.failures: Dict[str, int] = {}
        self.requested: List[str] = []

    def add(self, url: str, body: bytes, content_type: str = "image/jpeg", status: int = 200) -> None:
        self.responses[url] = (status, content_type, body)

    def fail(self, url: str, times: int = 1_000_000) -> None:
        """Raise a connect error for the next ``times`` requests to url."""
        self.failures[url] = times

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)

        if self.failures.get(url, 0) > 0:
            self.failures[url] -= 1
            raise httpx.ConnectError("connection refused", request=request)

        if url not in self.responses:
            return httpx.Response(404, headers={"content-type": "text/plain"}, content=b"not found")

        status, content_type, body = self.responses[url]
        headers = {"content-type": content_type} if content_type else {}
        return httpx.Response(status, headers=headers, content=body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


# ============================================
# Pipeline Fixtures
# ============================================

@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(tmp_path / "images", tmp_path / "compressed_images")


@pytest.fixture
def make_pipeline(storage, remote):
    """Build an ImagePipeline wired to the fake remote."""

    def _make(**config) -> ImagePipeline:
        fetcher = Fetcher(storage, client=remote.client(), timeout=5)
        return ImagePipeline(storage, fetcher, Compressor(storage), PipelineConfig(**config))

    return _make


# ============================================
# Helper Functions
# ============================================

def stored_files(storage: LocalStorage) -> List[Path]:
    """Every file currently present in either storage root."""
    files: List[Path] = []
    for root in (storage.originals_dir, storage.compressed_dir):
        if root.exists():
            files.extend(p for p in root.iterdir() if p.is_file())
    return files
