"""
Image Pipeline Module

Downloads product images and derives compressed thumbnails.

Features:
- Content-type based extension resolution
- Collision-resistant random file names shared by original and derivative
- Width-bounded re-encoding (PNG lossless, others quality 80)
- All-or-nothing batches with cleanup of files from failed batches
- Forward-slash path normalization
"""

from .compressor import Compressor
from .errors import (
    DecodeError,
    EncodeError,
    ErrorKind,
    PipelineError,
    StorageInitError,
    StorageWriteError,
    TransportError,
    UnresolvableContentType,
    UnsupportedFormat,
)
from .extensions import resolve_extension
from .fetcher import FetchResult, Fetcher
from .naming import new_base_name
from .paths import normalize_path, normalize_paths
from .pipeline import ImagePipeline, PipelineConfig, ProductImageSet, create_product_images
from .storage import LocalStorage

__all__ = [
    "Compressor",
    "DecodeError",
    "EncodeError",
    "ErrorKind",
    "FetchResult",
    "Fetcher",
    "ImagePipeline",
    "LocalStorage",
    "PipelineConfig",
    "PipelineError",
    "ProductImageSet",
    "StorageInitError",
    "StorageWriteError",
    "TransportError",
    "UnresolvableContentType",
    "UnsupportedFormat",
    "create_product_images",
    "new_base_name",
    "normalize_path",
    "normalize_paths",
    "resolve_extension",
]
