"""
Image Compressor

Derives a bounded-width, re-encoded copy of a stored original:
- Validates the original's extension against the allow-list
- Resizes to at most MAX_WIDTH pixels wide, keeping the aspect ratio
- Saves PNG losslessly, everything else with a fixed quality factor
"""

from __future__ import annotations

import logging
import math
import os
from io import BytesIO
from typing import Optional, Tuple

from PIL import Image

from .errors import DecodeError, EncodeError, StorageWriteError, UnsupportedFormat
from .storage import LocalStorage

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif"}
MAX_WIDTH = 800
QUALITY = 80

# Output extension -> Pillow save format
SAVE_FORMATS = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
    ".gif": "GIF",
}


def scaled_size(width: int, height: int, max_width: int = MAX_WIDTH) -> Tuple[int, int]:
    """
    Target dimensions for a derived image.

    Images no wider than ``max_width`` keep their size; wider ones are
    scaled to ``max_width`` with the height following the aspect ratio,
    rounding halves up.
    """
    if width <= max_width:
        return width, height
    new_height = max(1, int(math.floor(height * max_width / width + 0.5)))
    return max_width, new_height


def _flatten_for_jpeg(img: Image.Image) -> Image.Image:
    """Convert to RGB, compositing transparency onto white."""
    if img.mode == "RGB":
        return img
    if img.mode == "P":
        img = img.convert("RGBA")
    if img.mode in ("RGBA", "LA"):
        background = Image.new("RGB", img.size, (255, 255, 255))
        background.paste(img, mask=img.split()[-1])
        return background
    return img.convert("RGB")


class Compressor:
    """
    Usage:
        compressor = Compressor(storage)
        compressor.compress("images/abc.jpg", "compressed_images/abc.jpg")
    """

    def __init__(
        self,
        storage: LocalStorage,
        max_width: int = MAX_WIDTH,
        quality: int = QUALITY,
    ):
        self.storage = storage
        self.max_width = max_width
        self.quality = quality

    def compress(self, input_path: str, output_path: str) -> Tuple[int, int]:
        """
        Derive a compressed copy of ``input_path`` at ``output_path``.

        Returns:
            (width, height) of the derived image.

        Raises:
            DecodeError: the input cannot be read as an image.
            UnsupportedFormat: the input extension is not allowed.
            EncodeError: the derived image cannot be encoded or written.
        """
        img = self._open(input_path)

        ext = os.path.splitext(input_path)[1].lower()
        if ext not in ALLOWED_EXTENSIONS:
            logger.error(f"[Compressor] Unsupported image format {ext!r}: {input_path}")
            raise UnsupportedFormat(ext, path=input_path)

        original_size = img.size
        target = scaled_size(img.width, img.height, self.max_width)
        if target != img.size:
            img = img.resize(target, Image.Resampling.LANCZOS)
            logger.debug(
                f"[Compressor] Resized {input_path}: "
                f"{original_size[0]}x{original_size[1]} -> {target[0]}x{target[1]}"
            )

        data = self._encode(img, ext, output_path)

        try:
            self.storage.write_bytes(output_path, data)
        except StorageWriteError as e:
            logger.error(f"[Compressor] Failed to save compressed image {output_path}: {e}")
            raise EncodeError(
                f"failed to save compressed image: {e.message}", path=output_path
            ) from e

        logger.info(
            f"[Compressor] {input_path} -> {output_path} "
            f"({img.width}x{img.height}, {len(data) // 1024}KB)"
        )
        return img.width, img.height

    def _open(self, input_path: str) -> Image.Image:
        try:
            img = Image.open(BytesIO(self.storage.open_file(input_path)))
            img.load()
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            logger.error(f"[Compressor] Failed to open image {input_path}: {e}")
            raise DecodeError(f"failed to open image: {e}", path=input_path) from e
        return img

    def _encode(self, img: Image.Image, input_ext: str, output_path: str) -> bytes:
        out_ext = os.path.splitext(output_path)[1].lower()
        save_format: Optional[str] = SAVE_FORMATS.get(out_ext) or SAVE_FORMATS[input_ext]

        output = BytesIO()
        try:
            if input_ext == ".png":
                img.save(output, format=save_format)
            else:
                if save_format == "JPEG":
                    img = _flatten_for_jpeg(img)
                img.save(output, format=save_format, quality=self.quality)
        except (OSError, ValueError, KeyError) as e:
            logger.error(f"[Compressor] Failed to encode {output_path}: {e}")
            raise EncodeError(f"failed to encode image: {e}", path=output_path) from e
        return output.getvalue()
