"""
Local Image Storage

File-based storage for downloaded and derived product images.

Layout:
    images/
    ├── 3f2a...9c1d.jpg
    └── ...
    compressed_images/
    ├── 3f2a...9c1d.jpg
    └── ...

Both roots are flat; a base name appears once in each root.
"""

import logging
from pathlib import Path
from typing import AsyncIterable, Union

from .errors import StorageInitError, StorageWriteError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class LocalStorage:
    """
    Storage capability backed by two local directories.

    Usage:
        storage = LocalStorage("images", "compressed_images")
        storage.ensure_roots()
        path = await storage.write_file(storage.originals_dir, "abc.jpg", chunks)
    """

    def __init__(
        self,
        originals_dir: PathLike = "images",
        compressed_dir: PathLike = "compressed_images",
    ):
        self.originals_dir = Path(originals_dir)
        self.compressed_dir = Path(compressed_dir)

    def ensure_directory(self, path: PathLike) -> None:
        """Create a directory if it does not exist yet."""
        try:
            Path(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"[Storage] Failed to create directory {path}: {e}")
            raise StorageInitError(
                f"failed to create storage directory: {e}", path=str(path)
            ) from e

    def ensure_roots(self) -> None:
        """Create both storage roots (idempotent)."""
        self.ensure_directory(self.originals_dir)
        self.ensure_directory(self.compressed_dir)

    def path_for(self, root: PathLike, name: str) -> str:
        """Storage path string for a file name under a root."""
        return str(Path(root) / name)

    async def write_file(
        self,
        root: PathLike,
        name: str,
        chunks: AsyncIterable[bytes],
    ) -> str:
        """
        Stream chunks into ``root/name``.

        A partially written file is removed before any error propagates.

        Returns:
            The path written.

        Raises:
            StorageWriteError: if the file cannot be created or written.
        """
        path = self.path_for(root, name)
        size = 0
        try:
            with open(path, "wb") as f:
                async for chunk in chunks:
                    f.write(chunk)
                    size += len(chunk)
        except OSError as e:
            self.delete_file(path)
            logger.error(f"[Storage] Failed to write {path}: {e}")
            raise StorageWriteError(f"failed to write file: {e}", path=path) from e
        except BaseException:
            self.delete_file(path)
            raise

        logger.debug(f"[Storage] Wrote {path} ({size} bytes)")
        return path

    def write_bytes(self, path: PathLike, data: bytes) -> str:
        """
        Write a complete byte string to ``path``.

        Raises:
            StorageWriteError: if the file cannot be created or written.
        """
        path = str(path)
        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            self.delete_file(path)
            logger.error(f"[Storage] Failed to write {path}: {e}")
            raise StorageWriteError(f"failed to write file: {e}", path=path) from e
        return path

    def open_file(self, path: PathLike) -> bytes:
        """Read a stored file."""
        with open(path, "rb") as f:
            return f.read()

    def delete_file(self, path: PathLike) -> bool:
        """
        Remove a stored file if present.

        Returns:
            True if a file was removed, False otherwise.
        """
        target = Path(path)
        try:
            if target.exists():
                target.unlink()
                logger.debug(f"[Storage] Removed: {target}")
                return True
        except OSError as e:
            logger.error(f"[Storage] Failed to remove {target}: {e}")
        return False
