"""
Tests for the small pipeline building blocks:
extension resolution, naming, path normalization and local storage.

Run:
    cd backend
    pytest tests/test_pipeline_components.py -v
"""

import re

import pytest

from image_pipeline import (
    ErrorKind,
    StorageInitError,
    StorageWriteError,
    UnresolvableContentType,
    new_base_name,
    normalize_path,
    normalize_paths,
    resolve_extension,
)


# ============================================
# 1. Extension Resolver
# ============================================

class TestResolveExtension:
    """Content-type to extension mapping"""

    @pytest.mark.parametrize("content_type,expected", [
        ("image/jpeg", ".jpg"),
        ("image/png", ".png"),
        ("image/gif", ".gif"),
        ("image/webp", ".webp"),
        ("IMAGE/JPEG", ".jpg"),
        ("image/png; charset=binary", ".png"),
    ])
    def test_known_types(self, content_type, expected):
        """Test: known image types map to their extension"""
        assert resolve_extension(content_type) == expected

    @pytest.mark.parametrize("content_type", [
        "",
        "application/octet-stream",
        "text/html; charset=utf-8",
        "image/x-unknown",
    ])
    def test_unmapped_types_raise(self, content_type):
        """Test: unmapped content types are a hard failure"""
        with pytest.raises(UnresolvableContentType) as exc_info:
            resolve_extension(content_type)

        assert exc_info.value.kind is ErrorKind.UNRESOLVABLE_CONTENT_TYPE
        assert exc_info.value.content_type == content_type


# ============================================
# 2. Naming Service
# ============================================

class TestNewBaseName:
    """Random base names"""

    def test_base_name_is_path_safe_hex(self):
        """Test: 32 lowercase hex characters, no separators"""
        name = new_base_name()
        assert re.fullmatch(r"[0-9a-f]{32}", name)

    def test_base_names_do_not_repeat(self):
        """Test: no collisions across many draws"""
        names = {new_base_name() for _ in range(2000)}
        assert len(names) == 2000


# ============================================
# 3. Path Normalizer
# ============================================

class TestNormalizePaths:
    """Backslash to forward slash rewriting"""

    @pytest.mark.parametrize("path", [
        "images\\abc.jpg",
        "images/abc.jpg",
        "a\\b/c\\\\d",
        "",
        "\\\\server\\share\\x.png",
    ])
    def test_idempotent_and_backslash_free(self, path):
        """Test: normalize(normalize(p)) == normalize(p) and no backslashes remain"""
        once = normalize_path(path)
        assert normalize_path(once) == once
        assert "\\" not in once

    def test_preserves_order(self):
        """Test: list normalization keeps positions"""
        paths = ["images\\a.jpg", "images/b.png", "compressed_images\\c.gif"]
        assert normalize_paths(paths) == [
            "images/a.jpg",
            "images/b.png",
            "compressed_images/c.gif",
        ]


# ============================================
# 4. Local Storage
# ============================================

async def _chunks(*parts):
    for part in parts:
        yield part


class TestLocalStorage:
    """Filesystem capability"""

    def test_ensure_roots_is_idempotent(self, storage):
        """Test: roots can be ensured repeatedly"""
        storage.ensure_roots()
        storage.ensure_roots()

        assert storage.originals_dir.is_dir()
        assert storage.compressed_dir.is_dir()

    def test_ensure_directory_failure(self, tmp_path):
        """Test: a root that cannot be created raises StorageInitError"""
        from image_pipeline import LocalStorage

        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        storage = LocalStorage(blocker / "images", tmp_path / "compressed_images")

        with pytest.raises(StorageInitError) as exc_info:
            storage.ensure_roots()
        assert exc_info.value.path == str(blocker / "images")

    @pytest.mark.asyncio
    async def test_write_file_streams_chunks(self, storage):
        """Test: chunks are written in order"""
        storage.ensure_roots()
        path = await storage.write_file(storage.originals_dir, "a.bin", _chunks(b"ab", b"cd"))

        assert path == str(storage.originals_dir / "a.bin")
        assert storage.open_file(path) == b"abcd"

    @pytest.mark.asyncio
    async def test_write_file_missing_root(self, storage):
        """Test: writing into a missing root raises StorageWriteError"""
        with pytest.raises(StorageWriteError):
            await storage.write_file(storage.originals_dir, "a.bin", _chunks(b"x"))

    @pytest.mark.asyncio
    async def test_partial_write_is_removed(self, storage):
        """Test: a write interrupted mid-stream leaves no file behind"""
        storage.ensure_roots()

        async def broken():
            yield b"first"
            raise OSError("disk full")

        with pytest.raises(StorageWriteError):
            await storage.write_file(storage.originals_dir, "partial.bin", broken())

        assert not (storage.originals_dir / "partial.bin").exists()

    def test_delete_missing_file(self, storage):
        """Test: deleting a missing file is a no-op"""
        assert storage.delete_file(storage.originals_dir / "nope.jpg") is False
