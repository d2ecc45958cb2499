"""Content-type to file extension mapping for stored images."""

from __future__ import annotations

from .errors import UnresolvableContentType

CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/pjpeg": ".jpg",
    "image/png": ".png",
    "image/x-png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/bmp": ".bmp",
    "image/x-ms-bmp": ".bmp",
    "image/tiff": ".tiff",
    "image/svg+xml": ".svg",
    "image/x-icon": ".ico",
    "image/vnd.microsoft.icon": ".ico",
    "image/avif": ".avif",
}


def resolve_extension(content_type: str) -> str:
    """
    Resolve the local file extension for a response Content-Type.

    Parameters after ``;`` are ignored and matching is case-insensitive.

    Raises:
        UnresolvableContentType: if no extension maps to the type.
    """
    mime = (content_type or "").split(";")[0].strip().lower()
    extension = CONTENT_TYPE_EXTENSIONS.get(mime)
    if not extension:
        raise UnresolvableContentType(content_type or "")
    return extension
