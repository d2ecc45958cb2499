"""
Image Pipeline Errors

Closed set of failure kinds raised by the pipeline stages.
Each error carries structured context (URL, path, ...) so callers
can branch on the kind instead of parsing messages.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Pipeline failure kinds"""
    TRANSPORT = "transport"
    UNRESOLVABLE_CONTENT_TYPE = "unresolvable_content_type"
    STORAGE_WRITE = "storage_write"
    STORAGE_INIT = "storage_init"
    DECODE = "decode"
    UNSUPPORTED_FORMAT = "unsupported_format"
    ENCODE = "encode"


class PipelineError(Exception):
    """Base class for every image pipeline failure."""

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        path: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.url = url
        self.path = path

    def context(self) -> Dict[str, Any]:
        """Structured fields for logging."""
        data: Dict[str, Any] = {"kind": self.kind.value}
        if self.url is not None:
            data["url"] = self.url
        if self.path is not None:
            data["path"] = self.path
        return data


class TransportError(PipelineError):
    """The remote image could not be retrieved."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        super().__init__(message, url=url)
        self.status_code = status_code

    def context(self) -> Dict[str, Any]:
        data = super().context()
        if self.status_code is not None:
            data["status_code"] = self.status_code
        return data


class UnresolvableContentType(PipelineError):
    """No file extension maps to the response content type."""

    kind = ErrorKind.UNRESOLVABLE_CONTENT_TYPE

    def __init__(self, content_type: str, url: Optional[str] = None):
        super().__init__(
            f"cannot resolve file extension for content type: {content_type!r}",
            url=url,
        )
        self.content_type = content_type

    def context(self) -> Dict[str, Any]:
        data = super().context()
        data["content_type"] = self.content_type
        return data


class StorageWriteError(PipelineError):
    """A file could not be created or fully written."""

    kind = ErrorKind.STORAGE_WRITE


class StorageInitError(PipelineError):
    """A storage root directory could not be created."""

    kind = ErrorKind.STORAGE_INIT


class DecodeError(PipelineError):
    """Stored bytes could not be decoded as an image."""

    kind = ErrorKind.DECODE


class UnsupportedFormat(PipelineError):
    """The stored file's extension is not in the allow-list."""

    kind = ErrorKind.UNSUPPORTED_FORMAT

    def __init__(self, extension: str, path: str):
        super().__init__(f"unsupported image format: {extension!r}", path=path)
        self.extension = extension

    def context(self) -> Dict[str, Any]:
        data = super().context()
        data["extension"] = self.extension
        return data


class EncodeError(PipelineError):
    """The derived image could not be encoded or written."""

    kind = ErrorKind.ENCODE
