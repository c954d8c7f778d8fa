"""Content types for file suffixes."""

from __future__ import annotations

from types import MappingProxyType

MIME_TYPES = MappingProxyType(
    {
        ".html": "text/html",
        ".avi": "video/x-msvideo",
        ".bmp": "image/bmp",
        ".c": "text/plain",
        ".doc": "application/msword",
        ".gif": "image/gif",
        ".gz": "application/x-gzip",
        ".htm": "text/html",
        ".ico": "application/x-ico",
        ".jpg": "image/jpeg",
        ".png": "image/png",
        ".txt": "text/plain",
        ".mp3": "audio/mp3",
        "default": "text/html",
    }
)


def mime_type(suffix: str) -> str:
    """Return the content type for ``suffix`` (such as ``".png"``), or the default."""
    return MIME_TYPES.get(suffix, MIME_TYPES["default"])