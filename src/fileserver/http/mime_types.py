"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

Maps file extensions to Content-Type values for served files.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      EXTENSION LOOKUP                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   "./www/docs/report.v2.pdf"                                        │
    │                        ▲                                             │
    │                        └── LAST dot wins → ".pdf"                   │
    │                                                                      │
    │   ".pdf" ──► MIME_TYPES ──► "application/pdf"                       │
    │                                                                      │
    │   No dot, trailing dot, or unknown extension                        │
    │     ──► "application/octet-stream"                                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Lookups are case-sensitive: "photo.JPG" is served as binary.

=============================================================================
"""

from pathlib import Path
from typing import Mapping, Optional, Union


MIME_TYPES = {
    # -------------------------------------------------------------------------
    # TEXT TYPES
    # -------------------------------------------------------------------------
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",

    # -------------------------------------------------------------------------
    # IMAGE TYPES
    # -------------------------------------------------------------------------
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",

    # -------------------------------------------------------------------------
    # DOCUMENT / ARCHIVE TYPES
    # -------------------------------------------------------------------------
    ".pdf": "application/pdf",
    ".zip": "application/zip",

    # -------------------------------------------------------------------------
    # AUDIO / VIDEO TYPES
    # -------------------------------------------------------------------------
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".ogg": "audio/ogg",
    ".mp3": "audio/mpeg",
}

# application/octet-stream = "I don't know what this is, treat as binary"
DEFAULT_MIME_TYPE = "application/octet-stream"


def get_extension(path: Union[str, Path]) -> Optional[str]:
    """
    Return the extension of ``path`` including its dot, or None.

    Only the final dot counts, and it must neither start nor end the
    string:

        >>> get_extension("a.tar.gz")
        '.gz'
        >>> get_extension("README") is None
        True
        >>> get_extension("archive.") is None
        True
    """
    path = str(path)
    dot = path.rfind(".")
    if 0 < dot < len(path) - 1:
        return path[dot:]
    return None


def get_mime_type(
    path: Union[str, Path],
    table: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Get the Content-Type for a file path.

    Args:
        path: File path or name.
        table: Extension table to use instead of MIME_TYPES.

    Returns:
        The mapped type, or DEFAULT_MIME_TYPE.

    Examples:
        >>> get_mime_type("./www/index.html")
        'text/html'

        >>> get_mime_type("a.tar.gz")
        'application/octet-stream'
    """
    if table is None:
        table = MIME_TYPES

    extension = get_extension(path)
    if extension is None:
        return DEFAULT_MIME_TYPE
    return table.get(extension, DEFAULT_MIME_TYPE)
