"""Display labels for file records."""

from __future__ import annotations

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")

_ICON_PREFIXES = (
    ("image/", "Image"),
    ("video/", "Video"),
    ("audio/", "Music"),
)

_ICON_KEYWORDS = (
    (("pdf",), "FileText"),
    (("zip", "rar"), "Archive"),
    (("word", "doc"), "FileText"),
    (("excel", "sheet"), "Table"),
    (("powerpoint", "presentation"), "Presentation"),
)


def format_file_size(num_bytes: int) -> str:
    """Human-readable size: ``0 Bytes``, ``1.5 KB``, ``12.25 MB`` ..."""
    if num_bytes <= 0:
        return "0 Bytes"
    value = float(num_bytes)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[unit]}"


def file_icon(mime_type: str | None) -> str:
    """Icon name for a MIME type."""
    mime_type = mime_type or ""
    for prefix, icon in _ICON_PREFIXES:
        if mime_type.startswith(prefix):
            return icon
    for keywords, icon in _ICON_KEYWORDS:
        if any(k in mime_type for k in keywords):
            return icon
    return "File"
