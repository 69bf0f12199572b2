"""Download filenames: sanitized base name plus the export date."""
from __future__ import annotations

import re
from datetime import date
from typing import Optional

_DISALLOWED = re.compile(r"[^a-zA-Z0-9_\-\s]")
_WHITESPACE = re.compile(r"\s+")

FALLBACK_NAME = "report"


def sanitize_filename(name: str) -> str:
    """Keep letters, digits, '_', '-' and whitespace; whitespace runs become '_'."""
    cleaned = _DISALLOWED.sub("", name or "").strip()
    return _WHITESPACE.sub("_", cleaned)


def export_filename(name: str, today: Optional[date] = None, extension: str = "pdf") -> str:
    stamp = today or date.today()
    base = sanitize_filename(name) or FALLBACK_NAME
    return f"{base}_{stamp.isoformat()}.{extension}"
