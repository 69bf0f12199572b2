"""Delivery of finished report bytes to the user."""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol, Union

from fastapi import Response

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"


class DownloadTrigger(Protocol):
    def save(self, content: bytes, filename: str) -> None:
        ...


class AttachmentDownload:
    """Turns the bytes into an HTTP attachment response for the API layer to return."""

    def __init__(self, media_type: str = PDF_MEDIA_TYPE):
        self.media_type = media_type
        self.response: Optional[Response] = None

    def save(self, content: bytes, filename: str) -> None:
        self.response = Response(
            content=content,
            media_type=self.media_type,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )


class DirectoryDownload:
    """
    Writes the bytes into a directory.

    The content goes to a temporary file next to the destination and is then
    moved into place, so a reader never sees a partial file. The temporary
    file is removed whether or not the write succeeds.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        self.saved_path: Optional[Path] = None

    def save(self, content: bytes, filename: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / Path(filename).name
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".download-", suffix=".part")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(content)
            os.replace(tmp_name, target)
        finally:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
        self.saved_path = target
        logger.info("Saved %s (%d bytes)", target, len(content))
