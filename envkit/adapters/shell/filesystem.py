"""
Filesystem writer — plan-declared files.
"""

from __future__ import annotations

import logging
from pathlib import Path

from envkit.adapters.base import FileWriter

logger = logging.getLogger(__name__)


class LocalFileWriter(FileWriter):
    """Write files to the local filesystem, creating parents as needed."""

    def write(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps the declared content byte-for-byte
        path.write_text(content, encoding="utf-8", newline="")
        logger.debug("Written %d bytes to %s", len(content), path)
