"""
System probe — read-only host discovery for recipes.

Queries run without a shell, without the persisted state, with
captured output and a short timeout. Any failure means "unknown"
and yields None; recipes fall back to a default.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Sequence

from envkit.adapters.base import Probe

logger = logging.getLogger(__name__)


class SystemProbe(Probe):
    """Probe backed by real subprocess queries."""

    def __init__(self, timeout: int = 10):
        self._timeout = timeout

    def query(self, argv: Sequence[str]) -> str | None:
        if not argv or shutil.which(argv[0]) is None:
            return None
        try:
            result = subprocess.run(
                list(argv),
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug("Probe %s failed: %s", argv, e)
            return None

        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def which(self, binary: str) -> str | None:
        return shutil.which(binary)
