"""
Platform capability — which operating-system branch a recipe takes.

Recipes receive a :class:`Platform` value instead of querying the OS
themselves, so tests can resolve any branch on any host.
"""

from __future__ import annotations

import platform as _platform
from enum import Enum


class Platform(str, Enum):
    DARWIN = "darwin"
    LINUX = "linux"
    UNSUPPORTED = "unsupported"


def detect_platform(system: str | None = None) -> Platform:
    """Map ``platform.system()`` (or an explicit name) to a Platform."""
    name = (system if system is not None else _platform.system()).lower()
    if name == "darwin":
        return Platform.DARWIN
    if name == "linux":
        return Platform.LINUX
    return Platform.UNSUPPORTED
