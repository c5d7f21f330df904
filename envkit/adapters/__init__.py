"""
Adapters — host capabilities used by the engine and by recipes.
"""

from envkit.adapters.base import CommandResult, CommandRunner, FileWriter, Probe
from envkit.adapters.platform import Platform, detect_platform

__all__ = [
    "CommandResult",
    "CommandRunner",
    "FileWriter",
    "Platform",
    "Probe",
    "detect_platform",
]
