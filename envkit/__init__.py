"""
envkit — provision ephemeral development environments.

Resolves a requested runtime into an ordered install plan, runs it
idempotently, and persists the resulting environment for later shells.
"""

__version__ = "0.1.0"
