"""
Shared building blocks for the built-in recipes.

These only build command strings and steps; nothing here runs.
"""

from __future__ import annotations

from envkit.core.models.plan import InstallStep

_APT_UPDATE = "(sudo apt-get update || true)"

# Readiness waits are bounded loops inside the command; the executor
# never times a step out.
WAIT_ATTEMPTS = 10


def apt_install_cmd(*packages: str) -> str:
    return f"{_APT_UPDATE} && sudo apt-get install -y {' '.join(packages)}"


def apt_step(step_id: str, label: str, *packages: str, check_package: str | None = None) -> InstallStep:
    """Install apt packages unless ``check_package`` (default: first) is present."""
    return InstallStep(
        id=step_id,
        label=label,
        cmd=apt_install_cmd(*packages),
        check_cmd=f"dpkg -s {check_package or packages[0]}",
    )


def brew_step(step_id: str, label: str, formula: str) -> InstallStep:
    return InstallStep(
        id=step_id,
        label=label,
        cmd=f"brew install {formula}",
        check_cmd=f"brew list --versions {formula}",
    )


def wait_step(step_id: str, label: str, probe: str, service: str) -> InstallStep:
    """Poll ``probe`` once a second until it succeeds or attempts run out."""
    attempts = " ".join(str(i) for i in range(1, WAIT_ATTEMPTS + 1))
    return InstallStep(
        id=step_id,
        label=label,
        cmd=(
            f"for i in {attempts}; do {probe} && exit 0; sleep 1; done; "
            f'echo "{service} did not start"; exit 1'
        ),
    )


def systemd_or(fallback: str, unit: str) -> str:
    """Enable ``unit`` under a running systemd, else run ``fallback``."""
    return (
        "if command -v systemctl >/dev/null 2>&1 && "
        'systemctl is-system-running 2>/dev/null | grep -qE "running|degraded"; then '
        f"sudo systemctl enable --now {unit}; "
        f"else {fallback}; fi"
    )
