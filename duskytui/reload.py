"""Best-effort hooks that make running services pick up a saved config."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReloadResult:
    attempted: bool
    ok: bool
    output: str = ""


def run_reload_command(argv: list[str]) -> ReloadResult:
    """Run ``argv`` if its program is installed; never raises for tool failures."""
    if shutil.which(argv[0]) is None:
        logger.info("%s not found; skipping reload", argv[0])
        return ReloadResult(attempted=False, ok=False)
    try:
        completed = subprocess.run(argv, capture_output=True, text=True, check=False)
    except OSError as exc:
        logger.warning("%s failed to start: %s", argv[0], exc)
        return ReloadResult(attempted=True, ok=False, output=str(exc))
    output = (completed.stdout + completed.stderr).strip()
    if completed.returncode != 0:
        logger.warning("%s exited with %d: %s", " ".join(argv), completed.returncode, output)
    return ReloadResult(attempted=True, ok=completed.returncode == 0, output=output)


def reload_hyprland() -> ReloadResult:
    return run_reload_command(["hyprctl", "reload"])


def signal_logind() -> ReloadResult:
    return run_reload_command(["pkill", "-HUP", "-x", "systemd-logind"])
