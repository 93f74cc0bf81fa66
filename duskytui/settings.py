"""Persistent JSON settings and default file locations.

Settings live in the platform config directory (``DUSKYTUI_CONFIG`` overrides
the path). Missing or malformed settings fall back to
defaults, and values of the wrong type are ignored key by key.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .highlight import DEFAULT_STYLE

logger = logging.getLogger(__name__)

APP_NAME = "duskytui"
CONFIG_FILENAME = "config.json"
CONFIG_ENV = "DUSKYTUI_CONFIG"
LOG_FILE_ENV = "DUSKYTUI_LOG_FILE"
DEFAULT_LOGIND_CONF = Path("/etc/systemd/logind.conf")


def config_path() -> Path:
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override).expanduser()
    return Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def hypr_config_dir() -> Path:
    return Path(user_config_dir("hypr", appauthor=False))


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON settings object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    target = path if path is not None else config_path()
    try:
        data = json.loads(target.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable settings file %s: %s", target, exc)
        return {}
    return data if isinstance(data, dict) else {}


@dataclass(frozen=True)
class Settings:
    logind_conf: Path
    keybinds_source: Path
    keybinds_overlay: Path
    hyprlock_themes_root: Path
    hyprlock_target: Path
    preview_style: str = DEFAULT_STYLE
    no_color: bool = False
    log_file: Path | None = None


def _path_setting(data: dict[str, object], key: str, default: Path) -> Path:
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return Path(value).expanduser()
    return default


def default_settings() -> Settings:
    hypr = hypr_config_dir()
    return Settings(
        logind_conf=DEFAULT_LOGIND_CONF,
        keybinds_source=hypr / "source" / "keybinds.conf",
        keybinds_overlay=hypr / "edit_here" / "source" / "keybinds.conf",
        hyprlock_themes_root=hypr / "hyprlock_themes",
        hyprlock_target=hypr / "hyprlock.conf",
    )


def load_settings(path: Path | None = None) -> Settings:
    """Merge the settings file over the built-in defaults."""
    data = load_config(path)
    defaults = default_settings()
    style = data.get("preview_style")
    no_color = data.get("no_color")
    log_file = data.get("log_file")
    return Settings(
        logind_conf=_path_setting(data, "logind_conf", defaults.logind_conf),
        keybinds_source=_path_setting(data, "keybinds_source", defaults.keybinds_source),
        keybinds_overlay=_path_setting(data, "keybinds_overlay", defaults.keybinds_overlay),
        hyprlock_themes_root=_path_setting(data, "hyprlock_themes_root", defaults.hyprlock_themes_root),
        hyprlock_target=_path_setting(data, "hyprlock_target", defaults.hyprlock_target),
        preview_style=style if isinstance(style, str) and style else defaults.preview_style,
        no_color=no_color if isinstance(no_color, bool) else defaults.no_color,
        log_file=Path(log_file).expanduser() if isinstance(log_file, str) and log_file else None,
    )


def resolve_log_file(cli_value: Path | None, settings: Settings) -> Path | None:
    """Pick the log file: CLI flag, then ``DUSKYTUI_LOG_FILE``, then settings."""
    if cli_value is not None:
        return cli_value
    env_value = os.environ.get(LOG_FILE_ENV)
    if env_value:
        return Path(env_value).expanduser()
    return settings.log_file
