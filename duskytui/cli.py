"""Command-line front door for duskytui.

Parses options, applies settings-file defaults, runs the fatal startup
checks, then hands one of the three tools to the interactive runtime.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .errors import FatalStartupError, SaveError
from .keybinds import KeybindApp, ensure_overlay
from .logs import configure_logging
from .power import PowerApp
from .runtime import RuntimeLoopCallbacks, run_session
from .settings import Settings, load_settings, resolve_log_file
from .themes import ThemeApp, apply_theme, detect_current_theme, load_themes, next_theme_index
from .ui_theme import UITheme, resolve_theme

logger = logging.getLogger(__name__)


def _common_options() -> argparse.ArgumentParser:
    # SUPPRESS keeps subcommand defaults from clobbering top-level values.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--no-color", action="store_true", default=argparse.SUPPRESS, help="Disable colors.")
    common.add_argument("--log-file", type=Path, default=argparse.SUPPRESS, help="Write a debug log to PATH.")
    common.add_argument("--verbose", action="store_true", default=argparse.SUPPRESS, help="Log at DEBUG level.")
    return common


def build_parser() -> argparse.ArgumentParser:
    common = _common_options()
    parser = argparse.ArgumentParser(
        prog="duskytui",
        description="Terminal editors for Hyprland keybinds, logind power settings and hyprlock themes.",
        parents=[common],
    )
    commands = parser.add_subparsers(dest="command", required=True)

    keybinds = commands.add_parser("keybinds", parents=[common], help="Edit Hyprland keybinds.")
    keybinds.add_argument("--source", type=Path, default=None, help="Base keybind file to pick binds from.")
    keybinds.add_argument("--overlay", type=Path, default=None, help="Overlay file edits are appended to.")

    power = commands.add_parser("power", parents=[common], help="Edit logind power settings.")
    power.add_argument("--file", type=Path, default=None, help="logind.conf to edit.")

    hyprlock = commands.add_parser("hyprlock", parents=[common], help="Switch hyprlock themes.")
    hyprlock.add_argument("--themes-root", type=Path, default=None, help="Directory holding theme folders.")
    hyprlock.add_argument("--target", type=Path, default=None, help="hyprlock.conf to point at a theme.")
    hyprlock.add_argument("--toggle", action="store_true", help="Apply the next theme and print its name.")
    hyprlock.add_argument("--preview", action="store_true", help="Start with the preview panel open.")
    return parser


def _require_tty() -> None:
    if not sys.stdin.isatty():
        raise FatalStartupError("TTY required")


def _require_readable(path: Path, label: str) -> None:
    if not path.is_file():
        raise FatalStartupError(f"{label} not found: {path}")
    if not os.access(path, os.R_OK):
        raise FatalStartupError(f"{label} not readable: {path}")


def _require_writable(path: Path, label: str) -> None:
    if not os.access(path, os.W_OK):
        raise FatalStartupError(f"{label} not writable: {path}")


def _run_app(app) -> int:
    callbacks = RuntimeLoopCallbacks(
        render=app.render,
        handle_key=app.handle_key,
        should_quit=lambda: app.state.quit,
    )
    run_session(sys.stdin.fileno(), sys.stdout.fileno(), callbacks)
    if app.state.exit_message:
        print(app.state.exit_message)
    return app.state.exit_code


def run_keybinds(args: argparse.Namespace, settings: Settings, theme: UITheme) -> int:
    source = args.source or settings.keybinds_source
    overlay = args.overlay or settings.keybinds_overlay
    _require_tty()
    _require_readable(source, "Source config")
    ensure_overlay(overlay)
    _require_writable(overlay, "Overlay config")
    return _run_app(KeybindApp(source, overlay, theme))


def run_power(args: argparse.Namespace, settings: Settings, theme: UITheme) -> int:
    path = args.file or settings.logind_conf
    _require_tty()
    _require_readable(path, "Config")
    _require_writable(path, "Config")
    app = PowerApp(path, theme)
    app.load()
    return _run_app(app)


def run_hyprlock(args: argparse.Namespace, settings: Settings, theme: UITheme) -> int:
    root = args.themes_root or settings.hyprlock_themes_root
    target = args.target or settings.hyprlock_target
    if hasattr(os, "geteuid") and os.geteuid() == 0:
        raise FatalStartupError("Do not run as root.")
    themes = load_themes(root)

    if args.toggle:
        if not themes:
            raise FatalStartupError(f"No themes found in {root}")
        index = next_theme_index(detect_current_theme(target, themes), len(themes))
        try:
            apply_theme(themes[index], target, root)
        except SaveError as exc:
            raise FatalStartupError(str(exc)) from exc
        print(themes[index].name)
        return 0

    _require_tty()
    app = ThemeApp(
        root,
        target,
        theme,
        themes=themes,
        show_preview=args.preview,
        preview_style=settings.preview_style,
    )
    return _run_app(app)


_COMMANDS = {
    "keybinds": run_keybinds,
    "power": run_power,
    "hyprlock": run_hyprlock,
}


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the selected tool.

    Fatal startup errors exit with status 1 and an ``[ERROR]`` message;
    signals during a session exit with ``128 + signal``.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = load_settings()

    log_file = resolve_log_file(getattr(args, "log_file", None), settings)
    configure_logging(log_file, getattr(args, "verbose", False))
    theme = resolve_theme(no_color=getattr(args, "no_color", False) or settings.no_color)

    try:
        code = _COMMANDS[args.command](args, settings, theme)
    except FatalStartupError as exc:
        logger.error("startup failed: %s", exc)
        print(f"[ERROR] {exc}", file=sys.stderr)
        raise SystemExit(exc.exit_code) from exc
    if code:
        raise SystemExit(code)


def _main_with(command: str) -> None:
    main([command, *sys.argv[1:]])


def main_keybinds() -> None:
    _main_with("keybinds")


def main_power() -> None:
    _main_with("power")


def main_hyprlock() -> None:
    _main_with("hyprlock")
