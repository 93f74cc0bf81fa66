"""Hyprland keybind editor with stacked conflict resolution."""

from .app import KeybindApp, ensure_overlay
from .session import EditTarget, KeybindEditSession, SubmitStatus

__all__ = ["EditTarget", "KeybindApp", "KeybindEditSession", "SubmitStatus", "ensure_overlay"]
