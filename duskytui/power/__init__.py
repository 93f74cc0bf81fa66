"""``logind.conf`` power-settings editor."""

from .app import PowerApp
from .schema import build_power_schema

__all__ = ["PowerApp", "build_power_schema"]
