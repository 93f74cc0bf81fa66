"""Item schema for ``logind.conf`` power settings."""

from __future__ import annotations

from ..model import BoolKind, CycleKind, IntRangeKind, SchemaBuilder, Tab

TAB_NAMES = ["Power Keys", "Lid & Idle", "Session"]
LOGIN_ACTIONS = (
    "ignore",
    "poweroff",
    "reboot",
    "halt",
    "suspend",
    "hibernate",
    "hybrid-sleep",
    "suspend-then-hibernate",
    "lock",
)
IDLE_TIMEOUTS = ("15min", "30min", "45min", "1h", "2h", "infinity")


def build_power_schema() -> list[Tab]:
    actions = CycleKind(LOGIN_ACTIONS)
    schema = SchemaBuilder(TAB_NAMES)

    schema.register(0, "Power Key", actions, key="HandlePowerKey", default="poweroff")
    schema.register(0, "Reboot Key", actions, key="HandleRebootKey", default="reboot")
    schema.register(0, "Suspend Key", actions, key="HandleSuspendKey", default="suspend")
    schema.register(0, "Long Press", actions, key="HandlePowerKeyLongPress", default="ignore")

    schema.register(1, "Lid Switch", actions, key="HandleLidSwitch", default="suspend")
    schema.register(1, "Lid (Ext)", actions, key="HandleLidSwitchExternalPower", default="suspend")
    schema.register(1, "Lid (Docked)", actions, key="HandleLidSwitchDocked", default="ignore")
    schema.register(1, "Idle Action", actions, key="IdleAction", default="ignore")
    schema.register(1, "Idle Timeout", CycleKind(IDLE_TIMEOUTS), key="IdleActionSec", default="30min")

    schema.register(2, "Kill User Procs", BoolKind(), key="KillUserProcesses", default=False)
    schema.register(2, "Reserve VTs", IntRangeKind(0, 12), key="ReserveVT", default=6)
    return schema.build()
