"""Names of the VPAs tortoise creates."""

from .config import TORTOISE_MONITOR_VPA_NAME_PREFIX, TORTOISE_UPDATER_VPA_NAME_PREFIX


def tortoise_monitor_vpa_name(tortoise_name: str) -> str:
    return TORTOISE_MONITOR_VPA_NAME_PREFIX + tortoise_name


def tortoise_updater_vpa_name(tortoise_name: str) -> str:
    return TORTOISE_UPDATER_VPA_NAME_PREFIX + tortoise_name
