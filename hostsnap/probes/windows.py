"""Windows probe backed by the registry."""

from __future__ import annotations

import logging
from collections.abc import Callable

from hostsnap.core.models import CpuInfo, OsInfo

logger = logging.getLogger(__name__)

CURRENT_VERSION_KEY = r"SOFTWARE\Microsoft\Windows NT\CurrentVersion"
PROCESSOR_KEY = r"HARDWARE\DESCRIPTION\System\CentralProcessor\0"
ENVIRONMENT_KEY = r"SYSTEM\CurrentControlSet\Control\Session Manager\Environment"

WINDOWS_RELEASES = (
    (22000, "11"),
    (10240, "10"),
    (9200, "8"),
    (7600, "7"),
    (2600, "XP"),
)
"""Lowest build number of each release, newest first."""

RegistryReader = Callable[[str, str], str | None]


def read_local_machine(key: str, value_name: str) -> str | None:
    """Read a string value below HKEY_LOCAL_MACHINE.

    Returns
    -------
    str | None
        The value, or None when the key or value is missing
    """
    import winreg

    try:
        with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, key) as handle:
            value, _ = winreg.QueryValueEx(handle, value_name)
    except OSError as e:
        logger.debug("Failed to read registry value %s\\%s: %s", key, value_name, e)
        return None

    return str(value)


def windows_version(build: str | None) -> str:
    """Map a CurrentBuild number to the marketing release name.

    Parameters
    ----------
    build : str | None
        Build number such as "22631"

    Returns
    -------
    str
        Release such as "11", or empty string for unknown builds
    """
    try:
        number = int((build or "").strip())
    except ValueError:
        return ""

    for lowest, release in WINDOWS_RELEASES:
        if number >= lowest:
            return release

    return ""


class WindowsProbe:
    """Platform probe for Windows hosts.

    Parameters
    ----------
    reader : RegistryReader | None
        Reads a HKEY_LOCAL_MACHINE string value (default: winreg lookup)
    """

    def __init__(self, reader: RegistryReader | None = None) -> None:
        self._reader = reader or read_local_machine

    def os_info(self) -> OsInfo:
        build = self._reader(CURRENT_VERSION_KEY, "CurrentBuild")
        if build is None:
            logger.warning("Failed to read Windows build number")

        return OsInfo(name="Windows", version=windows_version(build))

    def cpu_info(self) -> CpuInfo:
        model = self._reader(PROCESSOR_KEY, "ProcessorNameString") or ""
        arch = self._reader(ENVIRONMENT_KEY, "PROCESSOR_ARCHITECTURE") or ""

        if not model:
            logger.warning("Failed to read CPU model from the registry")

        return CpuInfo(model=model.strip(), arch=arch.strip())
