"""macOS probe backed by sw_vers and sysctl."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from hostsnap.core.models import CpuInfo, OsInfo
from hostsnap.probes.base import CommandProbe

logger = logging.getLogger(__name__)


def parse_sw_vers(lines: Iterable[str] | None) -> tuple[str, str]:
    """Get product name and version from ``sw_vers`` output.

    Parameters
    ----------
    lines : Iterable[str] | None
        Output such as "ProductName:\\tmacOS" and "ProductVersion:\\t14.4.1"

    Returns
    -------
    tuple[str, str]
        Product name and version, either may be empty
    """
    name = ""
    version = ""

    for line in lines or ():
        key, separator, value = line.partition(":")
        if not separator:
            continue

        key = key.strip()
        if key == "ProductName" and not name:
            name = value.strip()
        elif key == "ProductVersion" and not version:
            version = value.strip()

    return name, version


class DarwinProbe(CommandProbe):
    """Platform probe for macOS hosts."""

    def os_info(self) -> OsInfo:
        name, version = parse_sw_vers(self.run("sw_vers"))

        if not name:
            logger.warning("Failed to read macOS product name")

        return OsInfo(name=name, version=version)

    def cpu_info(self) -> CpuInfo:
        return CpuInfo(
            model=self.read_command("sysctl", "-n", "machdep.cpu.brand_string"),
            arch=self.machine_arch(),
        )
