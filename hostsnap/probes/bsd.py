"""BSD probe backed by sysctl."""

from __future__ import annotations

from hostsnap.core.models import CpuInfo, OsInfo
from hostsnap.probes.base import CommandProbe


class BsdProbe(CommandProbe):
    """Platform probe for FreeBSD, OpenBSD, NetBSD and DragonFly hosts."""

    def os_info(self) -> OsInfo:
        return OsInfo(
            name=self.read_command("sysctl", "-n", "kern.ostype"),
            version=self.read_command("sysctl", "-n", "kern.osrelease"),
        )

    def cpu_info(self) -> CpuInfo:
        return CpuInfo(
            model=self.read_command("sysctl", "-n", "hw.model"),
            arch=self.machine_arch(),
        )
