"""Protocols for the collaborators the snapshot builder depends on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from hostsnap.core.deadline import Deadline
    from hostsnap.core.models import CpuInfo, NetworkInfo, OsInfo, ToolInfo


class PlatformProbe(Protocol):
    """Source of already-resolved OS and CPU identity.

    Implementations never raise; values that cannot be read are empty.
    """

    def os_info(self) -> OsInfo:
        """Get the operating system name and version."""
        ...

    def cpu_info(self) -> CpuInfo:
        """Get the CPU model and architecture."""
        ...


class ToolResolver(Protocol):
    """Source of the external tool table."""

    def resolve_all(self, deadline: Deadline | None = None) -> tuple[ToolInfo, ...]:
        """Resolve every tool in display order."""
        ...


class NetworkResolver(Protocol):
    """Source of the host's network identity."""

    def resolve(self, deadline: Deadline | None = None) -> NetworkInfo:
        """Get public and private addresses, empty on failure."""
        ...
