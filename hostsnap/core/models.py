"""Immutable value types making up a host snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class OsInfo:
    """Operating system identity.

    Attributes
    ----------
    name : str
        OS or distribution name, e.g. "Debian GNU/Linux"
    version : str
        OS version, empty when undetectable
    """

    name: str = ""
    version: str = ""


@dataclass(frozen=True)
class CpuInfo:
    """CPU identity.

    Attributes
    ----------
    model : str
        Marketing model string, e.g. "Intel(R) Core(TM) i7-9750H"
    arch : str
        Machine architecture, e.g. "x86_64"
    """

    model: str = ""
    arch: str = ""


@dataclass(frozen=True)
class ToolInfo:
    """External tool identity.

    Attributes
    ----------
    name : str
        Display name, always populated
    version : str
        Extracted version, empty when the tool is absent or unparsable
    path : str
        Canonical executable path, empty when the tool is absent
    """

    name: str
    version: str = ""
    path: str = ""


@dataclass(frozen=True)
class LibraryInfo:
    """Linked support library version."""

    name: str
    version: str = ""


@dataclass(frozen=True)
class NetworkInfo:
    """Reachable network identity of the host.

    Both fields are empty when the probe failed.

    Attributes
    ----------
    public_ip : str
        Address the diagnostic endpoint saw the request coming from
    private_ip : str
        Local address of the outbound connection
    """

    public_ip: str = ""
    private_ip: str = ""

    @property
    def is_complete(self) -> bool:
        """Whether both addresses are known."""
        return bool(self.public_ip) and bool(self.private_ip)


@dataclass(frozen=True)
class Snapshot:
    """Complete diagnostic result for one request.

    Attributes
    ----------
    os : OsInfo
        Operating system identity
    cpu : CpuInfo
        CPU identity
    network : NetworkInfo
        Public and private addresses
    tools : tuple[ToolInfo, ...]
        Interpreter, 7-Zip and UnRAR, in that order
    libraries : tuple[LibraryInfo, ...]
        Linked support libraries in build order
    """

    os: OsInfo = field(default_factory=OsInfo)
    cpu: CpuInfo = field(default_factory=CpuInfo)
    network: NetworkInfo = field(default_factory=NetworkInfo)
    tools: tuple[ToolInfo, ...] = ()
    libraries: tuple[LibraryInfo, ...] = ()
