"""Platform probe registry.

Each supported operating system registers one probe class under the name
``platform.system()`` reports for it. Systems without a registered probe get
a probe built on the ``platform`` module.
"""

from __future__ import annotations

import platform

from hostsnap.core.interfaces import PlatformProbe
from hostsnap.probes.base import GenericProbe, StaticProbe
from hostsnap.probes.bsd import BsdProbe
from hostsnap.probes.darwin import DarwinProbe
from hostsnap.probes.linux import LinuxProbe
from hostsnap.probes.windows import WindowsProbe

_PROBES: dict[str, type[PlatformProbe]] = {}


def register_probe(system: str, probe_class: type[PlatformProbe]) -> None:
    """Register a probe implementation for an operating system.

    Parameters
    ----------
    system : str
        System name as reported by ``platform.system()``, e.g. "Linux"
    probe_class : type[PlatformProbe]
        Class implementing the PlatformProbe protocol
    """
    _PROBES[system] = probe_class


def get_probe(system: str) -> type[PlatformProbe]:
    """Get the probe class registered for a system.

    Raises
    ------
    ValueError
        If no probe is registered for the system
    """
    if system not in _PROBES:
        raise ValueError(f"Unknown platform: {system}")
    return _PROBES[system]


def list_probes() -> list[str]:
    """List all system names with a registered probe."""
    return list(_PROBES.keys())


def detect_probe(system: str | None = None) -> PlatformProbe:
    """Create the probe for the running (or given) operating system.

    Parameters
    ----------
    system : str | None
        System name; defaults to ``platform.system()``

    Returns
    -------
    PlatformProbe
        Registered probe instance, or a GenericProbe for unknown systems
    """
    system = system or platform.system()

    try:
        return get_probe(system)()
    except ValueError:
        return GenericProbe()


__all__ = [
    "register_probe",
    "get_probe",
    "list_probes",
    "detect_probe",
    "BsdProbe",
    "DarwinProbe",
    "GenericProbe",
    "LinuxProbe",
    "StaticProbe",
    "WindowsProbe",
]

register_probe("Linux", LinuxProbe)
register_probe("Darwin", DarwinProbe)
register_probe("Windows", WindowsProbe)
for _bsd in ("FreeBSD", "OpenBSD", "NetBSD", "DragonFly"):
    register_probe(_bsd, BsdProbe)
