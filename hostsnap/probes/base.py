"""Helpers shared by the platform probes."""

from __future__ import annotations

import logging
import platform
from collections.abc import Callable, Sequence

from hostsnap.constants import COMMAND_TIMEOUT_SECONDS
from hostsnap.core.models import CpuInfo, OsInfo
from hostsnap.utils import first_line, run_command

logger = logging.getLogger(__name__)

CommandRunner = Callable[[Sequence[str], float], list[str] | None]


class CommandProbe:
    """Base for probes that read values from platform commands.

    Parameters
    ----------
    runner : CommandRunner | None
        Runs a command and returns its stdout lines or None
        (default: hostsnap.utils.run_command)
    timeout : float
        Seconds allowed per command (default: 5)
    """

    def __init__(
        self, runner: CommandRunner | None = None, timeout: float = COMMAND_TIMEOUT_SECONDS
    ) -> None:
        self._runner = runner or run_command
        self.timeout = timeout

    def run(self, *args: str) -> list[str] | None:
        return self._runner(args, self.timeout)

    def read_command(self, *args: str) -> str:
        """Get the first trimmed output line of a command, or empty string."""
        value = first_line(self.run(*args))
        if not value:
            logger.warning("Failed to read '%s'", " ".join(args))
        return value

    def machine_arch(self) -> str:
        """Get the machine architecture from ``uname -m``."""
        return first_line(self.run("uname", "-m")) or platform.machine()


class GenericProbe:
    """Probe built on the ``platform`` module for unrecognised systems."""

    def os_info(self) -> OsInfo:
        return OsInfo(name=platform.system(), version=platform.release())

    def cpu_info(self) -> CpuInfo:
        return CpuInfo(model=platform.processor(), arch=platform.machine())


class StaticProbe:
    """Probe returning values the caller already knows.

    Parameters
    ----------
    os : OsInfo | None
        Operating system identity
    cpu : CpuInfo | None
        CPU identity
    """

    def __init__(self, os: OsInfo | None = None, cpu: CpuInfo | None = None) -> None:
        self._os = os or OsInfo()
        self._cpu = cpu or CpuInfo()

    def os_info(self) -> OsInfo:
        return self._os

    def cpu_info(self) -> CpuInfo:
        return self._cpu
