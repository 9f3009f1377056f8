"""Linux probe backed by os-release, /proc/cpuinfo and uname."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from hostsnap.constants import (
    COMMAND_TIMEOUT_SECONDS,
    CPUINFO_FILE,
    DOCKER_ENV_FILE,
    OS_RELEASE_FILE,
)
from hostsnap.core.models import CpuInfo, OsInfo
from hostsnap.probes.base import CommandProbe, CommandRunner
from hostsnap.utils import first_line, trim_quotes

logger = logging.getLogger(__name__)

DOCKER_SUFFIX = " (Running in Docker)"

CPUINFO_MODEL_KEYS = ("model name", "Processor", "cpu model")


def parse_os_release(lines: Iterable[str]) -> tuple[str, str]:
    """Get distribution name and version from os-release content.

    The first ``NAME=`` and ``VERSION_ID=`` lines win; ``BUILD_ID=`` is used
    for rolling releases that carry no version.

    Parameters
    ----------
    lines : Iterable[str]
        Lines of an os-release file

    Returns
    -------
    tuple[str, str]
        Name and version with surrounding quotes removed, either may be empty
    """
    name = ""
    version = ""
    build_id = ""

    for line in lines:
        key, separator, value = line.strip().partition("=")
        if not separator:
            continue

        value = trim_quotes(value.strip())

        if key == "NAME" and not name:
            name = value
        elif key == "VERSION_ID" and not version:
            version = value
        elif key == "BUILD_ID" and not build_id:
            build_id = value

    return name, version or build_id


def parse_cpu_model(lines: Iterable[str]) -> str:
    """Get the CPU model from /proc/cpuinfo content.

    x86 kernels report ``model name``, ARM kernels ``Processor`` and MIPS
    kernels ``cpu model``.
    """
    for line in lines:
        key, separator, value = line.partition(":")
        if separator and key.strip() in CPUINFO_MODEL_KEYS and value.strip():
            return value.strip()

    return ""


def parse_lscpu_model(lines: Iterable[str] | None) -> str:
    for line in lines or ():
        key, separator, value = line.partition(":")
        if separator and key.strip() == "Model name":
            return value.strip()

    return ""


class LinuxProbe(CommandProbe):
    """Platform probe for Linux hosts.

    Parameters
    ----------
    runner : CommandRunner | None
        Command runner used for uname and lscpu
    timeout : float
        Seconds allowed per command
    os_release_path : str
        Path of the os-release file
    cpuinfo_path : str
        Path of the cpuinfo pseudo-file
    docker_env_path : str
        Marker file whose presence means the host is a Docker container
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        timeout: float = COMMAND_TIMEOUT_SECONDS,
        os_release_path: str = OS_RELEASE_FILE,
        cpuinfo_path: str = CPUINFO_FILE,
        docker_env_path: str = DOCKER_ENV_FILE,
    ) -> None:
        super().__init__(runner, timeout)
        self.os_release_path = Path(os_release_path)
        self.cpuinfo_path = Path(cpuinfo_path)
        self.docker_env_path = Path(docker_env_path)

    def _read_lines(self, path: Path) -> list[str]:
        try:
            return path.read_text(encoding="utf-8", errors="replace").splitlines()
        except OSError as e:
            logger.warning("Failed to read %s: %s", path, e)
            return []

    def os_info(self) -> OsInfo:
        name, version = parse_os_release(self._read_lines(self.os_release_path))

        if not name:
            name = first_line(self.run("uname", "-o"))

        if not version:
            version = first_line(self.run("uname", "-r"))

        if name and self.docker_env_path.exists():
            name += DOCKER_SUFFIX

        return OsInfo(name=name, version=version)

    def cpu_info(self) -> CpuInfo:
        model = parse_cpu_model(self._read_lines(self.cpuinfo_path))

        if not model:
            model = parse_lscpu_model(self.run("lscpu"))
            if not model:
                logger.warning("Failed to find CPU model")

        return CpuInfo(model=model, arch=self.machine_arch())
