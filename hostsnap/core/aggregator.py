"""Composition of probe, tool, library and network results into a Snapshot."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, TypeVar

from hostsnap.constants import PYTHON_TOOL_NAME, SEVEN_ZIP_TOOL_NAME, UNRAR_TOOL_NAME
from hostsnap.core.deadline import Deadline
from hostsnap.core.interfaces import NetworkResolver, PlatformProbe, ToolResolver
from hostsnap.core.libraries import LIBRARIES
from hostsnap.core.models import (
    CpuInfo,
    LibraryInfo,
    NetworkInfo,
    OsInfo,
    Snapshot,
    ToolInfo,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Tool table reported when resolution fails or runs out of time
UNRESOLVED_TOOLS = (
    ToolInfo(PYTHON_TOOL_NAME),
    ToolInfo(SEVEN_ZIP_TOOL_NAME),
    ToolInfo(UNRAR_TOOL_NAME),
)


def _safely(step: Callable[[], T], fallback: T, description: str) -> T:
    try:
        return step()
    except Exception as e:
        logger.warning("Failed to collect %s: %s", description, e)
        return fallback


class SnapshotBuilder:
    """Build diagnostic snapshots from injected collaborators.

    The builder holds no state of its own; only the network client keeps a
    cache between builds.

    Parameters
    ----------
    probe : PlatformProbe
        Source of OS and CPU identity
    tool_resolver : ToolResolver
        Source of the tool table
    network_client : NetworkResolver | None
        Source of the network identity; None skips the network probe and
        reports empty addresses
    libraries : tuple[LibraryInfo, ...]
        Library table copied into every snapshot
    parallel : bool
        Run the probe, tool and network steps on worker threads
    """

    def __init__(
        self,
        probe: PlatformProbe,
        tool_resolver: ToolResolver,
        network_client: NetworkResolver | None = None,
        libraries: tuple[LibraryInfo, ...] = LIBRARIES,
        parallel: bool = False,
    ) -> None:
        self.probe = probe
        self.tool_resolver = tool_resolver
        self.network_client = network_client
        self.libraries = tuple(libraries)
        self.parallel = parallel

    @classmethod
    def from_settings(
        cls, settings: dict[str, Any], probe: PlatformProbe | None = None
    ) -> SnapshotBuilder:
        """Create a builder wired from merged configuration settings.

        Parameters
        ----------
        settings : dict[str, Any]
            Validated settings from ConfigLoader.get_settings
        probe : PlatformProbe | None
            Probe to use instead of the one detected for this platform

        Returns
        -------
        SnapshotBuilder
            Builder with a tool resolver and, when enabled, a network client
        """
        from hostsnap.probes import detect_probe
        from hostsnap.services import NetworkIdentityClient, ToolVersionResolver

        tool_resolver = ToolVersionResolver(
            python_cmd=settings["python_cmd"],
            seven_zip_cmd=settings["seven_zip_cmd"],
            unrar_cmd=settings["unrar_cmd"],
            timeout=settings["command_timeout"],
        )

        network_client = None
        if settings["network_enabled"]:
            network_client = NetworkIdentityClient(
                host=settings["network_host"],
                port=settings["network_port"],
                ttl_seconds=settings["network_ttl"],
                timeout=settings["network_timeout"],
                stale_if_error=settings["stale_if_error"],
            )

        return cls(
            probe=probe or detect_probe(),
            tool_resolver=tool_resolver,
            network_client=network_client,
            parallel=settings["parallel"],
        )

    def _platform(self) -> tuple[OsInfo, CpuInfo]:
        os_info = _safely(self.probe.os_info, OsInfo(), "OS information")
        cpu_info = _safely(self.probe.cpu_info, CpuInfo(), "CPU information")
        return os_info, cpu_info

    def _tools(self, deadline: Deadline) -> tuple[ToolInfo, ...]:
        return _safely(
            lambda: tuple(self.tool_resolver.resolve_all(deadline=deadline)),
            UNRESOLVED_TOOLS,
            "tool versions",
        )

    def _network(self, deadline: Deadline) -> NetworkInfo:
        if self.network_client is None:
            return NetworkInfo()

        return _safely(
            lambda: self.network_client.resolve(deadline=deadline),
            NetworkInfo(),
            "network identity",
        )

    def build(self, timeout: float | None = None) -> Snapshot:
        """Collect a complete snapshot. Never raises.

        Parameters
        ----------
        timeout : float | None
            Overall budget in seconds; steps not finished in time report
            empty values. None waits for every step.

        Returns
        -------
        Snapshot
            Snapshot with undeterminable values left empty
        """
        deadline = Deadline(timeout)

        if self.parallel:
            return self._build_parallel(deadline)

        os_info, cpu_info = self._platform()
        tools = self._tools(deadline)
        network = self._network(deadline)

        return Snapshot(
            os=os_info,
            cpu=cpu_info,
            network=network,
            tools=tools,
            libraries=self.libraries,
        )

    def _build_parallel(self, deadline: Deadline) -> Snapshot:
        executor = ThreadPoolExecutor(max_workers=3, thread_name_prefix="hostsnap")

        try:
            platform_future = executor.submit(self._platform)
            tools_future = executor.submit(self._tools, deadline)
            network_future = executor.submit(self._network, deadline)

            os_info, cpu_info = self._wait(
                platform_future, deadline, (OsInfo(), CpuInfo()), "OS and CPU information"
            )
            tools = self._wait(tools_future, deadline, UNRESOLVED_TOOLS, "tool versions")
            network = self._wait(network_future, deadline, NetworkInfo(), "network identity")
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return Snapshot(
            os=os_info,
            cpu=cpu_info,
            network=network,
            tools=tools,
            libraries=self.libraries,
        )

    def _wait(self, future: Future, deadline: Deadline, fallback: Any, description: str) -> Any:
        try:
            return future.result(timeout=deadline.remaining())
        except FutureTimeoutError:
            logger.warning("Timed out collecting %s", description)
            return fallback
