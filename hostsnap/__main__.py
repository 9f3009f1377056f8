#!/usr/bin/env python3
"""hostsnap - host diagnostic snapshots."""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from hostsnap.cli.main import main
from hostsnap.core.aggregator import SnapshotBuilder
from hostsnap.core.config import DEFAULT_CONFIG_FILE, ConfigLoader
from hostsnap.core.deadline import Deadline
from hostsnap.core.interfaces import PlatformProbe
from hostsnap.core.models import Snapshot
from hostsnap.probes import detect_probe
from hostsnap.serializers import to_dict, to_json, to_xml
from hostsnap.templates import CONFIG_TEMPLATE
from hostsnap.utils import log_and_print_error

logger = logging.getLogger(__name__)

RENDERERS: dict[str, Callable[[Snapshot], str]] = {
    "json": to_json,
    "xml": to_xml,
}


class HostSnap:
    """Main CLI interface for hostsnap."""

    def __init__(
        self,
        builder_factory: Callable[..., SnapshotBuilder] | None = None,
        probe_factory: Callable[[], PlatformProbe] | None = None,
    ) -> None:
        """Initialize HostSnap CLI with optional dependency injection."""
        self._config_loader = ConfigLoader()
        self._builder_factory = builder_factory or SnapshotBuilder.from_settings
        self._probe_factory = probe_factory or detect_probe

    def _load_settings(self, config: str | None, **overrides: Any) -> dict[str, Any]:
        loaded = self._config_loader.load_config(config)
        settings = self._config_loader.get_settings(loaded)

        for key, value in overrides.items():
            if value is not None:
                settings[key] = value

        self._config_loader.validate_config(settings)

        return settings

    def _builder(self, settings: dict[str, Any]) -> SnapshotBuilder:
        return self._builder_factory(settings, probe=self._probe_factory())

    def snapshot(
        self,
        format: str = "json",
        config: str | None = None,
        parallel: bool = False,
        no_network: bool = False,
        timeout: float | None = None,
    ) -> str:
        """Collect a diagnostic snapshot of this host.

        Parameters
        ----------
        format : str
            Output format, "json" or "xml"
        config : str | None
            Path to the config file (default: HOSTSNAP_CONFIG or hostsnap.yaml)
        parallel : bool
            Collect platform, tools and network concurrently
        no_network : bool
            Skip the public IP lookup
        timeout : float | None
            Overall time budget in seconds

        Returns
        -------
        str
            Serialized snapshot

        Raises
        ------
        ValueError
            If the format or the configuration is invalid
        """
        renderer = RENDERERS.get(str(format).lower())
        if renderer is None:
            raise ValueError(
                f"Unknown format '{format}'. Available formats: {', '.join(RENDERERS)}"
            )

        settings = self._load_settings(
            config,
            parallel=True if parallel else None,
            network_enabled=False if no_network else None,
        )

        snapshot = self._builder(settings).build(timeout=timeout)

        return renderer(snapshot)

    def tools(self, config: str | None = None) -> str:
        """Show the resolved tool table as JSON."""
        settings = self._load_settings(config, network_enabled=False)
        builder = self._builder(settings)

        tools = builder.tool_resolver.resolve_all()

        return json.dumps(to_dict(Snapshot(tools=tools))["Tools"], ensure_ascii=False)

    def network(self, config: str | None = None, timeout: float | None = None) -> str:
        """Show the public and private IP addresses as JSON."""
        settings = self._load_settings(config, network_enabled=True)
        builder = self._builder(settings)

        network = builder.network_client.resolve(deadline=Deadline(timeout))

        if not network.is_complete:
            logger.warning("Could not determine the network identity")

        return json.dumps(to_dict(Snapshot(network=network))["Network"])

    def init(self, force: bool = False) -> None:
        """Create a default hostsnap.yaml configuration file."""
        config_path = os.environ.get("HOSTSNAP_CONFIG", DEFAULT_CONFIG_FILE)
        config_file = Path(config_path)

        if config_file.exists() and not force:
            log_and_print_error(
                "%s already exists. Use --force to overwrite.",
                config_path,
            )
            sys.exit(1)

        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, "w") as f:
            f.write(CONFIG_TEMPLATE)

        print(f"Created {config_path} configuration file.")


if __name__ == "__main__":
    main()
