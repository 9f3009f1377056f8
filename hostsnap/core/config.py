import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from omegaconf import OmegaConf
from omegaconf.errors import InterpolationResolutionError

from hostsnap.constants import (
    COMMAND_TIMEOUT_SECONDS,
    DEFAULT_SEVEN_ZIP_CMD,
    DEFAULT_UNRAR_CMD,
    DIAGNOSTIC_HOST,
    DIAGNOSTIC_PORT,
    NETWORK_CACHE_TTL_SECONDS,
    NETWORK_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "hostsnap.yaml"


class ConfigLoader:
    """Load and merge YAML configuration with defaults."""

    def __init__(self) -> None:
        """Initialize ConfigLoader with built-in defaults."""
        self.BUILT_IN_DEFAULTS = {
            "python_cmd": "",
            "seven_zip_cmd": DEFAULT_SEVEN_ZIP_CMD,
            "unrar_cmd": DEFAULT_UNRAR_CMD,
            "network_host": DIAGNOSTIC_HOST,
            "network_port": DIAGNOSTIC_PORT,
            "network_enabled": True,
            "network_ttl": NETWORK_CACHE_TTL_SECONDS,
            "network_timeout": NETWORK_TIMEOUT_SECONDS,
            "command_timeout": COMMAND_TIMEOUT_SECONDS,
            "stale_if_error": False,
            "parallel": False,
        }

    def load_config(self, config_path: str | None = None) -> dict[str, Any]:
        """Load configuration from YAML file.

        Parameters
        ----------
        config_path : str | None
            Path to YAML config file. If None, checks HOSTSNAP_CONFIG env var,
            then falls back to hostsnap.yaml

        Returns
        -------
        dict[str, Any]
            Parsed configuration with its defaults section, with all variable
            interpolations resolved

        Raises
        ------
        ValueError
            If the file is not valid YAML or a variable cannot be resolved
        RuntimeError
            If the file exists but cannot be read
        """
        if config_path is None:
            config_path = os.environ.get("HOSTSNAP_CONFIG", DEFAULT_CONFIG_FILE)

        config_file = Path(config_path)

        if not config_file.exists():
            logger.debug("Config file %s not found, using built-in defaults", config_file)
            return {"defaults": {}}

        try:
            cfg = OmegaConf.load(config_file)
        except yaml.YAMLError as e:
            logger.error("Failed to parse YAML config file %s: %s", config_file, e)
            raise ValueError(f"Invalid YAML in {config_file}: {e}") from e
        except OSError as e:
            logger.error("Failed to read config file %s: %s", config_file, e)
            raise RuntimeError(f"Failed to read config file {config_file}: {e}") from e

        if cfg is None:
            return {"defaults": {}}

        if "vars" in cfg:
            vars_dict = OmegaConf.to_container(cfg.vars, resolve=False)
            for key, value in vars_dict.items():
                if key not in cfg:
                    cfg[key] = value

        try:
            config = OmegaConf.to_container(cfg, resolve=True, throw_on_missing=True)
        except InterpolationResolutionError as e:
            logger.error("Failed to resolve configuration variables: %s", e)
            raise ValueError(f"Configuration variable resolution error: {e}") from e
        except (ValueError, KeyError, AttributeError) as e:
            logger.error("Failed to resolve configuration variables: %s", e)
            raise ValueError(f"Configuration variable resolution error: {e}") from e

        if not isinstance(config, dict):
            raise ValueError(f"Config file {config_file} must contain a mapping")

        return config

    def get_settings(self, config: dict[str, Any]) -> dict[str, Any]:
        """Merge the config file's defaults section onto the built-in defaults.

        Parameters
        ----------
        config : dict[str, Any]
            Full configuration from YAML

        Returns
        -------
        dict[str, Any]
            Merged settings (built-in defaults + YAML defaults)
        """
        merged = copy.deepcopy(self.BUILT_IN_DEFAULTS)

        yaml_defaults = config.get("defaults") or {}
        if not isinstance(yaml_defaults, dict):
            raise ValueError("defaults must be a mapping")

        for key, value in yaml_defaults.items():
            merged[key] = value

        return merged

    def validate_config(self, config: dict[str, Any]) -> None:
        """Validate settings have correct types and ranges.

        Parameters
        ----------
        config : dict[str, Any]
            Merged settings to validate

        Raises
        ------
        ValueError
            If settings are invalid
        """
        unknown = sorted(set(config) - set(self.BUILT_IN_DEFAULTS))
        if unknown:
            logger.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))

        self._validate_commands(config)
        self._validate_network(config)
        self._validate_flags(config)

    def _validate_commands(self, config: dict[str, Any]) -> None:
        """Validate tool command lines and the command timeout.

        Raises
        ------
        ValueError
            If a command is not a string or the timeout is not positive
        """
        for field in ("python_cmd", "seven_zip_cmd", "unrar_cmd"):
            if field in config and not isinstance(config[field], str):
                raise ValueError(f"{field} must be a string")

        self._validate_positive_number(config, "command_timeout")

    def _validate_network(self, config: dict[str, Any]) -> None:
        """Validate the diagnostic endpoint settings.

        Raises
        ------
        ValueError
            If the host, port, TTL or timeout is invalid
        """
        host = config.get("network_host")
        if not isinstance(host, str) or not host.strip():
            raise ValueError("network_host must be a non-empty string")

        port = config.get("network_port")
        if isinstance(port, bool) or not isinstance(port, int):
            raise ValueError("network_port must be an integer")

        if not (1 <= port <= 65535):
            raise ValueError("network_port must be between 1 and 65535")

        ttl = config.get("network_ttl")
        if isinstance(ttl, bool) or not isinstance(ttl, (int, float)) or ttl < 0:
            raise ValueError("network_ttl must be a non-negative number")

        self._validate_positive_number(config, "network_timeout")

    def _validate_flags(self, config: dict[str, Any]) -> None:
        for field in ("network_enabled", "stale_if_error", "parallel"):
            if field in config and not isinstance(config[field], bool):
                raise ValueError(f"{field} must be a boolean")

    def _validate_positive_number(self, config: dict[str, Any], field: str) -> None:
        value = config.get(field)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ValueError(f"{field} must be a positive number")
