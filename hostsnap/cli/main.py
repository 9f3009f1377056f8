"""CLI entry point for hostsnap."""

from __future__ import annotations

import logging
import os
import sys

import fire

from hostsnap.constants import EXIT_CONFIG_ERROR, EXIT_ERROR


def get_hostsnap_class() -> type:
    """Get HostSnap class on-demand to avoid circular imports.

    Returns
    -------
    type
        HostSnap command class
    """
    from hostsnap.__main__ import HostSnap

    return HostSnap


def is_debug_mode() -> bool:
    return os.environ.get("HOSTSNAP_DEBUG") == "1"


def handle_value_error(error: ValueError, debug_mode: bool) -> None:
    """Handle configuration or argument error.

    Parameters
    ----------
    error : ValueError
        The value error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ValueError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(f"Configuration error: {error}", file=sys.stderr)
    sys.exit(EXIT_CONFIG_ERROR)


def handle_runtime_error(error: RuntimeError, debug_mode: bool) -> None:
    """Handle unexpected runtime error.

    Parameters
    ----------
    error : RuntimeError
        The runtime error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    RuntimeError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(f"Unexpected error: {error}", file=sys.stderr)
    sys.exit(EXIT_ERROR)


def create_log_handler() -> logging.Handler:
    """Create the handler that writes log records to standard error.

    Standard output is reserved for command results so that serialized
    snapshots stay machine-readable.

    Returns
    -------
    logging.Handler
        Stream handler bound to the current sys.stderr
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    return handler


def setup_logging(debug_mode: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug_mode else logging.WARNING,
        handlers=[create_log_handler()],
    )


def main() -> None:
    """Entry point for Fire CLI with graceful error handling.

    Fire maps the HostSnap methods to subcommands and prints their return
    values, so serialized snapshots land on stdout while log output goes to
    stderr.
    """
    debug_mode = is_debug_mode()
    setup_logging(debug_mode)

    try:
        fire.Fire(get_hostsnap_class())
    except ValueError as e:
        handle_value_error(e, debug_mode)
    except RuntimeError as e:
        handle_runtime_error(e, debug_mode)
