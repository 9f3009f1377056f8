"""Utility functions for hostsnap."""

import logging
import subprocess
import sys
from collections.abc import Sequence
from typing import Any

from hostsnap.constants import COMMAND_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


def run_command(
    args: Sequence[str], timeout: float = COMMAND_TIMEOUT_SECONDS
) -> list[str] | None:
    """Run a short-lived command and capture its standard output lines.

    Standard input is closed and standard error discarded, so tools that
    print usage or wait for a keypress return promptly. The child is killed
    when the timeout expires.

    Parameters
    ----------
    args : Sequence[str]
        Executable followed by its arguments
    timeout : float
        Seconds to wait before killing the child (default: 5)

    Returns
    -------
    list[str] | None
        Output lines without line terminators, or None if the command
        could not be launched or timed out
    """
    try:
        result = subprocess.run(
            list(args),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        logger.warning("Command timed out after %ss: %s", timeout, args[0])
        return None
    except (OSError, ValueError) as e:
        logger.debug("Failed to run %s: %s", args[0], e)
        return None

    return result.stdout.splitlines()


def first_line(lines: Sequence[str] | None) -> str:
    """Return the first non-blank line, trimmed.

    Parameters
    ----------
    lines : Sequence[str] | None
        Captured output lines

    Returns
    -------
    str
        First non-blank line without surrounding whitespace, or empty string
    """
    for line in lines or ():
        stripped = line.strip()
        if stripped:
            return stripped

    return ""


def trim_quotes(value: str) -> str:
    """Strip one leading and one trailing double quote.

    Parameters
    ----------
    value : str
        Value such as '"Debian GNU/Linux"'

    Returns
    -------
    str
        Value without surrounding quotes
    """
    if value.startswith('"'):
        value = value[1:]

    if value.endswith('"'):
        value = value[:-1]

    return value


def log_and_print_error(message: str, *args: Any) -> None:
    """Log error message and print to stderr.

    Parameters
    ----------
    message : str
        Error message with optional format placeholders
    *args : Any
        Format arguments for message
    """
    logging.error(message, *args)
    formatted_msg = message % args if args else message
    print(f"Error: {formatted_msg}", file=sys.stderr)
