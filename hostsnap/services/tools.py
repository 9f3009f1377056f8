"""Location and version sniffing of external command-line tools."""

from __future__ import annotations

import logging
import os
import re
import shlex
import shutil
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from hostsnap.constants import (
    COMMAND_TIMEOUT_SECONDS,
    DEFAULT_SEVEN_ZIP_CMD,
    DEFAULT_UNRAR_CMD,
    PYTHON_CANDIDATES,
    PYTHON_TOOL_NAME,
    SEVEN_ZIP_MARKER,
    SEVEN_ZIP_TOOL_NAME,
    UNRAR_MARKER,
    UNRAR_TOOL_NAME,
)
from hostsnap.core.deadline import Deadline, cap_timeout
from hostsnap.core.models import ToolInfo
from hostsnap.utils import first_line, run_command

logger = logging.getLogger(__name__)

CommandRunner = Callable[[Sequence[str], float], list[str] | None]

VERSION_PATTERN = re.compile(r"\d+\.\d+")

LOCATE_CMD = "where" if os.name == "nt" else "which"


def split_executable(command: str | None) -> str:
    """Get the executable of a command line, without any arguments.

    Parameters
    ----------
    command : str | None
        Configured command line, e.g. '"/opt/7-Zip/7z" -bd'

    Returns
    -------
    str
        Executable token with quotes removed, or empty string
    """
    if not command or not command.strip():
        return ""

    command = command.strip()

    try:
        tokens = shlex.split(command, posix=os.name != "nt")
    except ValueError:
        tokens = command.split()

    if not tokens:
        return ""

    return tokens[0].strip('"')


def resolve_command_path(command: str | None) -> str:
    """Resolve a configured command to a canonical executable path.

    Bare names are looked up on PATH. Symlinks are followed.

    Parameters
    ----------
    command : str | None
        Configured command line, possibly with arguments

    Returns
    -------
    str
        Absolute path of an existing file, or empty string when the command
        is empty or does not resolve
    """
    executable = split_executable(command)
    if not executable:
        return ""

    if not os.path.dirname(executable):
        located = shutil.which(executable)
        if located is None:
            logger.debug("%s not found on PATH", executable)
            return ""
        executable = located

    try:
        resolved = Path(executable).expanduser().resolve(strict=True)
    except (OSError, RuntimeError):
        logger.debug("%s does not exist", executable)
        return ""

    if not resolved.is_file():
        return ""

    return str(resolved)


def extract_version(line: str) -> str:
    """Extract the first ``<digits>.<digits>`` token from a banner line.

    Parameters
    ----------
    line : str
        Banner line, e.g. "7-Zip (a) 19.00 (x64) : Copyright (c) 1999-2018"

    Returns
    -------
    str
        Version token such as "19.00", or empty string
    """
    match = VERSION_PATTERN.search(line)
    return match.group(0) if match else ""


def find_version(lines: Iterable[str] | None, marker: str) -> str:
    """Extract the version from the first banner line containing a marker.

    Parameters
    ----------
    lines : Iterable[str] | None
        Captured tool output
    marker : str
        Substring identifying the banner line

    Returns
    -------
    str
        Version token, or empty string when no line carries the marker
    """
    for line in lines or ():
        if marker in line:
            return extract_version(line)

    return ""


class ToolVersionResolver:
    """Resolve the interpreter and archive utilities to ToolInfo entries.

    Parameters
    ----------
    python_cmd : str
        Interpreter command line; empty to probe PYTHON_CANDIDATES on PATH
    seven_zip_cmd : str
        7-Zip command line
    unrar_cmd : str
        UnRAR command line
    timeout : float
        Seconds allowed per subprocess (default: 5)
    runner : CommandRunner | None
        Runs a command and returns its stdout lines or None
        (default: hostsnap.utils.run_command)
    """

    def __init__(
        self,
        python_cmd: str = "",
        seven_zip_cmd: str = DEFAULT_SEVEN_ZIP_CMD,
        unrar_cmd: str = DEFAULT_UNRAR_CMD,
        timeout: float = COMMAND_TIMEOUT_SECONDS,
        runner: CommandRunner | None = None,
    ) -> None:
        self.python_cmd = python_cmd
        self.seven_zip_cmd = seven_zip_cmd
        self.unrar_cmd = unrar_cmd
        self.timeout = timeout
        self._runner = runner or run_command

    def _run(self, args: Sequence[str], deadline: Deadline | None) -> list[str] | None:
        if deadline is not None and deadline.expired():
            logger.debug("Deadline reached, not running %s", args[0])
            return None

        return self._runner(args, cap_timeout(self.timeout, deadline))

    def resolve_all(self, deadline: Deadline | None = None) -> tuple[ToolInfo, ...]:
        """Resolve every tool in display order.

        Parameters
        ----------
        deadline : Deadline | None
            Overall budget; tools not reached in time come back empty

        Returns
        -------
        tuple[ToolInfo, ...]
            Interpreter, 7-Zip and UnRAR entries
        """
        return (
            self.resolve_python(deadline=deadline),
            self.resolve_seven_zip(deadline=deadline),
            self.resolve_unrar(deadline=deadline),
        )

    def resolve_seven_zip(self, deadline: Deadline | None = None) -> ToolInfo:
        return self.resolve_unpacker(
            SEVEN_ZIP_TOOL_NAME, self.seven_zip_cmd, SEVEN_ZIP_MARKER, deadline
        )

    def resolve_unrar(self, deadline: Deadline | None = None) -> ToolInfo:
        return self.resolve_unpacker(UNRAR_TOOL_NAME, self.unrar_cmd, UNRAR_MARKER, deadline)

    def resolve_unpacker(
        self,
        name: str,
        command: str,
        marker: str,
        deadline: Deadline | None = None,
    ) -> ToolInfo:
        """Resolve an archive utility that prints its banner when run bare.

        Parameters
        ----------
        name : str
            Display name of the tool
        command : str
            Configured command line
        marker : str
            Substring identifying the banner line
        deadline : Deadline | None
            Overall budget

        Returns
        -------
        ToolInfo
            Entry with empty path and version when the tool is absent
        """
        path = resolve_command_path(command)
        if not path:
            logger.debug("%s not available (command: %r)", name, command)
            return ToolInfo(name=name)

        output = self._run([path], deadline)
        if not output:
            logger.debug("%s produced no output", name)
            return ToolInfo(name=name, path=path)

        version = find_version(output, marker)
        if not version:
            logger.debug("Could not find %s version in its banner", name)

        return ToolInfo(name=name, version=version, path=path)

    def find_python(self) -> str:
        """Get the first interpreter command available on PATH.

        Returns
        -------
        str
            Command name from PYTHON_CANDIDATES, or empty string
        """
        for candidate in PYTHON_CANDIDATES:
            if shutil.which(candidate):
                return candidate

        return ""

    def resolve_python(self, deadline: Deadline | None = None) -> ToolInfo:
        """Resolve the interpreter via ``--version`` and a PATH lookup.

        Parameters
        ----------
        deadline : Deadline | None
            Overall budget

        Returns
        -------
        ToolInfo
            Interpreter entry, e.g. version "3.12.3"
        """
        interpreter = split_executable(self.python_cmd) or self.find_python()
        if not interpreter:
            logger.debug("No Python interpreter found")
            return ToolInfo(name=PYTHON_TOOL_NAME)

        path = resolve_command_path(interpreter)

        # e.g. Python 3.12.3
        banner = first_line(self._run([path or interpreter, "--version"], deadline))
        _, _, version = banner.partition(" ")

        if not path:
            path = first_line(self._run([LOCATE_CMD, interpreter], deadline))

        return ToolInfo(name=PYTHON_TOOL_NAME, version=version.strip(), path=path)
