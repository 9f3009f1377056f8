"""Global constants for hostsnap.

This module contains application-wide constants shared by the probes, the
tool resolver, the network identity client and the CLI.
"""

DIAGNOSTIC_HOST = "ip.nzbget.com"
"""Hostname of the endpoint that echoes the caller's public IP address.

Also used as the TLS server name indication during the handshake.
"""

DIAGNOSTIC_PORT = 443
"""Standard HTTPS port of the diagnostic endpoint."""

NETWORK_CACHE_TTL_SECONDS = 7200
"""Maximum age in seconds of a cached network identity.

Two hours keeps repeated diagnostic requests from hitting the endpoint
while still noticing address changes within a working day.
"""

NETWORK_TIMEOUT_SECONDS = 5
"""Timeout in seconds for each socket operation of a network identity attempt.

Bounds DNS-resolved connect, TLS handshake, request write and response read
so a stalled peer cannot hang the whole snapshot.
"""

MAX_RESPONSE_BYTES = 65536
"""Maximum number of response bytes read from the diagnostic endpoint.

The endpoint answers with a short IP literal; anything larger is treated
as a protocol violation.
"""

RECV_CHUNK_SIZE = 4096
"""Number of bytes requested per socket read."""

COMMAND_TIMEOUT_SECONDS = 5
"""Timeout in seconds for tool version checks and platform commands.

Prevents indefinite waits when a tool prompts for input or hangs while
printing its banner. The child process is killed when it expires.
"""

PYTHON_TOOL_NAME = "Python"
"""Display name of the interpreter entry in the tool table."""

SEVEN_ZIP_TOOL_NAME = "7-Zip"
"""Display name of the 7-Zip entry in the tool table."""

UNRAR_TOOL_NAME = "UnRAR"
"""Display name of the UnRAR entry in the tool table."""

SEVEN_ZIP_MARKER = "7-Zip"
"""Substring identifying the banner line of 7-Zip.

e.g. ``7-Zip (a) 19.00 (x64) : Copyright (c) 1999-2018 Igor Pavlov``
"""

UNRAR_MARKER = "UNRAR"
"""Substring identifying the banner line of UnRAR.

e.g. ``UNRAR 5.70 x64 freeware      Copyright (c) 1993-2019 Alexander Roshal``
"""

PYTHON_CANDIDATES = ("python3", "python", "py")
"""Interpreter commands probed on PATH when none is configured."""

DEFAULT_SEVEN_ZIP_CMD = "7z"
"""Default 7-Zip command line."""

DEFAULT_UNRAR_CMD = "unrar"
"""Default UnRAR command line."""

DOCKER_ENV_FILE = "/.dockerenv"
"""Marker file present inside Docker containers."""

OS_RELEASE_FILE = "/etc/os-release"
"""Linux distribution identification file."""

CPUINFO_FILE = "/proc/cpuinfo"
"""Linux CPU information pseudo-file."""

EXIT_ERROR = 1
"""Exit code indicating a general application error."""

EXIT_CONFIG_ERROR = 2
"""Exit code indicating a configuration error.

Used when the application terminates due to invalid configuration or
configuration validation failures.
"""
