"""Versions of the support libraries linked into this interpreter.

The table is computed once at import time from the interpreter's build
constants. Its membership and order never change within a process.
"""

from __future__ import annotations

import pyexpat
import re
import ssl

import yaml

from hostsnap.core.models import LibraryInfo

try:
    import zlib
except ImportError:  # interpreter built without zlib
    zlib = None

try:
    import curses
except ImportError:  # no curses module on this platform
    curses = None


def openssl_version(version_text: str) -> str:
    """Extract the dotted version from an OpenSSL version banner.

    Parameters
    ----------
    version_text : str
        Banner such as "OpenSSL 3.0.13 30 Jan 2024"

    Returns
    -------
    str
        Dotted version such as "3.0.13", or the banner itself if no version
        token is present
    """
    match = re.search(r"\d+\.\d+(?:\.\d+)?[a-z]?", version_text)
    return match.group(0) if match else version_text.strip()


def _collect_libraries() -> tuple[LibraryInfo, ...]:
    libraries = [LibraryInfo("Expat", pyexpat.EXPAT_VERSION.removeprefix("expat_"))]

    ncurses_version = getattr(curses, "ncurses_version", None)
    if ncurses_version is not None:
        libraries.append(
            LibraryInfo(
                "ncurses",
                f"{ncurses_version.major}.{ncurses_version.minor}",
            )
        )

    if zlib is not None:
        libraries.append(LibraryInfo("Gzip", zlib.ZLIB_VERSION))

    libraries.append(LibraryInfo("OpenSSL", openssl_version(ssl.OPENSSL_VERSION)))

    libraries.append(LibraryInfo("PyYAML", yaml.__version__))

    return tuple(libraries)


GZIP_SUPPORTED = zlib is not None
"""Whether gzip content decoding is available to the network client."""

LIBRARIES = _collect_libraries()
"""Linked support libraries in build order."""
