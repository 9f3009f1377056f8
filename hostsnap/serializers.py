"""Rendering of snapshots to JSON and to an XML-RPC style struct document.

Both renderers are pure and emit a single line with groups in the order
OS, CPU, Network, Tools, Libraries. In the XML form every leaf is wrapped as
``<value><string>...</string></value>`` and an empty leaf is written as the
self-closing ``<string/>``.
"""

from __future__ import annotations

import json
import re
from typing import Any

from hostsnap.core.models import Snapshot

_XML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
}

_XML_SPECIAL = re.compile(r"[&<>\"'\x00-\x1f]")


def _escape_char(match: re.Match[str]) -> str:
    char = match.group(0)
    return _XML_ESCAPES.get(char) or f"&#{ord(char)};"


def xml_escape(value: str) -> str:
    """Escape markup metacharacters and control characters for XML text.

    Parameters
    ----------
    value : str
        Raw string value

    Returns
    -------
    str
        Value safe to place between XML tags
    """
    return _XML_SPECIAL.sub(_escape_char, value)


def to_dict(snapshot: Snapshot) -> dict[str, Any]:
    """Convert a snapshot into nested dicts and lists in wire key order.

    Parameters
    ----------
    snapshot : Snapshot
        Snapshot to convert

    Returns
    -------
    dict[str, Any]
        Mapping with keys OS, CPU, Network, Tools and Libraries
    """
    return {
        "OS": {
            "Name": snapshot.os.name,
            "Version": snapshot.os.version,
        },
        "CPU": {
            "Model": snapshot.cpu.model,
            "Arch": snapshot.cpu.arch,
        },
        "Network": {
            "PublicIP": snapshot.network.public_ip,
            "PrivateIP": snapshot.network.private_ip,
        },
        "Tools": [
            {"Name": tool.name, "Version": tool.version, "Path": tool.path}
            for tool in snapshot.tools
        ],
        "Libraries": [
            {"Name": library.name, "Version": library.version}
            for library in snapshot.libraries
        ],
    }


def to_json(snapshot: Snapshot) -> str:
    """Render a snapshot as a compact single-line JSON object.

    Non-ASCII characters are written as-is; quotes, backslashes and control
    characters are escaped by the JSON encoder.
    """
    return json.dumps(to_dict(snapshot), separators=(",", ":"), ensure_ascii=False)


def _member(name: str, value: str) -> str:
    if value:
        rendered = f"<string>{xml_escape(value)}</string>"
    else:
        rendered = "<string/>"
    return f"<member><name>{name}</name><value>{rendered}</value></member>"


def _members(fields: dict[str, str]) -> str:
    return "".join(_member(name, value) for name, value in fields.items())


def to_xml(snapshot: Snapshot) -> str:
    """Render a snapshot as a single-line XML-RPC style struct value.

    Each group is a container element holding its members. Tool and library
    entries are written as consecutive member runs inside their container,
    in snapshot order.

    Parameters
    ----------
    snapshot : Snapshot
        Snapshot to render

    Returns
    -------
    str
        Document of the form ``<value><struct><OS>...</OS>...</struct></value>``
    """
    data = to_dict(snapshot)

    groups = []
    for group in ("OS", "CPU", "Network"):
        groups.append(f"<{group}>{_members(data[group])}</{group}>")

    for group in ("Tools", "Libraries"):
        entries = "".join(_members(entry) for entry in data[group])
        groups.append(f"<{group}>{entries}</{group}>")

    return f"<value><struct>{''.join(groups)}</struct></value>"
