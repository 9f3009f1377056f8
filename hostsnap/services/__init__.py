"""Services that talk to the outside world (subprocesses, the network)."""

from __future__ import annotations

from hostsnap.services.network import NetworkIdentityClient
from hostsnap.services.tools import ToolVersionResolver

__all__ = [
    "NetworkIdentityClient",
    "ToolVersionResolver",
]
