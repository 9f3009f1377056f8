"""Core hostsnap functionality."""

from __future__ import annotations

from hostsnap.core.aggregator import SnapshotBuilder
from hostsnap.core.cache import CacheEntry, TimedValue
from hostsnap.core.deadline import Deadline
from hostsnap.core.interfaces import NetworkResolver, PlatformProbe, ToolResolver
from hostsnap.core.models import (
    CpuInfo,
    LibraryInfo,
    NetworkInfo,
    OsInfo,
    Snapshot,
    ToolInfo,
)

__all__ = [
    "CacheEntry",
    "CpuInfo",
    "Deadline",
    "LibraryInfo",
    "NetworkInfo",
    "NetworkResolver",
    "OsInfo",
    "PlatformProbe",
    "Snapshot",
    "SnapshotBuilder",
    "TimedValue",
    "ToolInfo",
    "ToolResolver",
]
