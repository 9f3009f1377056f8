"""Host diagnostic snapshots for support tooling."""

__version__ = "0.1.0"
