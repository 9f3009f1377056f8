"""Pytest configuration and fixtures for hostsnap unit tests."""

import os
import ssl
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import yaml

from hostsnap.core.models import CpuInfo, LibraryInfo, NetworkInfo, OsInfo, Snapshot, ToolInfo
from tests.unit.fakes.fake_network import (
    FakeClock,
    FakeConnector,
    FakeSSLContext,
    fake_resolver,
)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def ssl_context() -> FakeSSLContext:
    return FakeSSLContext()


@pytest.fixture
def make_client(
    clock: FakeClock, connector: FakeConnector, ssl_context: FakeSSLContext
) -> Callable[..., Any]:
    """Build NetworkIdentityClient instances wired to the fakes."""
    from hostsnap.services.network import NetworkIdentityClient

    def _make(**kwargs: Any) -> NetworkIdentityClient:
        kwargs.setdefault("host", "ip.example.test")
        kwargs.setdefault("user_agent", "hostsnap/test")
        kwargs.setdefault("ssl_context", ssl_context)
        kwargs.setdefault("resolver", fake_resolver)
        kwargs.setdefault("connection_factory", connector)
        kwargs.setdefault("clock", clock)
        return NetworkIdentityClient(**kwargs)

    return _make


@pytest.fixture
def handshake_error() -> ssl.SSLError:
    return ssl.SSLError("certificate verify failed")


@pytest.fixture
def sample_snapshot() -> Snapshot:
    return Snapshot(
        os=OsInfo("Linux", "12"),
        cpu=CpuInfo("Generic CPU", "x86_64"),
        network=NetworkInfo("203.0.113.5", "192.168.1.10"),
        tools=(ToolInfo("Python", "3.12.3", "/usr/bin/python3"),),
        libraries=(LibraryInfo("LibXML2", "2.12.6"),),
    )


@pytest.fixture(autouse=True)
def clean_hostsnap_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure HOSTSNAP_* variables from the outer environment do not leak in."""
    for name in list(os.environ):
        if name.startswith("HOSTSNAP_"):
            monkeypatch.delenv(name)


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOSTSNAP_CONFIG at a temporary config file path."""
    config_path = tmp_path / "hostsnap.yaml"
    monkeypatch.setenv("HOSTSNAP_CONFIG", str(config_path))
    return config_path


@pytest.fixture
def write_config(config_file: Path) -> Generator[Callable[[dict], Path], None, None]:
    """Write a config dict as YAML to the temporary config file."""

    def _write(config_data: dict) -> Path:
        config_file.write_text(yaml.dump(config_data))
        return config_file

    yield _write
