"""Tests for the linked library table."""

import ssl

import yaml

from hostsnap.core.libraries import LIBRARIES, openssl_version


class TestLibraries:
    def test_order(self) -> None:
        names = [library.name for library in LIBRARIES]
        build_order = ("Expat", "ncurses", "Gzip", "OpenSSL", "PyYAML")
        expected = [name for name in build_order if name in names]

        assert names == expected
        assert {"Expat", "OpenSSL", "PyYAML"} <= set(names)

    def test_versions_populated(self) -> None:
        assert all(library.version for library in LIBRARIES)

    def test_pyyaml_version(self) -> None:
        versions = {library.name: library.version for library in LIBRARIES}

        assert versions["PyYAML"] == yaml.__version__

    def test_table_is_immutable(self) -> None:
        assert isinstance(LIBRARIES, tuple)


class TestOpensslVersion:
    def test_openssl_banner(self) -> None:
        assert openssl_version("OpenSSL 3.0.13 30 Jan 2024") == "3.0.13"

    def test_legacy_letter_release(self) -> None:
        assert openssl_version("OpenSSL 1.1.1w  11 Sep 2023") == "1.1.1w"

    def test_libressl(self) -> None:
        assert openssl_version("LibreSSL 3.3.6") == "3.3.6"

    def test_no_version(self) -> None:
        assert openssl_version(" unknown ") == "unknown"

    def test_runtime_banner(self) -> None:
        assert openssl_version(ssl.OPENSSL_VERSION)
