"""Public and private address discovery over a minimal HTTPS exchange.

The client speaks just enough HTTP/1.1 to ask the diagnostic endpoint which
address the request came from. The private address is the local end of the
same connection, i.e. the address this host used to reach the internet.
"""

from __future__ import annotations

import ipaddress
import logging
import socket
import ssl
import time
from collections.abc import Callable
from typing import Any

from hostsnap import __version__
from hostsnap.constants import (
    DIAGNOSTIC_HOST,
    DIAGNOSTIC_PORT,
    NETWORK_CACHE_TTL_SECONDS,
    NETWORK_TIMEOUT_SECONDS,
    RECV_CHUNK_SIZE,
)
from hostsnap.core.cache import CacheEntry, TimedValue
from hostsnap.core.deadline import Deadline, cap_timeout
from hostsnap.core.libraries import GZIP_SUPPORTED
from hostsnap.core.models import NetworkInfo
from hostsnap.exceptions import HttpProtocolError, NetworkProbeError
from hostsnap.services.http import HttpResponse, ParserState, ResponseParser

logger = logging.getLogger(__name__)

HTTP_OK = 200


def build_request(host: str, user_agent: str, accept_gzip: bool = GZIP_SUPPORTED) -> bytes:
    """Build the literal GET request sent to the diagnostic endpoint.

    Parameters
    ----------
    host : str
        Value of the Host header
    user_agent : str
        Value of the User-Agent header, e.g. "hostsnap/0.1.0"
    accept_gzip : bool
        Whether to advertise gzip content encoding

    Returns
    -------
    bytes
        Complete request including the terminating blank line
    """
    lines = [
        "GET / HTTP/1.1",
        f"Host: {host}",
        f"User-Agent: {user_agent}",
    ]

    if accept_gzip:
        lines.append("Accept-Encoding: gzip")

    lines.append("Connection: close")

    return ("\r\n".join(lines) + "\r\n\r\n").encode("ascii")


def read_response(sock: Any, parser: ResponseParser) -> HttpResponse:
    """Read from a connected socket until the response is complete.

    Parameters
    ----------
    sock : Any
        Connected socket-like object with ``recv``
    parser : ResponseParser
        Fresh parser to feed

    Returns
    -------
    HttpResponse
        Parsed response

    Raises
    ------
    HttpProtocolError
        If the response is malformed
    OSError
        If reading from the socket fails or times out
    """
    while parser.state is not ParserState.DONE:
        chunk = sock.recv(RECV_CHUNK_SIZE)
        if not chunk:
            break
        parser.feed(chunk)

    return parser.finish()


def parse_public_ip(response: HttpResponse) -> str:
    """Extract the public IP literal from the response body.

    Raises
    ------
    HttpProtocolError
        If the trimmed body is not an IP address literal
    """
    body = response.text().strip()

    try:
        return str(ipaddress.ip_address(body))
    except ValueError as e:
        raise HttpProtocolError(
            f"Response body is not an IP address: {body[:64]!r}", response.status_code
        ) from e


class NetworkIdentityClient:
    """Resolve and cache this host's public and private addresses.

    Only the first resolved endpoint is tried, without retries. Results are
    cached for ``ttl_seconds``; a failed attempt never replaces the cached
    entry.

    Parameters
    ----------
    host : str
        Diagnostic endpoint hostname, also used for SNI
    port : int
        Diagnostic endpoint port (default: 443)
    ttl_seconds : float
        Maximum age of a served cached result (default: 2 hours)
    timeout : float
        Seconds allowed for each socket operation (default: 5)
    stale_if_error : bool
        Serve the last successful result, whatever its age, when a refresh
        fails. When False a failed refresh yields an empty NetworkInfo.
    user_agent : str | None
        User-Agent header value (default: "hostsnap/<version>")
    ssl_context : ssl.SSLContext | None
        TLS context; defaults to the platform trust roots with hostname
        checking
    resolver : Callable | None
        ``socket.getaddrinfo`` compatible resolver
    connection_factory : Callable | None
        ``socket.create_connection`` compatible connector
    clock : Callable[[], float]
        Monotonic time source for the cache
    """

    def __init__(
        self,
        host: str = DIAGNOSTIC_HOST,
        port: int = DIAGNOSTIC_PORT,
        ttl_seconds: float = NETWORK_CACHE_TTL_SECONDS,
        timeout: float = NETWORK_TIMEOUT_SECONDS,
        stale_if_error: bool = False,
        user_agent: str | None = None,
        ssl_context: ssl.SSLContext | None = None,
        resolver: Callable[..., list] | None = None,
        connection_factory: Callable[..., Any] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self.stale_if_error = stale_if_error
        self.user_agent = user_agent or f"hostsnap/{__version__}"
        self._ssl_context = ssl_context
        self._clock = clock
        self._resolver = resolver or socket.getaddrinfo
        self._connection_factory = connection_factory or socket.create_connection
        self._cache: TimedValue[NetworkInfo] = TimedValue(
            ttl_seconds=ttl_seconds,
            is_valid=lambda info: info.is_complete,
            clock=clock,
        )

    @property
    def cached(self) -> CacheEntry[NetworkInfo] | None:
        """Last successful result and when it was resolved, if any."""
        return self._cache.peek()

    def invalidate(self) -> None:
        """Forget the cached result so the next call hits the network."""
        self._cache.clear()

    def _get_ssl_context(self) -> ssl.SSLContext:
        if self._ssl_context is None:
            self._ssl_context = ssl.create_default_context()
        return self._ssl_context

    def resolve(self, deadline: Deadline | None = None) -> NetworkInfo:
        """Return the host's network identity, from cache when fresh.

        Never raises: failures are logged and produce the fallback value.

        Parameters
        ----------
        deadline : Deadline | None
            Overall budget for the attempt

        Returns
        -------
        NetworkInfo
            Both addresses, or both empty when they could not be determined
        """
        try:
            return self._cache.get_or_refresh(lambda: self.fetch(deadline))
        except (OSError, ValueError, NetworkProbeError) as e:
            logger.warning("Failed to get public and private IP: %s", e)

        return self._fallback()

    def _fallback(self) -> NetworkInfo:
        entry = self._cache.peek()

        if self.stale_if_error and entry is not None and entry.value.is_complete:
            logger.info(
                "Using network identity resolved %.0fs ago",
                self._clock() - entry.resolved_at,
            )
            return entry.value

        return NetworkInfo()

    def fetch(self, deadline: Deadline | None = None) -> NetworkInfo:
        """Perform one uncached resolution attempt.

        Parameters
        ----------
        deadline : Deadline | None
            Overall budget for the attempt

        Returns
        -------
        NetworkInfo
            Both addresses populated

        Raises
        ------
        NetworkProbeError
            If no endpoint resolves, the deadline passed, or the response
            is not a 200 carrying an IP literal
        OSError
            If connecting, the TLS handshake, or socket I/O fails
        """
        if deadline is not None and deadline.expired():
            raise NetworkProbeError("Deadline reached before network probe")

        timeout = cap_timeout(self.timeout, deadline)

        endpoints = self._resolver(self.host, self.port, type=socket.SOCK_STREAM)
        if not endpoints:
            raise NetworkProbeError(f"No endpoints found for {self.host}")

        address = endpoints[0][4][:2]
        logger.debug("Connecting to %s:%s (%s)", self.host, self.port, address[0])

        with self._connection_factory(address, timeout=timeout) as raw_sock:
            with self._get_ssl_context().wrap_socket(
                raw_sock, server_hostname=self.host
            ) as tls_sock:
                tls_sock.sendall(build_request(self.host, self.user_agent))
                response = read_response(tls_sock, ResponseParser(expected_status=HTTP_OK))
                private_ip = tls_sock.getsockname()[0]

        public_ip = parse_public_ip(response)

        logger.debug("Resolved public IP %s, private IP %s", public_ip, private_ip)

        return NetworkInfo(public_ip=public_ip, private_ip=private_ip)
