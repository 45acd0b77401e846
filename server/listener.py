"""
Network listener construction and the blocking serve loop.

The listener is bound before the ASGI server starts so that bind and
permission failures surface as startup errors.
"""

from __future__ import annotations

import logging
import os
import socket
from typing import Optional

import uvicorn

logger = logging.getLogger(__name__)

BACKLOG = 2048


class ServeError(Exception):
    """The HTTP server could not start or stopped abnormally."""


def split_host_port(addr: str) -> tuple[str, int]:
    """Split ``host:port`` (``:port`` means all interfaces)."""
    host, sep, port = addr.rpartition(":")
    if not sep:
        raise ValueError(f"address {addr}: missing port in address")
    try:
        port_num = int(port)
    except ValueError:
        raise ValueError(f"address {addr}: invalid port") from None
    return host.strip("[]"), port_num


def create_listener(proto: str, addr: str) -> socket.socket:
    """
    Create a bound, listening stream socket.

    Args:
        proto: ``tcp``, ``tcp4``, ``tcp6`` or ``unix``
        addr: ``host:port`` for tcp, a filesystem path for unix

    For unix sockets any stale file at ``addr`` is removed first, and the
    new socket file is made world read/write/executable so other local
    processes (e.g. a reverse proxy) can connect.

    Raises:
        OSError: If binding or changing permissions fails
        ValueError: If proto or addr are invalid
    """
    if proto == "unix":
        try:
            os.remove(addr)
        except FileNotFoundError:
            pass

        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.bind(addr)
            sock.listen(BACKLOG)
        except OSError:
            sock.close()
            raise

        try:
            os.chmod(addr, 0o777)
        except OSError:
            sock.close()
            raise

        logger.info(f"Listening on unix socket {addr}")
        return sock

    if proto in ("tcp", "tcp4", "tcp6"):
        host, port = split_host_port(addr)
        if not host and proto == "tcp" and socket.has_dualstack_ipv6():
            # ":port" accepts both IPv4 and IPv6 clients
            sock = socket.create_server(
                ("", port), family=socket.AF_INET6, backlog=BACKLOG, dualstack_ipv6=True
            )
        else:
            family = socket.AF_INET6 if proto == "tcp6" or ":" in host else socket.AF_INET
            sock = socket.create_server((host, port), family=family, backlog=BACKLOG)
        logger.info(f"Listening on {proto} {addr}")
        return sock

    raise ValueError(f"unsupported protocol: {proto!r} (expected tcp or unix)")


def serve(
    app,
    listener: socket.socket,
    tlscert: str = "",
    tlskey: str = "",
    log_level: Optional[str] = None,
) -> None:
    """
    Serve ``app`` on ``listener`` until the process is stopped.

    Plaintext when ``tlscert`` is empty, TLS otherwise.

    Raises:
        ServeError: If the server failed to start
    """
    tls = {}
    if tlscert:
        tls = {"ssl_certfile": tlscert, "ssl_keyfile": tlskey or None}
        logger.info(f"TLS enabled with certificate {tlscert}")

    config = uvicorn.Config(
        app,
        lifespan="on",
        log_config=None,
        log_level=log_level.lower() if log_level else None,
        **tls,
    )
    server = uvicorn.Server(config)
    try:
        server.run(sockets=[listener])
    except SystemExit as e:
        # uvicorn exits on its own when the lifespan startup fails
        raise ServeError(f"server failed to start (exit status {e.code})") from None

    if not server.started:
        raise ServeError("server failed to start")
