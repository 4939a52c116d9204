"""
Socket ownership for the uvicorn backend.

The socket is bound here, synchronously, before uvicorn starts, so a busy
port fails the process immediately instead of surfacing inside the event
loop after startup.
"""
import errno
import logging
import socket
from typing import Optional

import uvicorn

from .core import Config

logger = logging.getLogger(__name__)


class BindError(RuntimeError):
    """The listener could not bind its address. Always fatal."""

    def __init__(self, host: str, port: int, cause: OSError):
        self.host = host
        self.port = port
        self.cause = cause
        super().__init__(self.describe())

    def describe(self) -> str:
        if self.cause.errno == errno.EADDRINUSE:
            reason = "address already in use"
        elif self.cause.errno in (errno.EACCES, errno.EPERM):
            reason = "permission denied"
        else:
            reason = self.cause.strerror or str(self.cause)
        return f"Cannot bind {self.host}:{self.port}: {reason}"


def bind_socket(host: str, port: int, backlog: int = 128) -> socket.socket:
    """Bind and listen on host:port, or raise BindError. No retries."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    # Allows restarts over TIME_WAIT; a live listener on the port still fails
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
        sock.listen(backlog)
    except OSError as e:
        sock.close()
        raise BindError(host, port, e) from e
    return sock


def announce(host: str, port: int):
    """Print the one startup line harnesses wait for."""
    print(f"Server running at http://{host}:{port}/", flush=True)


def build_uvicorn_server(app, log_level: Optional[str] = None) -> uvicorn.Server:
    config = uvicorn.Config(
        app,
        log_level=(log_level or Config.LOG_LEVEL).lower(),
        http="h11",   # HTTP/1.1 only
        ws="none",    # No WebSocket support
        lifespan="on",
    )
    return uvicorn.Server(config)


def serve(host: str = None, port: int = None, log_level: str = None) -> int:
    """Bind, announce and run the FastAPI app until shutdown. Returns an exit code."""
    from .main import app

    host = host or Config.HOST
    port = Config.PORT if port is None else port

    sock = bind_socket(host, port)
    bound_port = sock.getsockname()[1]
    announce(host, bound_port)

    server = build_uvicorn_server(app, log_level)
    try:
        server.run(sockets=[sock])
    except KeyboardInterrupt:
        # uvicorn re-raises the signal it handled once shutdown completes
        logger.info("Shutting down...")
        return 0
    finally:
        sock.close()

    if not server.started:
        logger.error("Application failed to start")
        return 1
    return 0
