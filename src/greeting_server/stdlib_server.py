"""
Greeting server using Python stdlib http.server.

Same route table as the FastAPI app, no uvicorn in the loop. Each
connection gets its own thread; the router shares nothing mutable.
"""
import logging
from http.server import ThreadingHTTPServer, BaseHTTPRequestHandler
from typing import Tuple
from urllib.parse import unquote

from .core import Config, ROUTES, RouteRule, resolve
from .listener import BindError, announce

logger = logging.getLogger(__name__)


class GreetingRequestHandler(BaseHTTPRequestHandler):
    """Dispatches every request through the route table."""

    protocol_version = "HTTP/1.1"  # keep-alive
    server_version = "GreetingServer/1.0"
    timeout = 30  # Idle keep-alive connections
    rules: Tuple[RouteRule, ...] = ROUTES

    def log_message(self, format, *args):
        logger.info(f"[{self.client_address[0]}] {format % args}")

    def request_path(self) -> str:
        """
        Path without query string, percent-decoded like an ASGI scope path.

        Taken from the raw request line: parse_request() collapses a
        leading '//' in self.path, which would change what gets matched.
        """
        words = self.requestline.split()
        target = words[1] if len(words) >= 2 else self.path
        return unquote(target.split("?", 1)[0].split("#", 1)[0])

    def discard_body(self):
        """Consume the request body so the next request on the connection parses cleanly."""
        if "chunked" in self.headers.get("Transfer-Encoding", "").lower():
            self.close_connection = True
            return
        try:
            content_length = int(self.headers.get("Content-Length", 0))
        except ValueError:
            self.close_connection = True
            return
        if content_length < 0:
            self.close_connection = True
        elif content_length > 0:
            self.rfile.read(content_length)

    def dispatch(self):
        self.discard_body()
        path = self.request_path()
        try:
            outcome = resolve(self.command, path, self.rules)
        except Exception as e:
            logger.error(f"Unhandled error for {self.command} {path}: {e}", exc_info=True)
            self.send_error(500, "Internal server error")
            return

        if outcome.is_default_body:
            self.send_error(outcome.status_code)
            return

        body = outcome.body.encode("utf-8")
        self.send_response(outcome.status_code)
        self.send_header("Content-Type", outcome.content_type)
        self.send_header("Content-Length", str(len(body)))
        if self.close_connection:
            self.send_header("Connection", "close")
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(body)

    do_GET = dispatch
    do_HEAD = dispatch
    do_POST = dispatch
    do_PUT = dispatch
    do_PATCH = dispatch
    do_DELETE = dispatch
    do_OPTIONS = dispatch
    do_TRACE = dispatch


def make_handler(rules: Tuple[RouteRule, ...]):
    """Handler class bound to a specific route table."""
    return type("BoundGreetingRequestHandler", (GreetingRequestHandler,), {"rules": rules})


def create_server(host: str = None, port: int = None, rules: Tuple[RouteRule, ...] = ROUTES) -> ThreadingHTTPServer:
    """Bind the stdlib server, or raise BindError."""
    host = host or Config.HOST
    port = Config.PORT if port is None else port
    try:
        server = ThreadingHTTPServer((host, port), make_handler(rules))
    except OSError as e:
        raise BindError(host, port, e) from e
    server.daemon_threads = True
    return server


def serve(host: str = None, port: int = None) -> int:
    """Bind, announce and serve until interrupted. Returns an exit code."""
    server = create_server(host, port)
    bound_host, bound_port = server.server_address[:2]
    announce(bound_host, bound_port)
    logger.info("Using http.server module - no FastAPI/uvicorn")

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    finally:
        server.server_close()
    return 0
