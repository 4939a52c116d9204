"""
Pytest configuration for greeting-server tests.

Puts the src directory on the Python path so tests can import
greeting_server without an install, and provides live-server fixtures
for both listener backends on ephemeral ports.
"""
import sys
import socket
import threading
import time
from pathlib import Path

import pytest

# Add src directory to Python path
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from greeting_server.listener import bind_socket, build_uvicorn_server  # noqa: E402
from greeting_server.main import create_app  # noqa: E402
from greeting_server.stdlib_server import create_server  # noqa: E402


@pytest.fixture
def busy_port():
    """A loopback port that something is already listening on."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(1)
    yield sock.getsockname()[1]
    sock.close()


@pytest.fixture
def uvicorn_base_url():
    """Run the FastAPI app under uvicorn in a background thread."""
    sock = bind_socket("127.0.0.1", 0)
    port = sock.getsockname()[1]
    server = build_uvicorn_server(create_app(), "warning")
    thread = threading.Thread(target=server.run, kwargs={"sockets": [sock]}, daemon=True)
    thread.start()

    deadline = time.monotonic() + 10
    while not server.started:
        if time.monotonic() > deadline or not thread.is_alive():
            raise RuntimeError("uvicorn did not start")
        time.sleep(0.01)

    yield f"http://127.0.0.1:{port}"

    server.should_exit = True
    thread.join(timeout=10)
    sock.close()


@pytest.fixture
def stdlib_server():
    """Run the stdlib server in a background thread."""
    server = create_server("127.0.0.1", 0)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()
    thread.join(timeout=10)


@pytest.fixture
def stdlib_base_url(stdlib_server):
    host, port = stdlib_server.server_address[:2]
    return f"http://{host}:{port}"
