# Core shared modules for both FastAPI and stdlib servers
from .config import Config, setup_logging
from .routes import (
    NOT_FOUND,
    ROUTES,
    TEXT_PLAIN,
    RouteResponse,
    RouteRule,
    build_route_table,
    resolve,
)

__all__ = [
    # Config
    "Config",
    "setup_logging",
    # Routing
    "NOT_FOUND",
    "ROUTES",
    "TEXT_PLAIN",
    "RouteResponse",
    "RouteRule",
    "build_route_table",
    "resolve",
]
