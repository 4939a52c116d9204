import logging
from contextlib import asynccontextmanager
from typing import Tuple

from fastapi import FastAPI, HTTPException, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core import ROUTES, RouteResponse, RouteRule, resolve

logger = logging.getLogger(__name__)

# Every method the catch-all route accepts; anything else reaches the
# router through the 405 handler below.
ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"]


async def render(request: Request, outcome: RouteResponse) -> Response:
    """Turn a routing outcome into a Starlette response."""
    if outcome.is_default_body:
        return await http_exception_handler(
            request, HTTPException(status_code=outcome.status_code)
        )
    return Response(
        content=outcome.body,
        status_code=outcome.status_code,
        media_type=outcome.content_type,
    )


def create_app(rules: Tuple[RouteRule, ...] = ROUTES) -> FastAPI:
    """Build the ASGI app. The route table is closed over, never mutated."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Greeting server starting with {len(rules)} route rules")
        for rule in rules:
            logger.debug(f"  {rule.method} {rule.path} -> {rule.status_code}")
        yield
        logger.info("Shutting down greeting server")

    app = FastAPI(
        title="Greeting Server",
        description="Fixed greeting endpoints for integration harnesses",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.rules = rules

    @app.exception_handler(StarletteHTTPException)
    async def routing_miss_handler(request: Request, exc: StarletteHTTPException):
        """Send framework-level method misses back through the route table."""
        if exc.status_code == 405:
            return await render(request, resolve(request.method, request.url.path, rules))
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error for {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse({"detail": "Internal server error"}, status_code=500)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        try:
            response = await call_next(request)
        except Exception as e:
            logger.debug(f"{request.method} {request.url.path} failed: {e}")
            raise
        logger.debug(f"{request.method} {request.url.path} -> {response.status_code}")
        return response

    @app.api_route("/{path:path}", methods=ROUTED_METHODS, include_in_schema=False)
    async def dispatch(request: Request):
        return await render(request, resolve(request.method, request.url.path, rules))

    return app


app = create_app()
