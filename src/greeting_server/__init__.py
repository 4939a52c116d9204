"""Minimal local HTTP server with two fixed greeting routes."""

__version__ = "1.0.0"
