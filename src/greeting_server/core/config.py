"""
Shared configuration for both the FastAPI and stdlib servers.
"""
import os
import logging
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Centralized configuration. Only the log level comes from the environment."""

    # Listener (fixed, loopback only)
    HOST = "127.0.0.1"
    PORT = 3000

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def setup_logging():
    """Configure logging based on LOG_LEVEL."""
    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
    return logging.getLogger("greeting_server")
