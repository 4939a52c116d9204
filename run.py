#!/usr/bin/env python3
"""
Run the greeting server.

Usage:
    python run.py              # FastAPI/uvicorn
    python run.py --stdlib     # stdlib http.server

    # or with venv
    .venv/bin/python run.py
    .venv/bin/python run.py --stdlib
"""
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))


if __name__ == "__main__":
    from greeting_server.cli import main

    sys.exit(main())
