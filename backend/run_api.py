#!/usr/bin/env python
"""
Run the AirMode API server.

Usage:
    uv run python run_api.py
    uv run python run_api.py --reload  # Development mode
    uv run python run_api.py --memory  # In-memory storage, no Supabase needed
"""

import argparse
import logging
import os

import uvicorn

from shared.config import get_settings


def main():
    parser = argparse.ArgumentParser(description="Run AirMode API server")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--host", type=str, help="Host to bind to")
    parser.add_argument("--port", type=int, help="Port to bind to")
    parser.add_argument("--memory", action="store_true", help="Use the in-memory storage backend")
    args = parser.parse_args()

    if args.memory:
        os.environ["STORAGE_BACKEND"] = "memory"
        get_settings.cache_clear()

    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    uvicorn.run(
        "api:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload or settings.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
